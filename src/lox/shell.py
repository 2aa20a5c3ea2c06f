"""Interactive prompt for the Lox interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, Ctrl-D to exit."
    prompt = "> "

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess

    def default(self, line):
        """Runs one line of Lox source."""
        with self.sess.reporter:  # needed because cmd.Cmd exits on Exception
            self.sess.run_line(line)

    def do_help(self, arg):
        """Short intro instead of command docs."""
        print("Type Lox declarations and statements, e.g. 'var a = 1; print a + 2;'.\n"
              "A bare expression such as 'a * 2' is evaluated and its value printed.\n"
              "Variables and functions persist between lines.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return True
