"""Handles interactive/command-line mode for the bananascript interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """bananascript interpreter shell."""
    intro = "bananascript interpreter :: Python backend\nType 'help' for more information."
    prompt = ">> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = ">> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes an arbitrary bananascript entry, echoing its value."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            source = self._tmp_line + "\n" + line if self._tmp_line else line
            source, add_to_prev = self.sess.preprocess_line(source)

            if add_to_prev:
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(source, self.line_num)
            self.sess.run()

            if self.sess.results:
                print(self.sess.pop())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the bananascript interpreter!\n\n"
              "Entries are evaluated as you type them, and bindings persist between entries. \n"
              "An entry with an unclosed bracket continues on the next line.\n\n"
              "Try it out by typing 'let add = fn(a, b) { a + b };'. This binds a function to \n"
              "the name 'add'. Next, try typing 'add(2, 3)'. This calls 'add', giving 5 as \n"
              "the result.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
