"""Handles interactive/command-line mode for the dlang interpreter. Uses cmd as backend."""

import cmd

from dlang.lang.lexical import KEYWORDS


class Shell(cmd.Cmd):
    """dlang interpreter shell."""
    intro = "dlang interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._start = 0  # line num of the first line in self._tmp_line
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary dlang input."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._start = self.line_num
                text = line
            else:
                text = self._tmp_line + "\n" + line

            text, add_to_prev = self.sess.preprocess_line(text)

            if add_to_prev:
                self._tmp_line = text
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(text, self._start)
            try:
                self.sess.run()
            finally:
                for output in self.sess.pop():
                    self.stdout.write(output + "\n")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        self.stdout.write("Welcome to the dlang interpreter!\n\n"
                          "Statements are run as soon as they are complete; a block left open with '{' continues \n"
                          "on the next line. Try 'let x = 2 + 3 * 4' and then 'print x'. Functions are declared \n"
                          "with 'function name(a, b) { dede a + b }' and called as 'name(1, 2)'.\n\n"
                          "Other commands: 'keywords' lists reserved words, 'exit' leaves.\n")

    def do_keywords(self, arg):
        """Lists reserved words."""
        self.stdout.write("\n".join(KEYWORDS) + "\n")

    def emptyline(self):
        """Do not repeat previous command on empty line, but keep an open block going."""
        if self._tmp_line:
            self.default("")

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
