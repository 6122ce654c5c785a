"""Session control for the dlang language. Runs the interpreter pipeline either on a whole file or on pieces of input
fed in from command-line mode, and maps errors back to the source lines they came from.
"""

import logging

from dlang.grammar.parser import parse
from dlang.lang.error import InterpreterError
from dlang.lang.evaluator import Evaluator
from dlang.lang.lexical import STRING, strip_comment, tokenize

logger = logging.getLogger(__name__)


class Session:
    """Governs a dlang session. Globals (variables and functions) live as long as the session does."""
    SH_FILE = "<in>"  # command-line interpreter filename
    DUMPS = ("tokens", "ast")

    def __init__(self, error_handler, path, cmd_line):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.evaluator = Evaluator()
        self.source = {}   # dict of line num: source line, for error messages
        self.tokens = []   # every token added so far
        self.to_exec = []  # statements waiting for run
        self.results = []  # printed lines waiting for pop

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    text = file.read()
            except OSError:
                raise InterpreterError("'{}' could not be opened", path, diagnosis=False)
            self.add(text, 1)

        elif not cmd_line:
            raise InterpreterError("'{}' is a reserved filename", Session.SH_FILE, diagnosis=False)

    @staticmethod
    def preprocess_line(text):
        """Preprocesses input from the command-line. Returns text without trailing whitespace and whether or not it
        still has open blocks, in which case more lines are needed before it can be added. Braces inside comments and
        string literals do not count.
        """
        code = "\n".join(STRING.sub("", strip_comment(line)) for line in text.splitlines())
        return text.rstrip(), code.count("{") > code.count("}")

    @property
    def bindings(self):
        """Global variables of this session."""
        return self.evaluator.globals.bindings

    def add(self, text, line_num):
        """Tokenizes and parses text, whose first line is line line_num of this session's input, and queues its
        statements. Nothing is executed until run is called.
        """
        for offset, line in enumerate(text.splitlines()):
            self.source[line_num + offset] = line

        try:
            tokens = tokenize(text, line_num)
            statements = parse(tokens)
        except InterpreterError as error:
            self._locate(error)
            raise

        logger.debug("%s: queued %d statement(s) from line %d", self.path, len(statements), line_num)
        self.tokens += tokens
        self.to_exec += statements

    def run(self):
        """Runs queued statements. Lines printed are kept in self.results even if an error is raised part-way."""
        statements, self.to_exec = self.to_exec, []
        try:
            self.evaluator.evaluate(statements)
        except InterpreterError as error:
            self._locate(error)
            raise
        finally:
            self.results += self.evaluator.output
            self.evaluator.output = []

    def pop(self):
        """Returns and forgets printed lines that have not been popped yet."""
        results, self.results = self.results, []
        return results

    def dump(self, kind):
        """Returns what has been added so far as text: one token per line, or the syntax tree of every statement."""
        if kind == "tokens":
            return [repr(token) for token in self.tokens]
        elif kind == "ast":
            return [statement.display() for statement in self.to_exec]
        raise InterpreterError("unknown dump '{}' (expected one of {})", (kind, ", ".join(Session.DUMPS)))

    def _locate(self, error):
        """Registers the source line error came from in the error handler's traceback."""
        if error.line_num is not None:
            self.error_handler.register_line(self.path, self.source.get(error.line_num, ""), error.line_num)
