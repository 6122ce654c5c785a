"""Error handling for the dlang language. Only InterpreterErrors should be encountered during running: if another type
of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.
"""

import sys

from termcolor import colored


class InterpreterError(Exception):
    """Templates an error message so that it can be used to throw a dlang error. exprs are the snippets substituted
    into msg; exprs[0] should be the offending snippet that caused the error.
    """
    kind = "error"

    def __init__(self, msg, exprs=None, line_num=None, col=None, width=None, diagnosis=True, internal=False):
        """Parses args for InterpreterError."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.plain = msg.format(*exprs)
        self.expr = exprs[0]

        self.line_num = line_num
        self.col = col
        self.width = width if width is not None else max(len(self.expr), 1)  # needed for error display

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.plain)


class LexError(InterpreterError):
    """No token rule matches at some position of the source."""
    kind = "lex error"


class ParseError(InterpreterError):
    """Tokens do not form a valid program."""
    kind = "parse error"


class EvaluationError(InterpreterError):
    """A well-formed program did something illegal while running."""
    kind = "runtime error"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report dlang errors on stderr."""
    ERROR = "red"

    def __init__(self, fatal=True, diagnosis=False, stream=None):
        self.fatal = fatal
        self.diagnosis = diagnosis
        self.stream = stream
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Called by Session when an error is raised."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, line):
        """Returns line with the offending part of it highlighted and bolded, plus a caret marker underneath."""
        start = error.col
        if start is None:
            start = max(line.find(error.expr), 0) if error.expr else 0
        end = min(start + error.width, len(line)) if line else start + 1
        end = max(end, start + 1)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def format(self, error):
        """Returns the diagnostic message for error, using self.traceback to locate it."""
        location, line = "", None
        for file, (registered, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            location = f"{file}:{line_num}: " if line_num is not None else f"{file}: "
            line = registered

        error_msg = colored(location, attrs=["bold"]) if location else ""
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored(f"{error.kind}: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg

        if self.diagnosis and not error.internal and error.diagnosis and line:
            error_msg += "\n" + ErrorHandler.diagnose(error, line)
        return error_msg

    def throw(self, error):
        """Throws error using error and self.traceback. error must be an InterpreterError, and self.traceback must be
        a dict of file: (line, line_num) representing origination of error.
        """
        print(self.format(error), file=self.stream if self.stream is not None else sys.stderr)

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(InterpreterError("keyboard interrupt", diagnosis=False))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(InterpreterError("maximum recursion depth exceeded", diagnosis=False))
        elif exc_type is not None and issubclass(exc_type, InterpreterError):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(InterpreterError("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
