import io
import os
import unittest
from unittest import mock

from dlang.lang.error import ErrorHandler, EvaluationError, InterpreterError, LexError, ParseError


class ErrorTestCase(unittest.TestCase):

    def setUp(self):
        patcher = mock.patch.dict(os.environ, {"ANSI_COLORS_DISABLED": "1"})  # compare plain text
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_message(self):
        error = EvaluationError("'{}' expects {} argument(s) but got {}", ("f", 1, 2))
        self.assertEqual("'f' expects 1 argument(s) but got 2", str(error))
        self.assertEqual("'f' expects 1 argument(s) but got 2", error.plain)
        self.assertEqual("f", error.expr)
        self.assertEqual(1, error.width)

        error = InterpreterError("keyboard interrupt")
        self.assertEqual("", error.expr)
        self.assertIsNone(error.line_num)

        # user text containing braces is never treated as a template
        self.assertEqual("undefined variable '{x}'", str(EvaluationError("undefined variable '{}'", "{x}")))

    def test_kinds(self):
        cases = {LexError: "lex error", ParseError: "parse error", EvaluationError: "runtime error",
                 InterpreterError: "error"}
        for case, kind in cases.items():
            self.assertEqual(kind, case("msg").kind, case.__name__)
            self.assertTrue(issubclass(case, InterpreterError))

    def test_format(self):
        handler = ErrorHandler()
        handler.register_file("prog.dl")
        error = EvaluationError("undefined variable '{}'", "y", line_num=2)

        self.assertEqual("prog.dl: runtime error: undefined variable 'y'", handler.format(error))

        handler.register_line("prog.dl", "print y", 2)
        self.assertEqual("prog.dl:2: runtime error: undefined variable 'y'", handler.format(error))

        handler.remove_line("prog.dl")
        self.assertEqual("prog.dl: runtime error: undefined variable 'y'", handler.format(error))

        internal = EvaluationError("unknown node '{}'", "Bogus", internal=True)
        self.assertEqual("prog.dl: [internal] runtime error: unknown node 'Bogus'", handler.format(internal))

    def test_diagnose(self):
        cases = [
            (EvaluationError("undefined variable '{}'", "y"), "print y", "  print y\n        ^"),
            (LexError("unexpected input '{}'", "$ 3", col=10, width=1), "let b = 2 $ 3", "  let b = 2 $ 3\n            ^"),
            (ParseError("expected {} but found '{}'", ("a name", "5"), col=4, width=1), "let 5 = x", "  let 5 = x\n      ^"),
            (ParseError("expected {} but found '{}'", ("a name", "abc"), col=4, width=3), "let abc", "  let abc\n      ^~~"),
        ]
        for error, line, expected in cases:
            self.assertEqual(expected, ErrorHandler.diagnose(error, line), line)

        handler = ErrorHandler(diagnosis=True)
        handler.register_line("prog.dl", "print y", 1)
        self.assertEqual("prog.dl:1: runtime error: undefined variable 'y'\n  print y\n        ^",
                         handler.format(EvaluationError("undefined variable '{}'", "y", line_num=1)))

        no_diagnosis = InterpreterError("'{}' could not be opened", "prog.dl", diagnosis=False)
        self.assertEqual("prog.dl:1: error: 'prog.dl' could not be opened", handler.format(no_diagnosis))

    def test_fatal(self):
        stream = io.StringIO()
        with self.assertRaises(SystemExit) as context:
            with ErrorHandler(stream=stream) as handler:
                handler.register_file("prog.dl")
                raise ParseError("expected {} but reached end of input", "an expression")
        self.assertEqual(1, context.exception.code)
        self.assertEqual("prog.dl: parse error: expected an expression but reached end of input\n", stream.getvalue())

    def test_non_fatal(self):
        stream = io.StringIO()
        handler = ErrorHandler(fatal=False, stream=stream)
        handler.register_line("<in>", "print y", 3)

        with handler:
            raise EvaluationError("undefined variable '{}'", "y", line_num=3)
        self.assertEqual("<in>:3: runtime error: undefined variable 'y'\n", stream.getvalue())
        self.assertEqual({"<in>": (None, None)}, handler.traceback)  # reset for the next input

        with handler:
            raise KeyboardInterrupt
        self.assertIn("keyboard interrupt", stream.getvalue())

        with handler:
            raise RecursionError
        self.assertIn("maximum recursion depth exceeded", stream.getvalue())

    def test_internal_error(self):
        stream = io.StringIO()
        with self.assertRaises(ValueError):
            with ErrorHandler(fatal=False, stream=stream):
                raise ValueError("boom")
        self.assertEqual("[internal] error: unknown error: 'ValueError: boom'\n", stream.getvalue())

        with self.assertRaises(SystemExit):
            with ErrorHandler(fatal=False, stream=stream):
                raise SystemExit(0)


if __name__ == '__main__':
    unittest.main()
