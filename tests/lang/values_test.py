import sys
import unittest

from dlang.grammar.nodes import BlockStatement
from dlang.lang.environment import Environment
from dlang.lang.error import EvaluationError
from dlang.lang.values import Function, is_number, render, truthy, type_name

INT_DIGIT_LIMIT = sys.get_int_max_str_digits() if hasattr(sys, "get_int_max_str_digits") else 0  # 0: no limit


class ValuesTestCase(unittest.TestCase):

    def setUp(self):
        self.function = Function("f", ["a", "b"], BlockStatement([]), Environment())

    def test_render(self):
        cases = [  # not a dict: 0 == False and 1 == True would collide as keys
            (7, "7"),
            (0, "0"),
            (1, "1"),
            (-3, "-3"),
            (2.0, "2"),
            (3.5, "3.5"),
            (0.1 + 0.2, "0.30000000000000004"),
            ("Hello", "Hello"),
            ("", ""),
            (True, "true"),
            (False, "false"),
            (None, "none"),
        ]
        for case, expected in cases:
            self.assertEqual(expected, render(case), repr(case))

        self.assertRaises(EvaluationError, render, self.function)

    @unittest.skipUnless(INT_DIGIT_LIMIT, "int to str conversion is unlimited")
    def test_render_huge_number(self):
        with self.assertRaises(EvaluationError) as context:
            render(10 ** INT_DIGIT_LIMIT)
        self.assertEqual("number too large to print", str(context.exception))

    def test_truthy(self):
        should_pass = [1, -1, 0.5, "a", " ", True]
        for case in should_pass:
            self.assertTrue(truthy(case), repr(case))

        should_fail = [0, 0.0, "", False, None]
        for case in should_fail:
            self.assertFalse(truthy(case), repr(case))

        self.assertRaises(EvaluationError, truthy, self.function)

    def test_type_name(self):
        cases = [(1, "number"), (1.5, "number"), ("s", "string"), (True, "boolean"), (None, "none"),
                 (self.function, "function")]
        for case, expected in cases:
            self.assertEqual(expected, type_name(case), repr(case))

        self.assertRaises(EvaluationError, type_name, [1])

    def test_is_number(self):
        self.assertTrue(is_number(1))
        self.assertTrue(is_number(1.5))
        self.assertFalse(is_number(True))
        self.assertFalse(is_number("1"))

    def test_function(self):
        self.assertEqual(2, self.function.arity)
        self.assertEqual("<function f(a, b)>", str(self.function))
        self.assertNotEqual(self.function, Function("f", ["a", "b"], BlockStatement([]), Environment()))


if __name__ == '__main__':
    unittest.main()
