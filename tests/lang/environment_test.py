import unittest

from dlang.lang.environment import Environment
from dlang.lang.error import EvaluationError


class EnvironmentTestCase(unittest.TestCase):

    def setUp(self):
        self.root = Environment({"a": 1, "b": 2})
        self.child = self.root.extend({"b": 20, "c": 30})
        self.grandchild = self.child.extend({})

    def test_lookup(self):
        cases = {"a": 1, "b": 20, "c": 30}
        for case, expected in cases.items():
            self.assertEqual(expected, self.grandchild.lookup(case), case)
        self.assertEqual(2, self.root.lookup("b"))

        with self.assertRaises(EvaluationError) as context:
            self.grandchild.lookup("d")
        self.assertEqual("undefined variable 'd'", str(context.exception))

        self.assertRaises(EvaluationError, self.root.lookup, "c")  # children are not visible from parents

    def test_define(self):
        self.grandchild.define("a", 100)
        self.assertEqual(100, self.grandchild.lookup("a"))
        self.assertEqual(1, self.root.lookup("a"))

        self.root.define("a", 5)  # rebinding is not an error
        self.assertEqual(5, self.child.lookup("a"))

    def test_assign(self):
        self.grandchild.assign("a", 10)
        self.assertEqual(10, self.root.lookup("a"))
        self.assertEqual({}, self.grandchild.bindings)

        self.grandchild.assign("b", 200)  # nearest binding wins
        self.assertEqual(200, self.child.lookup("b"))
        self.assertEqual(2, self.root.lookup("b"))

        with self.assertRaises(EvaluationError) as context:
            self.grandchild.assign("d", 1)
        self.assertEqual("assignment to undeclared variable 'd'", str(context.exception))

    def test_resolve(self):
        self.assertIs(self.root, self.grandchild.resolve("a"))
        self.assertIs(self.child, self.grandchild.resolve("b"))
        self.assertIsNone(self.grandchild.resolve("d"))
        self.assertIn("c", self.grandchild)
        self.assertNotIn("c", self.root)

    def test_bindings_is_a_copy(self):
        bindings = self.root.bindings
        bindings["z"] = 0
        self.assertNotIn("z", self.root)
        self.assertIs(self.root, self.child.parent)
        self.assertIsNone(self.root.parent)


if __name__ == '__main__':
    unittest.main()
