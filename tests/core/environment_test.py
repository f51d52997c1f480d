import unittest

from bananascript.core.environment import Environment, new_root_environment
from bananascript.core.object import FALSE, NULL, TRUE, Integer


class EnvironmentTestCase(unittest.TestCase):

    def test_define_and_get(self):
        env = new_root_environment()

        self.assertIsNone(env.get("x"))
        self.assertEqual(Integer(1), env.define("x", Integer(1)))
        self.assertEqual(Integer(1), env.get("x"))
        self.assertIn("x", env)
        self.assertNotIn("y", env)

    def test_get_walks_outward(self):
        root = new_root_environment()
        middle = Environment.new_enclosed(root)
        inner = Environment.new_enclosed(middle)

        root.define("a", Integer(1))
        middle.define("b", Integer(2))

        self.assertEqual(Integer(1), inner.get("a"))
        self.assertEqual(Integer(2), inner.get("b"))
        self.assertIsNone(root.get("b"))
        self.assertIs(middle, inner.outer)
        self.assertIsNone(root.outer)

    def test_define_shadows(self):
        root = new_root_environment()
        inner = Environment.new_enclosed(root)

        root.define("x", Integer(1))
        inner.define("x", Integer(2))

        self.assertEqual(Integer(2), inner.get("x"))
        self.assertEqual(Integer(1), root.get("x"))

    def test_assign_mutates_nearest_binding(self):
        root = new_root_environment()
        middle = Environment.new_enclosed(root)
        inner = Environment.new_enclosed(middle)

        root.define("x", Integer(1))
        middle.define("x", Integer(2))

        self.assertTrue(inner.assign("x", Integer(3)))
        self.assertEqual(Integer(3), middle.get("x"))
        self.assertEqual(Integer(1), root.get("x"))
        self.assertNotIn("x", inner.store)

    def test_assign_does_not_declare(self):
        root = new_root_environment()
        inner = Environment.new_enclosed(root)

        self.assertFalse(inner.assign("missing", NULL))
        self.assertIsNone(inner.get("missing"))
        self.assertEqual({}, root.store)

    def test_falsy_values_are_found(self):
        env = new_root_environment()
        env.define("f", FALSE)
        env.define("n", NULL)

        self.assertIs(FALSE, env.get("f"))
        self.assertIs(NULL, env.get("n"))
        self.assertTrue(env.assign("f", TRUE))


if __name__ == '__main__':
    unittest.main()
