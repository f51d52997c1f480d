import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from bananascript.lang.error import ErrorHandler, GenericException
from bananascript.lang.session import Session


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.error_handler = ErrorHandler()
        self.sess = Session(self.error_handler, Session.SH_FILE, cmd_line=True)

    def add_and_run(self, source, line_num=1):
        with redirect_stdout(self.out):
            self.sess.add(source, line_num)
            self.sess.run()
        return self.sess.pop()

    def test_command_line_is_not_fatal(self):
        self.assertFalse(self.error_handler.fatal)

    def test_bindings_persist(self):
        self.assertEqual("null", self.add_and_run("let x = 5;", 1))
        self.assertEqual("10", self.add_and_run("x * 2", 2))
        self.assertEqual("fn(a) {\n(a + x)\n}", self.add_and_run("let f = fn(a) { a + x }; f", 3))
        self.assertEqual("12", self.add_and_run("f(7)", 4))

    def test_syntax_errors(self):
        with redirect_stdout(self.out):
            with self.assertRaises(GenericException) as ctx:
                self.sess.add("let = 5", 1)

        self.assertEqual("2 syntax error(s), nothing was evaluated", ctx.exception.plain)
        self.assertEqual([], self.sess.to_exec)

        warnings = self.out.getvalue()
        self.assertIn("expected next token to be IDENT, got = instead", warnings)
        self.assertIn("no prefix parse function for token =", warnings)
        self.assertIn("<in>:1: ", warnings)

    def test_runtime_errors(self):
        with redirect_stdout(self.out):
            self.sess.add("let y = 1; 5 / 0; y = 2", 1)
            with self.assertRaises(GenericException) as ctx:
                self.sess.run()

        self.assertEqual("division by zero", ctx.exception.plain)
        self.assertEqual("division by zero", str(ctx.exception))
        self.assertEqual([], self.sess.to_exec)
        self.assertEqual("1", self.add_and_run("y", 2))

    def test_max_depth(self):
        sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, max_depth=3)
        sess.add("let f = fn(n) { if (n == 0) { 0 } else { f(n - 1) } }; f(2)", 1)
        sess.run()
        self.assertEqual("0", sess.pop())

        sess.add("f(3)", 2)
        with self.assertRaises(GenericException) as ctx:
            sess.run()
        self.assertEqual("maximum recursion depth exceeded", ctx.exception.plain)

    def test_preprocess_line(self):
        should_continue = ["fn(x) {", "let a = [1,", "f(", '"unterminated', "if (x) { if (y) { 1 }"]
        for case in should_continue:
            self.assertEqual((case, True), Session.preprocess_line(case), case)

        should_not_continue = ["let x = 1;", "fn(x) { x }", "}", '"{"', "// {", ""]
        for case in should_not_continue:
            self.assertEqual((case, False), Session.preprocess_line(case), case)

    def test_display(self):
        self.sess.add("1", 1)
        self.assertEqual("Program(expr='1', nodes=[\n    ExpressionStatement(expr='1', nodes=[\n"
                         "        IntegerLiteral(expr='1')\n    ])\n])", self.sess.display())

    def test_reserved_filename(self):
        self.assertRaises(GenericException, Session, ErrorHandler(), Session.SH_FILE, False)


class FileSessionTestCase(unittest.TestCase):

    def setUp(self):
        handle, self.path = tempfile.mkstemp(suffix=".bs")
        os.close(handle)

    def tearDown(self):
        os.remove(self.path)

    def write(self, source):
        with open(self.path, "w") as file:
            file.write(source)

    def test_run_file(self):
        self.write("// fibonacci\n"
                   "let fib = fn(n) {\n"
                   "    if (n < 2) { n } else { fib(n - 1) + fib(n - 2) }\n"
                   "};\n"
                   "print(fib(5));\n"
                   "fib(10);\n")

        out = io.StringIO()
        with redirect_stdout(out):
            sess = Session(ErrorHandler(), self.path, cmd_line=False)
            sess.run()

        self.assertEqual("55", sess.pop())
        self.assertEqual("5\n", out.getvalue())

    def test_missing_file(self):
        with self.assertRaises(GenericException) as ctx:
            Session(ErrorHandler(), self.path + ".missing", cmd_line=False)
        self.assertEqual(f"'{self.path}.missing' could not be opened", ctx.exception.plain)


if __name__ == '__main__':
    unittest.main()
