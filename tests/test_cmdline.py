import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock
from unittest.mock import patch

from treelox import cmdline
from treelox.diagnostics import Report
from treelox.front_end import Session

class Silence(Report):
	def __init__(self):
		super().__init__()
		self.complain_to_console = mock.Mock()

class ScriptTests(unittest.TestCase):
	""" Exit codes, as the front end sees them. """

	def setUp(self) -> None:
		self.folder = tempfile.TemporaryDirectory()
		self.addCleanup(self.folder.cleanup)

	def script(self, text) -> Path:
		path = Path(self.folder.name) / "specimen.lox"
		path.write_text(text, encoding="utf-8")
		return path

	def run_script(self, text, check_only=False):
		out = io.StringIO()
		session = Session(Report(), out)
		with patch("sys.stderr", new_callable=io.StringIO) as err:
			code = cmdline.run_file(session, self.script(text), check_only)
		return code, out.getvalue(), err.getvalue()

	def test_success(self):
		code, out, err = self.run_script('print "hello";')
		self.assertEqual(cmdline.EX_OK, code)
		self.assertEqual("hello\n", out)
		self.assertEqual("", err)

	def test_static_error(self):
		code, out, err = self.run_script("print ;")
		self.assertEqual(cmdline.EX_DATAERR, code)
		self.assertEqual("", out)
		self.assertIn("[line 1] Error at ';': Expect expression.", err)

	def test_runtime_error(self):
		code, out, err = self.run_script('print "before"; print -nil;')
		self.assertEqual(cmdline.EX_SOFTWARE, code)
		self.assertEqual("before\n", out)
		self.assertIn("Operand must be a number.\n[line 1]", err)

	def test_check_only_does_not_run(self):
		code, out, err = self.run_script('print "hello";', check_only=True)
		self.assertEqual(cmdline.EX_OK, code)
		self.assertEqual("", out)
		self.assertIn("Looks plausible", err)

	def test_missing_file(self):
		session = Session(Report(), io.StringIO())
		with patch("sys.stderr", new_callable=io.StringIO):
			code = cmdline.run_file(session, Path(self.folder.name) / "absent.lox")
		self.assertEqual(cmdline.EX_USAGE, code)

	def test_too_many_arguments(self):
		with patch("sys.stderr", new_callable=io.StringIO):
			with self.assertRaises(SystemExit) as caught:
				cmdline.main(["one.lox", "two.lox"])
		self.assertEqual(cmdline.EX_USAGE, caught.exception.code)


class PromptTests(unittest.TestCase):

	@patch("sys.stderr", new_callable=io.StringIO)
	@patch("sys.stdout", new_callable=io.StringIO)
	def test_errors_do_not_end_the_session(self, _stdout, stderr):
		out = io.StringIO()
		session = Session(Report(), out)
		lines = io.StringIO("var a = 1;\nprint a +;\nprint nil + a;\na = a + 1;\nprint a;\n\nprint 99;\n")
		code = cmdline.run_prompt(session, lines)
		self.assertEqual(cmdline.EX_OK, code)
		self.assertEqual("2\n", out.getvalue())
		self.assertIn("Expect expression.", stderr.getvalue())
		self.assertIn("Operands must be two numbers or two strings.", stderr.getvalue())
		assert session.report.ok()

	@patch("sys.stdout", new_callable=io.StringIO)
	def test_complaints_are_flushed_after_every_line(self, _stdout):
		report = Silence()
		session = Session(report, io.StringIO())
		code = cmdline.run_prompt(session, io.StringIO("print 1;\nprint ;\nprint 2;\n"))
		self.assertEqual(cmdline.EX_OK, code)
		self.assertEqual(3, report.complain_to_console.call_count)
		assert report.ok(), "Each line starts afresh."


if __name__ == '__main__':
	unittest.main()
