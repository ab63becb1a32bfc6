"""
The error reporter.

Every stage of the pipeline tells the Report about trouble, and the Report
remembers. The front end decides what to do about it by way of the flags.
"""
import sys
from typing import Optional, TextIO
from boozetools.support.failureprone import SourceText, illustration

from .tokens import Token, TokenType

class Issue:
	""" One complaint, rendered the same way whether it reaches a console or a test. """
	def __init__(self, line:int, where:str, message:str, token:Optional[Token]=None):
		self.line, self.where, self.message, self.token = line, where, message, token

	def as_text(self) -> str:
		return "[line %d] Error%s: %s" % (self.line, self.where, self.message)

	def __str__(self): return self.as_text()

class RuntimeIssue(Issue):
	def as_text(self) -> str:
		return "%s\n[line %d]" % (self.message, self.line)

class Report:
	"""
	Accumulates issues and keeps the two cumulative flags.
	Resetting clears the flags and any unprinted issues, nothing else.
	"""
	issues: list[Issue]

	def __init__(self, *, verbose:int=0):
		self._verbose = verbose or 0   # Because None is incomparable.
		self.issues = []
		self._source = None
		self.had_error = False
		self.had_runtime_error = False

	def ok(self): return not (self.had_error or self.had_runtime_error)
	def sick(self): return self.had_error or self.had_runtime_error

	def reset(self):
		self.had_error = False
		self.had_runtime_error = False
		self.issues.clear()

	def set_source(self, text:str, path=None):
		""" Lets complaints quote the offending line. """
		self._source = SourceText(text, filename=None if path is None else str(path))

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	# Methods the scanner calls:
	def lexical_error(self, line:int, message:str):
		self._static(Issue(line, "", message))

	# Methods the parser and resolver call:
	def error(self, token:Token, message:str):
		if token.type is TokenType.EOF:
			where = " at end"
		else:
			where = " at '%s'" % token.lexeme
		self._static(Issue(token.line, where, message, token))

	def _static(self, issue:Issue):
		self.had_error = True
		self.issues.append(issue)

	# Methods the interpreter calls:
	def runtime_error(self, ex):
		""" Takes a LoxRuntimeError; see runtime.py """
		self.had_runtime_error = True
		self.issues.append(RuntimeIssue(ex.token.line, "", ex.message, ex.token))

	def complain_to_console(self, stream:TextIO=None):
		""" Emit all pending issues, then forget them. Flags stay put. """
		stream = stream or sys.stderr
		for issue in self.issues:
			print(issue.as_text(), file=stream)
			if self._verbose and issue.token is not None:
				picture = self._illustrate(issue.token)
				if picture: print(picture, file=stream)
		stream.flush()
		self.issues.clear()

	def _illustrate(self, token:Token) -> Optional[str]:
		if self._source is None or token.type is TokenType.EOF:
			return None
		row, col = self._source.find_row_col(token.offset)
		single_line = self._source.line_of_text(row)
		width = max(len(token.lexeme), 1)
		return illustration(single_line, col, width, prefix='% 6d |' % row)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self.sick():
			text = "\n".join(i.as_text() for i in self.issues)
			raise AssertionError(message + "\n" + text)
