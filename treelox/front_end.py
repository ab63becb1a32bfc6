"""
The pipeline, end to end: text -> tokens -> tree -> distances -> effects.
"""
import sys
from typing import Optional, TextIO
from . import syntax
from .diagnostics import Report
from .scanner import scan
from .parser import parse
from .resolution import resolve
from .interpreter import Interpreter

# Each level of Lox nesting costs several Python frames.
RECURSION_LIMIT = 20000

class Session:
	"""
	One per interactive session (or script run).
	It keeps the interpreter, hence the global frame, across calls to `run`;
	the report's flags are the caller's business to reset between lines.
	"""
	def __init__(self, report:Report, out:TextIO=None):
		self.report = report
		if sys.getrecursionlimit() < RECURSION_LIMIT:
			sys.setrecursionlimit(RECURSION_LIMIT)
		self.interpreter = Interpreter(report, out or sys.stdout)

	def check(self, text:str, path=None) -> Optional[list[syntax.Stmt]]:
		""" Scan, parse and resolve. Returns the statements if nothing was wrong. """
		report = self.report
		report.set_source(text, path)
		tokens = scan(text, report)
		report.info("Scanned %d tokens." % len(tokens))
		statements = parse(tokens, report)
		if report.had_error: return None
		distances = resolve(statements, report, self.interpreter.globals)
		if report.had_error: return None
		report.info("Resolved %d local references." % len(distances))
		self.interpreter.resolve(distances)
		return statements

	def run(self, text:str, path=None):
		statements = self.check(text, path)
		if statements is not None:
			self.interpreter.interpret(statements)
