"""
The exceptions that carry trouble between passes.
Both get reported to the Report exactly once, by whoever catches them.
"""
from boozetools.parsing.interface import ParseError
from .tokens import Token

class LoxParseError(ParseError):
	"""
	Internal signal from deep within the parser to the nearest declaration.
	By the time anyone sees it, the report already knows what went wrong.
	"""
	pass

class LoxRuntimeError(Exception):
	def __init__(self, token:Token, message:str):
		super().__init__(message)
		self.token = token
		self.message = message
