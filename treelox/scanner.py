"""
Characters in, tokens out.

A single left-to-right pass with maximal munch. Lexical errors go to the report
and the scan carries on, so later passes still see whatever tokens were found.
"""
from .tokens import Token, TokenType, RESERVED
from .diagnostics import Report

T = TokenType

_SINGLE = {
	"(": T.LEFT_PAREN, ")": T.RIGHT_PAREN,
	"{": T.LEFT_BRACE, "}": T.RIGHT_BRACE,
	",": T.COMMA, ".": T.DOT,
	"-": T.MINUS, "+": T.PLUS,
	";": T.SEMICOLON, "*": T.STAR,
}

# A lone character, or that character followed by "=".
_WITH_EQUAL = {
	"!": (T.BANG, T.BANG_EQUAL),
	"=": (T.EQUAL, T.EQUAL_EQUAL),
	"<": (T.LESS, T.LESS_EQUAL),
	">": (T.GREATER, T.GREATER_EQUAL),
}

_WHITESPACE = frozenset(" \r\t")

def _is_digit(c:str) -> bool: return "0" <= c <= "9"
def _is_alpha(c:str) -> bool: return "a" <= c <= "z" or "A" <= c <= "Z" or c == "_"
def _is_alphanumeric(c:str) -> bool: return _is_alpha(c) or _is_digit(c)


class Scanner:
	_tokens: list[Token]

	def __init__(self, source:str, report:Report):
		self._source = source
		self._report = report
		self._tokens = []
		self._start = 0
		self._current = 0
		self._line = 1

	def scan_tokens(self) -> list[Token]:
		while not self._at_end():
			self._start = self._current
			self._scan_token()
		self._tokens.append(Token(T.EOF, "", None, self._line, len(self._source)))
		return self._tokens

	def _scan_token(self):
		c = self._advance()
		if c in _SINGLE:
			self._add(_SINGLE[c])
		elif c in _WITH_EQUAL:
			lone, paired = _WITH_EQUAL[c]
			self._add(paired if self._match("=") else lone)
		elif c == "/":
			if self._match("/"):
				while self._peek() != "\n" and not self._at_end(): self._advance()
			elif self._match("*"):
				self._block_comment()
			else:
				self._add(T.SLASH)
		elif c in _WHITESPACE:
			pass
		elif c == "\n":
			self._line += 1
		elif c == '"':
			self._string()
		elif _is_digit(c):
			self._number()
		elif _is_alpha(c):
			self._identifier()
		else:
			self._report.lexical_error(self._line, "Unexpected character.")

	def _block_comment(self):
		while not self._at_end():
			if self._peek() == "*" and self._peek_next() == "/":
				self._current += 2
				return
			if self._advance() == "\n": self._line += 1
		self._report.lexical_error(self._line, "Unterminated comment.")

	def _string(self):
		while self._peek() != '"' and not self._at_end():
			if self._advance() == "\n": self._line += 1
		if self._at_end():
			self._report.lexical_error(self._line, "Unterminated string.")
			return
		self._advance()  # The closing quote.
		self._add(T.STRING, self._source[self._start+1:self._current-1])

	def _number(self):
		while _is_digit(self._peek()): self._advance()
		if self._peek() == "." and _is_digit(self._peek_next()):
			self._advance()
			while _is_digit(self._peek()): self._advance()
		self._add(T.NUMBER, float(self._source[self._start:self._current]))

	def _identifier(self):
		while _is_alphanumeric(self._peek()): self._advance()
		text = self._source[self._start:self._current]
		self._add(RESERVED.get(text, T.IDENTIFIER))

	def _at_end(self) -> bool: return self._current >= len(self._source)

	def _advance(self) -> str:
		c = self._source[self._current]
		self._current += 1
		return c

	def _match(self, expected:str) -> bool:
		if self._at_end() or self._source[self._current] != expected: return False
		self._current += 1
		return True

	def _peek(self) -> str:
		return "" if self._at_end() else self._source[self._current]

	def _peek_next(self) -> str:
		nxt = self._current + 1
		return "" if nxt >= len(self._source) else self._source[nxt]

	def _add(self, kind:TokenType, literal=None):
		lexeme = self._source[self._start:self._current]
		self._tokens.append(Token(kind, lexeme, literal, self._line, self._start))


def scan(source:str, report:Report) -> list[Token]:
	return Scanner(source, report).scan_tokens()
