"""
The lexical vocabulary: what kinds of token exist, and what a token carries.
"""
from enum import Enum, auto
from typing import NamedTuple, Union

class TokenType(Enum):
	# Single-character tokens.
	LEFT_PAREN = auto()
	RIGHT_PAREN = auto()
	LEFT_BRACE = auto()
	RIGHT_BRACE = auto()
	COMMA = auto()
	DOT = auto()
	MINUS = auto()
	PLUS = auto()
	SEMICOLON = auto()
	SLASH = auto()
	STAR = auto()

	# One or two character tokens.
	BANG = auto()
	BANG_EQUAL = auto()
	EQUAL = auto()
	EQUAL_EQUAL = auto()
	GREATER = auto()
	GREATER_EQUAL = auto()
	LESS = auto()
	LESS_EQUAL = auto()

	# Literals.
	IDENTIFIER = auto()
	STRING = auto()
	NUMBER = auto()

	# Keywords.
	AND = auto()
	CLASS = auto()
	ELSE = auto()
	FALSE = auto()
	FUN = auto()
	FOR = auto()
	IF = auto()
	NIL = auto()
	OR = auto()
	PRINT = auto()
	RETURN = auto()
	SUPER = auto()
	THIS = auto()
	TRUE = auto()
	VAR = auto()
	WHILE = auto()

	EOF = auto()

RESERVED = {
	word: TokenType[word.upper()]
	for word in (
		"and", "class", "else", "false", "for", "fun", "if", "nil",
		"or", "print", "return", "super", "this", "true", "var", "while",
	)
}

LITERAL = Union[float, str, None]

class Token(NamedTuple):
	""" Immutable lexical unit. The offset serves only to illustrate diagnostics. """
	type: TokenType
	lexeme: str
	literal: LITERAL
	line: int
	offset: int = 0

	def __str__(self): return "%s %s %s" % (self.type.name, self.lexeme, self.literal)
