"""
Tokens in, statement list out.

Recursive descent, one method per rung of the precedence ladder:

	program     -> declaration* EOF
	declaration -> classDecl | funDecl | varDecl | statement
	statement   -> exprStmt | forStmt | ifStmt | printStmt | returnStmt | whileStmt | block
	expression  -> assignment
	assignment  -> ( call "." )? IDENTIFIER "=" assignment | logic_or
	logic_or    -> logic_and ( "or" logic_and )*
	logic_and   -> equality ( "and" equality )*
	equality    -> comparison ( ( "!=" | "==" ) comparison )*
	comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
	term        -> factor ( ( "-" | "+" ) factor )*
	factor      -> unary ( ( "/" | "*" ) unary )*
	unary       -> ( "!" | "-" ) unary | call
	call        -> primary ( "(" arguments? ")" | "." IDENTIFIER )*
	primary     -> "true" | "false" | "nil" | "this" | NUMBER | STRING
	             | IDENTIFIER | "(" expression ")" | "super" "." IDENTIFIER

Errors are reported as they are found. The parse then skips ahead to
something that looks like the start of a statement and carries on.
"""
from typing import Optional
from . import syntax
from .tokens import Token, TokenType
from .errors import LoxParseError
from .diagnostics import Report

T = TokenType

MAX_ARGUMENTS = 255

# A statement probably begins right before one of these:
_STATEMENT_STARTERS = frozenset([T.CLASS, T.FUN, T.VAR, T.FOR, T.IF, T.WHILE, T.PRINT, T.RETURN])

# Left-associative binary rungs, highest precedence last.
_EQUALITY = (T.BANG_EQUAL, T.EQUAL_EQUAL)
_COMPARISON = (T.GREATER, T.GREATER_EQUAL, T.LESS, T.LESS_EQUAL)
_TERM = (T.MINUS, T.PLUS)
_FACTOR = (T.SLASH, T.STAR)


class Parser:
	def __init__(self, tokens:list[Token], report:Report):
		if not tokens or tokens[-1].type is not T.EOF:
			raise ValueError("The token list must end with EOF.")
		self._tokens = tokens
		self._report = report
		self._current = 0

	def parse(self) -> list[syntax.Stmt]:
		statements = []
		while not self._at_end():
			try: stmt = self._declaration()
			except RecursionError:
				self._report.error(self._peek(), "Too much nesting.")
				self._synchronize()
				continue
			if stmt is not None: statements.append(stmt)
		return statements

	def parse_expression(self) -> Optional[syntax.Expr]:
		""" Handy for tests and tools: one bare expression. """
		try: return self._expression()
		except LoxParseError: return None

	# Declarations

	def _declaration(self) -> Optional[syntax.Stmt]:
		try:
			if self._match(T.CLASS): return self._class_declaration()
			if self._match(T.FUN): return self._function("function")
			if self._match(T.VAR): return self._var_declaration()
			return self._statement()
		except LoxParseError:
			self._synchronize()
			return None

	def _class_declaration(self) -> syntax.Class:
		name = self._consume(T.IDENTIFIER, "Expect class name.")
		superclass = None
		if self._match(T.LESS):
			self._consume(T.IDENTIFIER, "Expect superclass name.")
			superclass = syntax.Variable(self._previous())
		self._consume(T.LEFT_BRACE, "Expect '{' before class body.")
		methods = []
		while not self._check(T.RIGHT_BRACE) and not self._at_end():
			methods.append(self._function("method"))
		self._consume(T.RIGHT_BRACE, "Expect '}' after class body.")
		return syntax.Class(name, superclass, methods)

	def _function(self, kind:str) -> syntax.Function:
		name = self._consume(T.IDENTIFIER, "Expect %s name." % kind)
		self._consume(T.LEFT_PAREN, "Expect '(' after %s name." % kind)
		params = []
		if not self._check(T.RIGHT_PAREN):
			while True:
				if len(params) >= MAX_ARGUMENTS:
					self._error(self._peek(), "Can't have more than %d parameters." % MAX_ARGUMENTS)
				params.append(self._consume(T.IDENTIFIER, "Expect parameter name."))
				if not self._match(T.COMMA): break
		self._consume(T.RIGHT_PAREN, "Expect ')' after parameters.")
		self._consume(T.LEFT_BRACE, "Expect '{' before %s body." % kind)
		return syntax.Function(name, params, self._block())

	def _var_declaration(self) -> syntax.Var:
		name = self._consume(T.IDENTIFIER, "Expect variable name.")
		initializer = self._expression() if self._match(T.EQUAL) else None
		self._consume(T.SEMICOLON, "Expect ';' after variable declaration.")
		return syntax.Var(name, initializer)

	# Statements

	def _statement(self) -> syntax.Stmt:
		if self._match(T.FOR): return self._for_statement()
		if self._match(T.IF): return self._if_statement()
		if self._match(T.PRINT): return self._print_statement()
		if self._match(T.RETURN): return self._return_statement()
		if self._match(T.WHILE): return self._while_statement()
		if self._match(T.LEFT_BRACE): return syntax.Block(self._block())
		return self._expression_statement()

	def _for_statement(self) -> syntax.Stmt:
		""" There is no For node: the loop comes out as the equivalent while-loop. """
		self._consume(T.LEFT_PAREN, "Expect '(' after 'for'.")
		if self._match(T.SEMICOLON): initializer = None
		elif self._match(T.VAR): initializer = self._var_declaration()
		else: initializer = self._expression_statement()

		condition = None if self._check(T.SEMICOLON) else self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after loop condition.")
		increment = None if self._check(T.RIGHT_PAREN) else self._expression()
		self._consume(T.RIGHT_PAREN, "Expect ')' after for clauses.")
		body = self._statement()

		if increment is not None:
			body = syntax.Block([body, syntax.Expression(increment)])
		if condition is None:
			condition = syntax.Literal(True)
		body = syntax.While(condition, body)
		if initializer is not None:
			body = syntax.Block([initializer, body])
		return body

	def _if_statement(self) -> syntax.If:
		self._consume(T.LEFT_PAREN, "Expect '(' after 'if'.")
		condition = self._expression()
		self._consume(T.RIGHT_PAREN, "Expect ')' after if condition.")
		then_branch = self._statement()
		else_branch = self._statement() if self._match(T.ELSE) else None
		return syntax.If(condition, then_branch, else_branch)

	def _print_statement(self) -> syntax.Print:
		value = self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after value.")
		return syntax.Print(value)

	def _return_statement(self) -> syntax.Return:
		keyword = self._previous()
		value = None if self._check(T.SEMICOLON) else self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after return value.")
		return syntax.Return(keyword, value)

	def _while_statement(self) -> syntax.While:
		self._consume(T.LEFT_PAREN, "Expect '(' after 'while'.")
		condition = self._expression()
		self._consume(T.RIGHT_PAREN, "Expect ')' after condition.")
		return syntax.While(condition, self._statement())

	def _block(self) -> list[syntax.Stmt]:
		statements = []
		while not self._check(T.RIGHT_BRACE) and not self._at_end():
			stmt = self._declaration()
			if stmt is not None: statements.append(stmt)
		self._consume(T.RIGHT_BRACE, "Expect '}' after block.")
		return statements

	def _expression_statement(self) -> syntax.Expression:
		expr = self._expression()
		self._consume(T.SEMICOLON, "Expect ';' after expression.")
		return syntax.Expression(expr)

	# Expressions

	def _expression(self) -> syntax.Expr:
		return self._assignment()

	def _assignment(self) -> syntax.Expr:
		expr = self._or()
		if self._match(T.EQUAL):
			equals = self._previous()
			value = self._assignment()
			if isinstance(expr, syntax.Variable):
				return syntax.Assign(expr.name, value)
			if isinstance(expr, syntax.Get):
				return syntax.Set(expr.object, expr.name, value)
			# Report, but no need to panic: the parser is not confused.
			self._error(equals, "Invalid assignment target.")
			return value
		return expr

	def _or(self) -> syntax.Expr:
		expr = self._and()
		while self._match(T.OR):
			op = self._previous()
			expr = syntax.Logical(expr, op, self._and())
		return expr

	def _and(self) -> syntax.Expr:
		expr = self._equality()
		while self._match(T.AND):
			op = self._previous()
			expr = syntax.Logical(expr, op, self._equality())
		return expr

	def _equality(self): return self._binary(self._comparison, _EQUALITY)
	def _comparison(self): return self._binary(self._term, _COMPARISON)
	def _term(self): return self._binary(self._factor, _TERM)
	def _factor(self): return self._binary(self._unary, _FACTOR)

	def _binary(self, operand, operators) -> syntax.Expr:
		expr = operand()
		while self._match(*operators):
			op = self._previous()
			expr = syntax.Binary(expr, op, operand())
		return expr

	def _unary(self) -> syntax.Expr:
		if self._match(T.BANG, T.MINUS):
			op = self._previous()
			return syntax.Unary(op, self._unary())
		return self._call()

	def _call(self) -> syntax.Expr:
		expr = self._primary()
		while True:
			if self._match(T.LEFT_PAREN):
				expr = self._finish_call(expr)
			elif self._match(T.DOT):
				name = self._consume(T.IDENTIFIER, "Expect property name after '.'.")
				expr = syntax.Get(expr, name)
			else:
				return expr

	def _finish_call(self, callee:syntax.Expr) -> syntax.Call:
		arguments = []
		if not self._check(T.RIGHT_PAREN):
			while True:
				if len(arguments) >= MAX_ARGUMENTS:
					self._error(self._peek(), "Can't have more than %d arguments." % MAX_ARGUMENTS)
				arguments.append(self._expression())
				if not self._match(T.COMMA): break
		paren = self._consume(T.RIGHT_PAREN, "Expect ')' after arguments.")
		return syntax.Call(callee, paren, arguments)

	def _primary(self) -> syntax.Expr:
		if self._match(T.FALSE): return syntax.Literal(False)
		if self._match(T.TRUE): return syntax.Literal(True)
		if self._match(T.NIL): return syntax.Literal(None)
		if self._match(T.NUMBER, T.STRING): return syntax.Literal(self._previous().literal)
		if self._match(T.SUPER):
			keyword = self._previous()
			self._consume(T.DOT, "Expect '.' after 'super'.")
			method = self._consume(T.IDENTIFIER, "Expect superclass method name.")
			return syntax.Super(keyword, method)
		if self._match(T.THIS): return syntax.This(self._previous())
		if self._match(T.IDENTIFIER): return syntax.Variable(self._previous())
		if self._match(T.LEFT_PAREN):
			expr = self._expression()
			self._consume(T.RIGHT_PAREN, "Expect ')' after expression.")
			return syntax.Grouping(expr)
		raise self._error(self._peek(), "Expect expression.")

	# Machinery

	def _match(self, *types:TokenType) -> bool:
		for t in types:
			if self._check(t):
				self._advance()
				return True
		return False

	def _consume(self, kind:TokenType, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)

	def _check(self, kind:TokenType) -> bool:
		return not self._at_end() and self._peek().type is kind

	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()

	def _at_end(self) -> bool: return self._peek().type is T.EOF
	def _peek(self) -> Token: return self._tokens[self._current]
	def _previous(self) -> Token: return self._tokens[self._current - 1]

	def _error(self, token:Token, message:str) -> LoxParseError:
		self._report.error(token, message)
		return LoxParseError(token, message)

	def _synchronize(self):
		""" Discard tokens until it looks like a fresh statement begins. """
		self._advance()
		while not self._at_end():
			if self._previous().type is T.SEMICOLON: return
			if self._peek().type in _STATEMENT_STARTERS: return
			self._advance()


def parse(tokens:list[Token], report:Report) -> list[syntax.Stmt]:
	return Parser(tokens, report).parse()
