"""
The set of parse-nodes in simple form.
The parser calls these constructors bottom-up; nothing mutates them afterward.

Nodes deliberately keep Python's default identity-based hashing and equality:
the resolver's scope-distance map is keyed by the node itself, so two
textually-identical references at different places remain distinct keys.
"""
from typing import Optional, Sequence
from .tokens import Token, LITERAL

class Expr:
	""" Base of the expression family. """
	__slots__ = ()

class Stmt:
	""" Base of the statement family. """
	__slots__ = ()

###############################################################################
# Expressions

class Literal(Expr):
	__slots__ = ("value",)
	def __init__(self, value:LITERAL|bool): self.value = value
	def __repr__(self): return "<lit %r>" % (self.value,)

class Unary(Expr):
	__slots__ = ("op", "right")
	def __init__(self, op:Token, right:Expr):
		self.op, self.right = op, right
	def __repr__(self): return "(%s %r)" % (self.op.lexeme, self.right)

class Binary(Expr):
	__slots__ = ("left", "op", "right")
	def __init__(self, left:Expr, op:Token, right:Expr):
		self.left, self.op, self.right = left, op, right
	def __repr__(self): return "(%s %r %r)" % (self.op.lexeme, self.left, self.right)

class Logical(Expr):
	""" Like Binary, but the right operand might never be evaluated. """
	__slots__ = ("left", "op", "right")
	def __init__(self, left:Expr, op:Token, right:Expr):
		self.left, self.op, self.right = left, op, right
	def __repr__(self): return "(%s %r %r)" % (self.op.lexeme, self.left, self.right)

class Grouping(Expr):
	__slots__ = ("expression",)
	def __init__(self, expression:Expr): self.expression = expression
	def __repr__(self): return "(group %r)" % (self.expression,)

class Variable(Expr):
	__slots__ = ("name",)
	def __init__(self, name:Token): self.name = name
	def __repr__(self): return "<ref:%s>" % self.name.lexeme

class Assign(Expr):
	__slots__ = ("name", "value")
	def __init__(self, name:Token, value:Expr):
		self.name, self.value = name, value
	def __repr__(self): return "(= %s %r)" % (self.name.lexeme, self.value)

class Call(Expr):
	""" The closing paren is kept so run-time errors have a place to point. """
	__slots__ = ("callee", "paren", "arguments")
	def __init__(self, callee:Expr, paren:Token, arguments:Sequence[Expr]):
		self.callee, self.paren, self.arguments = callee, paren, tuple(arguments)
	def __repr__(self): return "(call %r %r)" % (self.callee, list(self.arguments))

class Get(Expr):
	__slots__ = ("object", "name")
	def __init__(self, object:Expr, name:Token):
		self.object, self.name = object, name
	def __repr__(self): return "(. %r %s)" % (self.object, self.name.lexeme)

class Set(Expr):
	__slots__ = ("object", "name", "value")
	def __init__(self, object:Expr, name:Token, value:Expr):
		self.object, self.name, self.value = object, name, value
	def __repr__(self): return "(.= %r %s %r)" % (self.object, self.name.lexeme, self.value)

class This(Expr):
	__slots__ = ("keyword",)
	def __init__(self, keyword:Token): self.keyword = keyword
	def __repr__(self): return "<this>"

class Super(Expr):
	__slots__ = ("keyword", "method")
	def __init__(self, keyword:Token, method:Token):
		self.keyword, self.method = keyword, method
	def __repr__(self): return "<super.%s>" % self.method.lexeme

###############################################################################
# Statements

class Expression(Stmt):
	__slots__ = ("expression",)
	def __init__(self, expression:Expr): self.expression = expression
	def __repr__(self): return "(; %r)" % (self.expression,)

class Print(Stmt):
	__slots__ = ("expression",)
	def __init__(self, expression:Expr): self.expression = expression
	def __repr__(self): return "(print %r)" % (self.expression,)

class Var(Stmt):
	__slots__ = ("name", "initializer")
	def __init__(self, name:Token, initializer:Optional[Expr]):
		self.name, self.initializer = name, initializer
	def __repr__(self): return "(var %s %r)" % (self.name.lexeme, self.initializer)

class Block(Stmt):
	__slots__ = ("statements",)
	def __init__(self, statements:Sequence[Stmt]): self.statements = tuple(statements)
	def __repr__(self): return "(block %r)" % (list(self.statements),)

class If(Stmt):
	__slots__ = ("condition", "then_branch", "else_branch")
	def __init__(self, condition:Expr, then_branch:Stmt, else_branch:Optional[Stmt]):
		self.condition, self.then_branch, self.else_branch = condition, then_branch, else_branch
	def __repr__(self): return "(if %r %r %r)" % (self.condition, self.then_branch, self.else_branch)

class While(Stmt):
	__slots__ = ("condition", "body")
	def __init__(self, condition:Expr, body:Stmt):
		self.condition, self.body = condition, body
	def __repr__(self): return "(while %r %r)" % (self.condition, self.body)

class Function(Stmt):
	__slots__ = ("name", "params", "body")
	def __init__(self, name:Token, params:Sequence[Token], body:Sequence[Stmt]):
		self.name, self.params, self.body = name, tuple(params), tuple(body)
	def __repr__(self): return "(fun %s(%s))" % (self.name.lexeme, ", ".join(p.lexeme for p in self.params))

class Return(Stmt):
	__slots__ = ("keyword", "value")
	def __init__(self, keyword:Token, value:Optional[Expr]):
		self.keyword, self.value = keyword, value
	def __repr__(self): return "(return %r)" % (self.value,)

class Class(Stmt):
	__slots__ = ("name", "superclass", "methods")
	def __init__(self, name:Token, superclass:Optional[Variable], methods:Sequence[Function]):
		self.name, self.superclass, self.methods = name, superclass, tuple(methods)
	def __repr__(self): return "(class %s)" % self.name.lexeme
