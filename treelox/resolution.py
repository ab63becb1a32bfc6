"""
All the static scope resolution stuff goes here.

By the time this pass is finished, every local variable reference
(and every `this` and `super`) is paired with the number of frames the
interpreter must hop outward to find it. References that turn up in no
local scope are left out of the map: they mean globals, found at run time.
"""
from enum import Enum, auto
from typing import Container
from boozetools.support.foundation import Visitor
from . import syntax
from .tokens import Token
from .diagnostics import Report

DISTANCES = dict[syntax.Expr, int]

class FunctionKind(Enum):
	NONE = auto()
	FUNCTION = auto()
	METHOD = auto()
	INITIALIZER = auto()

class ClassKind(Enum):
	NONE = auto()
	CLASS = auto()
	SUBCLASS = auto()

# Marks in a scope: has the name's initializer been resolved yet?
DECLARED, DEFINED = False, True


class TopDown(Visitor):
	"""
	Convenience base-class to handle the dreary bits of a
	perfectly ordinary top-down walk through a syntax tree.
	Nodes that bind or look up names are the subclass's business.
	"""

	def visit_Literal(self, expr:syntax.Literal): pass

	def visit_Unary(self, expr:syntax.Unary):
		self.visit(expr.right)

	def visit_Binary(self, expr:syntax.Binary):
		self.visit(expr.left)
		self.visit(expr.right)

	def visit_Logical(self, expr:syntax.Logical):
		self.visit(expr.left)
		self.visit(expr.right)

	def visit_Grouping(self, expr:syntax.Grouping):
		self.visit(expr.expression)

	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.callee)
		for a in expr.arguments:
			self.visit(a)

	def visit_Get(self, expr:syntax.Get):
		self.visit(expr.object)

	def visit_Set(self, expr:syntax.Set):
		self.visit(expr.value)
		self.visit(expr.object)

	def visit_Expression(self, stmt:syntax.Expression):
		self.visit(stmt.expression)

	def visit_Print(self, stmt:syntax.Print):
		self.visit(stmt.expression)

	def visit_If(self, stmt:syntax.If):
		self.visit(stmt.condition)
		self.visit(stmt.then_branch)
		if stmt.else_branch is not None:
			self.visit(stmt.else_branch)

	def visit_While(self, stmt:syntax.While):
		self.visit(stmt.condition)
		self.visit(stmt.body)

	def visit_each(self, items):
		for item in items:
			self.visit(item)


class Resolver(TopDown):
	"""
	Threads a stack of lexical scopes (innermost last) through the tree.
	The global scope is not on the stack; globals resolve at run time.

	Besides building the distance map, this is the only place that notices:

	* a local read in its own initializer,
	* a name declared twice in one scope,
	* `return` outside any function, or with a value inside `init`,
	* a class inheriting from itself,
	* `this` or `super` where there is no class (or no superclass) to mean.
	"""
	distances: DISTANCES
	_scopes: list[dict[str, bool]]

	def __init__(self, report:Report, known_globals:Container[str]=()):
		"""
		known_globals: names some earlier run already bound in the global frame.
		An interactive session passes its global frame here.
		"""
		self.report = report
		self.distances = {}
		self._scopes = []
		self._known_globals = known_globals
		self._globals = set()
		self._pending_globals = set()
		self._function = FunctionKind.NONE
		self._class = ClassKind.NONE

	def resolve(self, statements) -> DISTANCES:
		self.visit_each(statements)
		return self.distances

	# Scope machinery

	def _begin_scope(self): self._scopes.append({})
	def _end_scope(self): self._scopes.pop()

	def _declare(self, name:Token):
		if not self._scopes: return
		scope = self._scopes[-1]
		if name.lexeme in scope:
			self.report.error(name, "Already a variable with this name in this scope.")
		scope[name.lexeme] = DECLARED

	def _define(self, name:Token):
		if self._scopes: self._scopes[-1][name.lexeme] = DEFINED
		else: self._globals.add(name.lexeme)

	def _is_global(self, name:Token) -> bool:
		return name.lexeme in self._globals or name.lexeme in self._known_globals

	def _resolve_local(self, expr:syntax.Expr, name:Token, skip:int=0) -> bool:
		for hops, scope in enumerate(reversed(self._scopes)):
			if hops >= skip and name.lexeme in scope:
				self.distances[expr] = hops
				return True
		return False

	def _resolve_function(self, function:syntax.Function, kind:FunctionKind):
		enclosing = self._function
		self._function = kind
		self._begin_scope()
		for param in function.params:
			self._declare(param)
			self._define(param)
		self.visit_each(function.body)
		self._end_scope()
		self._function = enclosing

	# Statements

	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		self.visit_each(stmt.statements)
		self._end_scope()

	def visit_Var(self, stmt:syntax.Var):
		self._declare(stmt.name)
		if stmt.initializer is not None:
			at_top = not self._scopes
			if at_top: self._pending_globals.add(stmt.name.lexeme)
			self.visit(stmt.initializer)
			if at_top: self._pending_globals.discard(stmt.name.lexeme)
		self._define(stmt.name)

	def visit_Function(self, stmt:syntax.Function):
		# Defined before the body, so the function may call itself.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FunctionKind.FUNCTION)

	def visit_Return(self, stmt:syntax.Return):
		if self._function is FunctionKind.NONE:
			self.report.error(stmt.keyword, "Can't return from top-level code.")
		if stmt.value is not None:
			if self._function is FunctionKind.INITIALIZER:
				self.report.error(stmt.keyword, "Can't return a value from an initializer.")
			self.visit(stmt.value)

	def visit_Class(self, stmt:syntax.Class):
		enclosing = self._class
		self._class = ClassKind.CLASS
		self._declare(stmt.name)
		self._define(stmt.name)

		superclass = stmt.superclass
		if superclass is not None:
			if superclass.name.lexeme == stmt.name.lexeme:
				self.report.error(superclass.name, "A class can't inherit from itself.")
			self._class = ClassKind.SUBCLASS
			self.visit(superclass)
			self._begin_scope()
			self._scopes[-1]["super"] = DEFINED

		self._begin_scope()
		self._scopes[-1]["this"] = DEFINED
		for method in stmt.methods:
			kind = FunctionKind.INITIALIZER if method.name.lexeme == "init" else FunctionKind.METHOD
			self._resolve_function(method, kind)
		self._end_scope()

		if superclass is not None: self._end_scope()
		self._class = enclosing

	# Expressions

	def visit_Variable(self, expr:syntax.Variable):
		name = expr.name
		if self._scopes and self._scopes[-1].get(name.lexeme) is DECLARED:
			# Inside its own initializer, the name can only mean some outer binding.
			if not (self._resolve_local(expr, name, skip=1) or self._is_global(name)):
				self._self_reference(name)
		elif not self._resolve_local(expr, name):
			if name.lexeme in self._pending_globals and not self._is_global(name):
				self._self_reference(name)

	def _self_reference(self, name:Token):
		self.report.error(name, "Can't read local variable in its own initializer.")

	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name)

	def visit_This(self, expr:syntax.This):
		if self._class is ClassKind.NONE:
			self.report.error(expr.keyword, "Can't use 'this' outside of a class.")
			return
		self._resolve_local(expr, expr.keyword)

	def visit_Super(self, expr:syntax.Super):
		if self._class is ClassKind.NONE:
			self.report.error(expr.keyword, "Can't use 'super' outside of a class.")
		elif self._class is not ClassKind.SUBCLASS:
			self.report.error(expr.keyword, "Can't use 'super' in a class with no superclass.")
		self._resolve_local(expr, expr.keyword)


def resolve(statements, report:Report, known_globals:Container[str]=()) -> DISTANCES:
	return Resolver(report, known_globals).resolve(statements)
