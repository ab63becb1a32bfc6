"""
Direct interpretation of the syntax tree.

Expressions evaluate to values. Statements execute for effect and produce a
completion: None when they run off the end, or a Returning record when a
`return` is on its way out to the nearest call.
"""
import sys
from typing import Optional, Sequence, TextIO
from boozetools.support.foundation import Visitor
from . import syntax
from .tokens import Token, TokenType
from .errors import LoxRuntimeError
from .diagnostics import Report
from .environment import Environment
from .resolution import DISTANCES
from .runtime import (
	VALUE, Returning, LoxCallable, Function, LoxClass, LoxInstance, NATIVES,
	is_truthy, is_equal, stringify, check_arity,
)

T = TokenType

COMPLETION = Optional[Returning]

def _number_operand(op:Token, operand:VALUE):
	if type(operand) is not float:
		raise LoxRuntimeError(op, "Operand must be a number.")

def _number_operands(op:Token, left:VALUE, right:VALUE):
	if type(left) is not float or type(right) is not float:
		raise LoxRuntimeError(op, "Operands must be numbers.")

def _plus(op, left, right):
	if type(left) is float and type(right) is float:
		return left + right
	if isinstance(left, str) or isinstance(right, str):
		return stringify(left) + stringify(right)
	raise LoxRuntimeError(op, "Operands must be two numbers or two strings.")

def _divide(op, left, right):
	_number_operands(op, left, right)
	if right == 0:
		raise LoxRuntimeError(op, "Division by zero.")
	return left / right

def _arithmetic(fn):
	def check_then_apply(op, left, right):
		_number_operands(op, left, right)
		return fn(left, right)
	return check_then_apply

BINARY = {
	T.PLUS: _plus,
	T.MINUS: _arithmetic(lambda a, b: a - b),
	T.STAR: _arithmetic(lambda a, b: a * b),
	T.SLASH: _divide,
	T.GREATER: _arithmetic(lambda a, b: a > b),
	T.GREATER_EQUAL: _arithmetic(lambda a, b: a >= b),
	T.LESS: _arithmetic(lambda a, b: a < b),
	T.LESS_EQUAL: _arithmetic(lambda a, b: a <= b),
	T.EQUAL_EQUAL: lambda op, a, b: is_equal(a, b),
	T.BANG_EQUAL: lambda op, a, b: not is_equal(a, b),
}


class Interpreter(Visitor):
	"""
	One of these lives as long as a session does: the global frame
	and the accumulated scope distances persist from one run to the next.
	"""
	_locals: DISTANCES

	def __init__(self, report:Report, out:TextIO=None):
		self.report = report
		self.out = out or sys.stdout
		self.globals = Environment()
		for name, native in NATIVES.items():
			self.globals.define(name, native)
		self._env = self.globals
		self._locals = {}

	def resolve(self, distances:DISTANCES):
		"""
		Take on board what the resolver worked out.
		Entries stay for the life of the session: a function defined on an earlier
		prompt line may run again, and its body's nodes are keys in this map.
		"""
		self._locals.update(distances)

	def interpret(self, statements:Sequence[syntax.Stmt]):
		""" A run-time error stops this batch, but what already happened stays happened. """
		try:
			for stmt in statements:
				self.visit(stmt)
		except LoxRuntimeError as ex:
			self.report.runtime_error(ex)

	def evaluate(self, expr:syntax.Expr) -> VALUE:
		return self.visit(expr)

	def execute_block(self, statements:Sequence[syntax.Stmt], env:Environment) -> COMPLETION:
		previous = self._env
		self._env = env
		try:
			for stmt in statements:
				completion = self.visit(stmt)
				if completion is not None: return completion
		finally:
			self._env = previous

	def _look_up(self, name:Token, expr:syntax.Expr) -> VALUE:
		try: distance = self._locals[expr]
		except KeyError: return self.globals.get(name)
		return self._env.get_at(distance, name.lexeme)

	# Statements

	def visit_Expression(self, stmt:syntax.Expression) -> COMPLETION:
		self.evaluate(stmt.expression)

	def visit_Print(self, stmt:syntax.Print) -> COMPLETION:
		value = self.evaluate(stmt.expression)
		print(stringify(value), file=self.out)

	def visit_Var(self, stmt:syntax.Var) -> COMPLETION:
		value = None if stmt.initializer is None else self.evaluate(stmt.initializer)
		self._env.define(stmt.name.lexeme, value)

	def visit_Block(self, stmt:syntax.Block) -> COMPLETION:
		return self.execute_block(stmt.statements, Environment(self._env))

	def visit_If(self, stmt:syntax.If) -> COMPLETION:
		if is_truthy(self.evaluate(stmt.condition)):
			return self.visit(stmt.then_branch)
		elif stmt.else_branch is not None:
			return self.visit(stmt.else_branch)

	def visit_While(self, stmt:syntax.While) -> COMPLETION:
		while is_truthy(self.evaluate(stmt.condition)):
			completion = self.visit(stmt.body)
			if completion is not None: return completion

	def visit_Function(self, stmt:syntax.Function) -> COMPLETION:
		self._env.define(stmt.name.lexeme, Function(stmt, self._env))

	def visit_Return(self, stmt:syntax.Return) -> COMPLETION:
		value = None if stmt.value is None else self.evaluate(stmt.value)
		return Returning(value)

	def visit_Class(self, stmt:syntax.Class) -> COMPLETION:
		superclass = None
		if stmt.superclass is not None:
			superclass = self.evaluate(stmt.superclass)
			if not isinstance(superclass, LoxClass):
				raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

		self._env.define(stmt.name.lexeme, None)
		outer = self._env
		if superclass is not None:
			self._env = Environment(self._env)
			self._env.define("super", superclass)

		methods = {
			method.name.lexeme: Function(method, self._env, method.name.lexeme == "init")
			for method in stmt.methods
		}
		klass = LoxClass(stmt.name.lexeme, superclass, methods)
		self._env = outer
		self._env.assign(stmt.name, klass)

	# Expressions

	def visit_Literal(self, expr:syntax.Literal) -> VALUE:
		return expr.value

	def visit_Grouping(self, expr:syntax.Grouping) -> VALUE:
		return self.evaluate(expr.expression)

	def visit_Unary(self, expr:syntax.Unary) -> VALUE:
		right = self.evaluate(expr.right)
		if expr.op.type is T.BANG:
			return not is_truthy(right)
		_number_operand(expr.op, right)
		return -right

	def visit_Binary(self, expr:syntax.Binary) -> VALUE:
		left = self.evaluate(expr.left)
		right = self.evaluate(expr.right)
		return BINARY[expr.op.type](expr.op, left, right)

	def visit_Logical(self, expr:syntax.Logical) -> VALUE:
		left = self.evaluate(expr.left)
		if expr.op.type is T.OR:
			if is_truthy(left): return left
		elif not is_truthy(left):
			return left
		return self.evaluate(expr.right)

	def visit_Variable(self, expr:syntax.Variable) -> VALUE:
		return self._look_up(expr.name, expr)

	def visit_Assign(self, expr:syntax.Assign) -> VALUE:
		value = self.evaluate(expr.value)
		try: distance = self._locals[expr]
		except KeyError: self.globals.assign(expr.name, value)
		else: self._env.assign_at(distance, expr.name, value)
		return value

	def visit_Call(self, expr:syntax.Call) -> VALUE:
		callee = self.evaluate(expr.callee)
		arguments = [self.evaluate(a) for a in expr.arguments]
		if not isinstance(callee, LoxCallable):
			raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
		check_arity(callee, arguments, expr.paren)
		try: return callee.call(self, arguments)
		except RecursionError:
			# The innermost call converts; outer calls see a LoxRuntimeError and let it pass.
			raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

	def visit_Get(self, expr:syntax.Get) -> VALUE:
		obj = self.evaluate(expr.object)
		if isinstance(obj, LoxInstance):
			return obj.get(expr.name)
		raise LoxRuntimeError(expr.name, "Only instances have properties.")

	def visit_Set(self, expr:syntax.Set) -> VALUE:
		obj = self.evaluate(expr.object)
		if not isinstance(obj, LoxInstance):
			raise LoxRuntimeError(expr.name, "Only instances have fields.")
		value = self.evaluate(expr.value)
		obj.set(expr.name, value)
		return value

	def visit_This(self, expr:syntax.This) -> VALUE:
		return self._look_up(expr.keyword, expr)

	def visit_Super(self, expr:syntax.Super) -> VALUE:
		distance = self._locals[expr]
		superclass = self._env.get_at(distance, "super")
		# The frame binding "this" is always just inside the one binding "super".
		instance = self._env.get_at(distance - 1, "this")
		method = superclass.find_method(expr.method.lexeme)
		if method is None:
			raise LoxRuntimeError(expr.method, "Undefined property '%s'." % expr.method.lexeme)
		return method.bind(instance)
