"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but special things like closures need more help.

	nil      -> None
	boolean  -> bool
	number   -> float
	text     -> str
	callable -> LoxCallable (Function, NativeFunction, LoxClass)
	instance -> LoxInstance
"""
import math, time
from decimal import Decimal
from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Optional, Sequence, Union, TYPE_CHECKING
from . import syntax
from .tokens import Token
from .errors import LoxRuntimeError
from .environment import Environment

if TYPE_CHECKING:
	from .interpreter import Interpreter

VALUE = Union[None, bool, float, str, "LoxCallable", "LoxInstance"]

class Returning(NamedTuple):
	"""
	The completion record of a statement that hit `return`.
	Statements that finish normally produce None instead.
	"""
	value: VALUE

###############################################################################

class LoxCallable(ABC):
	""" A run-time object that can be applied with arguments. """
	@abstractmethod
	def arity(self) -> int: pass

	@abstractmethod
	def call(self, interpreter:"Interpreter", arguments:Sequence[VALUE]) -> VALUE: pass

class Function(LoxCallable):
	""" The run-time manifestation of a function declaration: a callable value tied to its natal environment. """

	def __init__(self, declaration:syntax.Function, closure:Environment, is_initializer:bool=False):
		self._declaration = declaration
		self._closure = closure
		self.is_initializer = is_initializer

	def arity(self) -> int: return len(self._declaration.params)

	def bind(self, instance:"LoxInstance") -> "Function":
		env = Environment(self._closure)
		env.define("this", instance)
		return Function(self._declaration, env, self.is_initializer)

	def call(self, interpreter, arguments):
		env = Environment(self._closure)
		for param, arg in zip(self._declaration.params, arguments):
			env.define(param.lexeme, arg)
		completion = interpreter.execute_block(self._declaration.body, env)
		if self.is_initializer:
			return self._closure.get_at(0, "this")
		if completion is not None:
			return completion.value

	def __str__(self): return "<fn %s>" % self._declaration.name.lexeme

class NativeFunction(LoxCallable):
	""" All parameters to native functions are plain values. """
	def __init__(self, fn:callable, arity:int):
		self._fn = fn
		self._arity = arity

	def arity(self) -> int: return self._arity
	def call(self, interpreter, arguments): return self._fn(*arguments)
	def __str__(self): return "<native fn>"

def _clock() -> float:
	return time.time()

NATIVES = {
	"clock": NativeFunction(_clock, 0),
}

class LoxClass(LoxCallable):
	"""
	Holds only its own methods. Inherited ones are found by walking
	the superclass chain at lookup time, never copied in.
	"""
	def __init__(self, name:str, superclass:Optional["LoxClass"], methods:dict[str, Function]):
		self.name = name
		self.superclass = superclass
		self._methods = methods

	def find_method(self, name:str) -> Optional[Function]:
		cls = self
		while cls is not None:
			if name in cls._methods: return cls._methods[name]
			cls = cls.superclass
		return None

	def arity(self) -> int:
		initializer = self.find_method("init")
		return 0 if initializer is None else initializer.arity()

	def call(self, interpreter, arguments):
		instance = LoxInstance(self)
		initializer = self.find_method("init")
		if initializer is not None:
			initializer.bind(instance).call(interpreter, arguments)
		return instance

	def __str__(self): return self.name

class LoxInstance:
	_fields: dict[str, VALUE]

	def __init__(self, klass:LoxClass):
		self.klass = klass
		self._fields = {}

	def get(self, name:Token) -> VALUE:
		if name.lexeme in self._fields:
			return self._fields[name.lexeme]
		method = self.klass.find_method(name.lexeme)
		if method is not None:
			return method.bind(self)
		raise LoxRuntimeError(name, "Undefined property '%s'." % name.lexeme)

	def set(self, name:Token, value:VALUE):
		self._fields[name.lexeme] = value

	def __str__(self): return "%s instance" % self.klass.name

###############################################################################

def is_truthy(value:VALUE) -> bool:
	if value is None: return False
	if isinstance(value, bool): return value
	return True

def is_equal(a:VALUE, b:VALUE) -> bool:
	# Python thinks True == 1.0, which this language does not.
	if type(a) is not type(b): return False
	return a == b

def stringify(value:VALUE) -> str:
	if value is None: return "nil"
	if isinstance(value, bool): return "true" if value else "false"
	if isinstance(value, float): return _number_text(value)
	return str(value)

def _number_text(value:float) -> str:
	""" Shortest round-trip digits; scientific (1E+20, 1E-05) below 1e-4 or from 1e15 up. """
	if math.isnan(value): return "NaN"
	if math.isinf(value): return "Infinity" if value > 0 else "-Infinity"
	if value == 0: return "-0" if math.copysign(1.0, value) < 0 else "0"
	number = Decimal(repr(value)).normalize()
	sign, digits, exponent = number.as_tuple()
	scale = exponent + len(digits) - 1
	if -5 < scale < 15: return format(number, "f")
	mantissa = "".join(map(str, digits))
	if len(mantissa) > 1: mantissa = mantissa[0] + "." + mantissa[1:]
	return "%s%sE%s%02d" % ("-" if sign else "", mantissa, "-" if scale < 0 else "+", abs(scale))

def check_arity(callee:LoxCallable, arguments:Sequence[Any], paren:Token):
	if len(arguments) != callee.arity():
		raise LoxRuntimeError(paren, "Expected %d arguments but got %d." % (callee.arity(), len(arguments)))
