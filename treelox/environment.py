"""
Simplest possible environment concept.

This is the canonical list-structured search: each frame maps names to values
and links to the frame that encloses it. Closures hold on to the frame they
were born in, so a frame lives as long as anything still refers to it.
"""
from typing import Any, Optional
from .tokens import Token
from .errors import LoxRuntimeError

class Environment:
	_values: dict[str, Any]

	def __init__(self, enclosing:Optional["Environment"]=None):
		self._values = {}
		self.enclosing = enclosing

	def define(self, name:str, value:Any):
		""" Always succeeds, in this frame only. Redefinition just overwrites. """
		self._values[name] = value

	def get(self, name:Token) -> Any:
		env = self
		while env is not None:
			if name.lexeme in env._values: return env._values[name.lexeme]
			env = env.enclosing
		raise _undefined(name)

	def assign(self, name:Token, value:Any):
		env = self
		while env is not None:
			if name.lexeme in env._values:
				env._values[name.lexeme] = value
				return
			env = env.enclosing
		raise _undefined(name)

	def ancestor(self, distance:int) -> "Environment":
		env = self
		for _ in range(distance): env = env.enclosing
		return env

	# The resolver has already counted the hops, so these trust it completely.
	def get_at(self, distance:int, name:str) -> Any:
		return self.ancestor(distance)._values[name]

	def assign_at(self, distance:int, name:Token, value:Any):
		self.ancestor(distance)._values[name.lexeme] = value

	def __contains__(self, name:str) -> bool:
		return name in self._values

def _undefined(name:Token) -> LoxRuntimeError:
	return LoxRuntimeError(name, "Undefined variable '%s'." % name.lexeme)
