"""
Where names get their sorts.

The global layer is one long-lived dictionary that declarations write into.
A let-form never writes into its parent: it gets a fresh layer
chained atop the scope it came from, and lookups fall through.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Mapping
from .ontology import Sort

class SortSpace(ABC):
	@abstractmethod
	def __contains__(self, name: str) -> bool: pass

	@abstractmethod
	def lookup(self, name: str) -> Sort:
		""" Raise KeyError if the name is not here. """

	@abstractmethod
	def names(self) -> Iterable[str]: pass

	def extend(self, bindings: Mapping[str, Sort]) -> "Chain":
		return Chain(Layer(bindings), self)


class Layer(SortSpace):
	""" Lightly enhanced dictionary. Later definitions of a name replace earlier ones. """
	_sorts: dict[str, Sort]

	def __init__(self, bindings: Mapping[str, Sort] = ()):
		self._sorts = dict(bindings)

	def __contains__(self, name: str) -> bool:
		return name in self._sorts

	def lookup(self, name: str) -> Sort:
		return self._sorts[name]

	def names(self) -> Iterable[str]:
		return self._sorts.keys()

	def declare(self, name: str, sort: Sort) -> Sort:
		self._sorts[name] = sort
		return sort


class Chain(SortSpace):
	def __init__(self, top: Layer, rest: SortSpace):
		self.top = top
		self._rest = rest

	def __contains__(self, name: str) -> bool:
		return name in self.top or name in self._rest

	def lookup(self, name: str) -> Sort:
		try: return self.top.lookup(name)
		except KeyError: return self._rest.lookup(name)

	def names(self) -> Iterable[str]:
		return set(self.top.names()) | set(self._rest.names())
