"""
What the front end needs from a constraint solver, and no more.
Concrete solvers live among the adapters.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import NamedTuple, Optional
from .ontology import Sort, Term

class Verdict(Enum):
	SATISFIABLE = "sat"
	UNSATISFIABLE = "unsat"
	UNKNOWN = "unknown"

	def __str__(self): return self.value

class CheckResult(NamedTuple):
	verdict: Verdict
	model: Optional[dict[str, str]] = None

class Solver(ABC):
	@abstractmethod
	def declare_variable(self, name:str, sort:Sort) -> None: pass

	@abstractmethod
	def add_assertion(self, term:Term) -> None:
		""" Constraints accumulate. There is no taking one back. """

	@abstractmethod
	def check(self, options:Optional[dict]=None) -> CheckResult: pass
