"""
The sorted vocabulary that comes out of elaboration.
These are kept apart from the reader so the solver adapters need not know about syntax.
"""
from enum import Enum
from typing import NamedTuple
from .diagnostics import MalformedExpression

class Sort(Enum):
	BOOL = "Bool"
	REAL = "Real"

	def __str__(self): return self.value

	@staticmethod
	def from_name(name:str, node=None) -> "Sort":
		try: return Sort(name)
		except ValueError:
			raise MalformedExpression("Expected sort Real or Bool, not %r" % name, node) from None

# Operators whose result is Boolean no matter what they consume.
BOOLEAN_OPERATORS = frozenset(["and", "or", "not", "=", "<", ">", "<=", ">=", "=>"])

LET = "let"

class Term(NamedTuple):
	"""
	A sorted expression. Leaves are variables and numerals;
	a let-binding is a Term named for the bound variable, holding its value.
	"""
	name: str
	args: tuple["Term", ...]
	sort: Sort

	def __str__(self):
		if not self.args: return self.name
		return "(%s %s)" % (self.name, " ".join(map(str, self.args)))

	def is_leaf(self): return not self.args

def leaf(name:str, sort:Sort) -> Term:
	return Term(name, (), sort)
