"""
A solver backed by z3.

Terms arrive already sorted, so translation is a straight walk:
leaves are either declared constants, let-bound names, or numerals;
everything else is an operator applied to translated arguments.
"""
import operator
from collections import ChainMap
from functools import reduce
from typing import Optional

import z3

from ..diagnostics import MalformedExpression
from ..elaboration import looks_numeric
from ..ontology import Sort, Term, LET
from ..solver import Solver, Verdict, CheckResult

class UnsupportedOperator(MalformedExpression):
	pass

_CONSTANT = {Sort.REAL: z3.Real, Sort.BOOL: z3.Bool}

def _verdict(result) -> Verdict:
	# z3 check results compare equal but do not hash.
	if result == z3.sat: return Verdict.SATISFIABLE
	if result == z3.unsat: return Verdict.UNSATISFIABLE
	return Verdict.UNKNOWN

def _chained(relation):
	""" (< a b c) means a<b and b<c. """
	def apply(args):
		links = [relation(a, b) for a, b in zip(args, args[1:])]
		return links[0] if len(links) == 1 else z3.And(*links)
	return apply

def _folded(op):
	return lambda args: reduce(op, args)

def _implies(args):
	# Right-associative: (=> a b c) means (=> a (=> b c))
	return reduce(lambda acc, a: z3.Implies(a, acc), reversed(args[:-1]), args[-1])

def _minus(args):
	return -args[0] if len(args) == 1 else reduce(operator.sub, args)

# name -> (fewest arguments, translation)
OPERATORS = {
	"and": (1, lambda args: z3.And(*args)),
	"or": (1, lambda args: z3.Or(*args)),
	"not": (1, lambda args: z3.Not(args[0])),
	"=>": (2, _implies),
	"=": (2, _chained(operator.eq)),
	"<": (2, _chained(operator.lt)),
	">": (2, _chained(operator.gt)),
	"<=": (2, _chained(operator.le)),
	">=": (2, _chained(operator.ge)),
	"distinct": (2, lambda args: z3.Distinct(*args)),
	"+": (1, _folded(operator.add)),
	"-": (1, _minus),
	"*": (1, _folded(operator.mul)),
	"/": (2, _folded(operator.truediv)),
	"ite": (3, lambda args: z3.If(*args[:3])),
}

class Z3Solver(Solver):
	def __init__(self):
		self._solver = z3.Solver()
		self._constants = {}

	def declare_variable(self, name:str, sort:Sort) -> None:
		self._constants[name] = _CONSTANT[sort](name)

	def add_assertion(self, term:Term) -> None:
		try: self._solver.add(self.translate(term))
		except z3.Z3Exception as ex:
			raise MalformedExpression("z3 rejected %s: %s" % (term, ex)) from ex

	def check(self, options:Optional[dict]=None) -> CheckResult:
		options = options or {}
		if options.get("timeout"):
			self._solver.set(timeout=int(options["timeout"]))
		verdict = _verdict(self._solver.check())
		if verdict is Verdict.SATISFIABLE:
			model = self._solver.model()
			return CheckResult(verdict, {d.name(): model[d].sexpr() for d in model.decls()})
		return CheckResult(verdict)

	def translate(self, term:Term, scope=None) -> z3.ExprRef:
		scope = ChainMap(self._constants) if scope is None else scope
		if term.is_leaf():
			if term.name in scope:
				return scope[term.name]
			if looks_numeric(term.name):
				return z3.RealVal(term.name)
			# An operator applied to nothing, like (and), also has no args.
			if term.name not in OPERATORS:
				raise MalformedExpression("Nothing is known about %s" % term.name)
		if term.name == LET:
			*bindings, body = term.args
			inner = {b.name: self.translate(b.args[0], scope) for b in bindings}
			return self.translate(body, scope.new_child(inner))
		try: fewest, build = OPERATORS[term.name]
		except KeyError:
			raise UnsupportedOperator("z3 adapter does not support %r" % term.name) from None
		if len(term.args) < fewest:
			raise MalformedExpression("%s needs at least %d arguments: %s" % (term.name, fewest, term))
		return build([self.translate(a, scope) for a in term.args])
