"""
Elaboration: from the reader's generic tree to sorted terms.

Every node gets its sort from a fixed rule, bottom-up and left to right.
The only twist is `let`, which must know the sorts of the bound values
before it can build the scope for its body.
"""
from fractions import Fraction
from boozetools.support.foundation import Visitor
from .diagnostics import MalformedExpression, Report
from .ontology import Sort, Term, BOOLEAN_OPERATORS, LET, leaf
from .reader import Atom, Group, Node
from .space import SortSpace

def looks_numeric(text:str) -> bool:
	return bool(text) and (text[0].isdigit() or text[0] == ".")

def parse_numeral(text:str, rationals=False) -> str:
	"""
	Canonical text of a numeric literal.

	A trailing ".0" comes off first, as many times as it appears.
	The solver backend this mirrors only knows integers, so by default
	whatever remains must be a plain decimal integer.
	With `rationals` the remainder may be any decimal or n/d fraction.
	"""
	original = text
	while len(text) >= 3 and text.endswith(".0"):
		text = text[:-2]
	if rationals:
		try: return str(Fraction(text))
		except (ValueError, ZeroDivisionError):
			raise MalformedExpression("Not a number: %r" % original) from None
	if text.isascii() and text.isdigit():
		return str(int(text))
	raise MalformedExpression("Only whole numbers are supported here: %r" % original)


class Elaborator(Visitor):
	def __init__(self, *, rationals=False, report:Report=None):
		self._rationals = rationals
		self._report = report or Report(verbose=0)

	def elaborate(self, node:Node, env:SortSpace) -> Term:
		return self.visit(node, env)

	def visit_Atom(self, atom:Atom, env:SortSpace) -> Term:
		text = atom.text
		if looks_numeric(text):
			try: return leaf(parse_numeral(text, self._rationals), Sort.REAL)
			except MalformedExpression as ex:
				ex.node = atom
				raise
		try: return leaf(text, env.lookup(text))
		except KeyError:
			raise MalformedExpression("Undeclared variable: %s" % text, atom) from None

	def visit_Group(self, group:Group, env:SortSpace) -> Term:
		op = group.head()
		if op == LET:
			return self._let(group, env)
		args = tuple(self.visit(item, env) for item in group.items[1:])
		if op in BOOLEAN_OPERATORS:
			return Term(op, args, Sort.BOOL)
		if not args:
			raise MalformedExpression("Operator %s needs at least one argument" % op, group)
		return Term(op, args, args[-1].sort)

	def _let(self, group:Group, env:SortSpace) -> Term:
		"""
		(let ((x1 t1) (x2 t2)) T) comes out as let(x1(t1), x2(t2), T).
		Every bound value sees only the outer scope; the body sees them all.
		"""
		_, bindings, body = group.expect_arity(3, "let").items
		arguments, sorts = [], {}
		for binding in bindings.as_group("let-bindings"):
			name_node, value_node = binding.as_group("a let-binding").expect_arity(2, "A let-binding").items
			name = name_node.as_atom("a bound name").text
			value = self.visit(value_node, env)
			self._report.info("Binding", name, "to", value)
			sorts[name] = value.sort
			arguments.append(Term(name, (value,), value.sort))
		arguments.append(self.visit(body, env.extend(sorts)))
		return Term(LET, tuple(arguments), arguments[-1].sort)


def elaborate(node:Node, env:SortSpace, *, rationals=False, report:Report=None) -> Term:
	return Elaborator(rationals=rationals, report=report).elaborate(node, env)
