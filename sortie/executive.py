"""
Overall control: read a form, decide what command it is, carry it out.

One Dispatcher owns the global sort environment for the life of a script.
Nothing is recoverable: the first malformed form ends the run.
"""
import sys
from enum import Enum
from typing import Optional
from .diagnostics import MalformedExpression, UnknownCommand, Report
from .elaboration import Elaborator
from .ontology import Sort
from .reader import Reader, Group, Node, strip_comments, is_stuck
from .solver import Solver, Verdict, CheckResult
from .space import Layer

class State(Enum):
	RUNNING = "running"
	TERMINATED = "terminated"

IGNORED = frozenset(["set-info", "set-logic"])

# Accepted only when the dispatcher is built with extensions=True.
IGNORED_EXTENSIONS = frozenset(["set-option"])

class Dispatcher:
	def __init__(self, solver:Solver, report:Report=None, *, out=None, rationals=False, options:Optional[dict]=None, extensions=False):
		self.solver = solver
		self.report = report or Report(verbose=0)
		self.globals = Layer()
		self.state = State.RUNNING
		self.last_result: Optional[CheckResult] = None
		self._out = out
		self._options = options or {}
		self._elaborator = Elaborator(rationals=rationals, report=self.report)
		self._commands = {
			"declare-fun": self.declare_fun,
			"define-fun": self.define_fun,
			"assert": self.assert_,
			"check-sat": self.check_sat,
			"exit": self.exit,
		}
		self._ignored = IGNORED
		if extensions:
			self._ignored = IGNORED | IGNORED_EXTENSIONS
			self._commands["declare-const"] = self.declare_const
			self._commands["get-model"] = self.get_model

	@property
	def out(self):
		return self._out or sys.stdout

	def running(self) -> bool:
		return self.state is State.RUNNING

	def dispatch(self, node:Node):
		if is_stuck(node):
			raise MalformedExpression("Unexpected ')'", node)
		form = node.as_group("a command")
		command = form.head()
		if command in self._ignored:
			return
		try: handler = self._commands[command]
		except KeyError: raise UnknownCommand(form) from None
		handler(form)

	def declare_fun(self, form:Group):
		_, name, params, sort_name = form.expect_arity(4, "declare-fun").items
		if len(params.as_group("declare-fun parameters")):
			raise MalformedExpression("Only nullary declare-fun is supported", params)
		self._declare(name, sort_name)

	def declare_const(self, form:Group):
		_, name, sort_name = form.expect_arity(3, "declare-const").items
		self._declare(name, sort_name)

	def _declare(self, name:Node, sort_name:Node):
		variable = name.as_atom("a variable name").text
		sort_atom = sort_name.as_atom("a sort name")
		sort = Sort.from_name(sort_atom.text, sort_atom)
		self.globals.declare(variable, sort)
		self.solver.declare_variable(variable, sort)

	def define_fun(self, form:Group):
		self.report.info("Ignoring 'define-fun'")

	def assert_(self, form:Group):
		_, expr = form.expect_arity(2, "assert").items
		self.solver.add_assertion(self._elaborator.elaborate(expr, self.globals))

	def check_sat(self, form:Group):
		self.last_result = self.solver.check(self._options)
		print(self.last_result.verdict, file=self.out)

	def get_model(self, form:Group):
		result = self.last_result
		if result is None or result.verdict is not Verdict.SATISFIABLE or result.model is None:
			raise MalformedExpression("get-model needs a satisfiable check-sat first", form)
		entries = [
			"(define-fun %s () %s %s)" % (name, self.globals.lookup(name), value)
			for name, value in result.model.items()
			if name in self.globals
		]
		print("(" + " ".join(entries) + ")", file=self.out)

	def exit(self, form:Group):
		self.state = State.TERMINATED


def run_script(text:str, dispatcher:Dispatcher, *, strict=False) -> State:
	"""
	Drive the dispatcher over every form in comment-free text,
	until the text runs out or the script says to exit.
	"""
	report = dispatcher.report
	reader = Reader(text, strict=strict, report=report)
	while dispatcher.running() and not reader.at_end():
		start = reader.position
		node = reader.parse_one()
		report.info("got :", text[start:reader.position])
		report.info(" ->", node)
		dispatcher.dispatch(node)
	return dispatcher.state

def run_source(raw:str, dispatcher:Dispatcher, *, strict=False) -> State:
	return run_script(strip_comments(raw), dispatcher, strict=strict)
