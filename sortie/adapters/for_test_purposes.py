"""
A stand-in solver for the test-suite.
It remembers what it was told and answers whatever verdict it was given.
"""
from typing import Optional
from ..ontology import Sort, Term
from ..solver import Solver, Verdict, CheckResult

class RecordingSolver(Solver):
	def __init__(self, verdict:Verdict=Verdict.UNKNOWN, model:Optional[dict]=None):
		self.verdict = verdict
		self.model = model
		self.declarations: list[tuple[str, Sort]] = []
		self.assertions: list[Term] = []
		self.checks: list[Optional[dict]] = []
		self.calls: list[str] = []

	def declare_variable(self, name:str, sort:Sort) -> None:
		self.calls.append("declare_variable")
		self.declarations.append((name, sort))

	def add_assertion(self, term:Term) -> None:
		self.calls.append("add_assertion")
		self.assertions.append(term)

	def check(self, options:Optional[dict]=None) -> CheckResult:
		self.calls.append("check")
		self.checks.append(options)
		return CheckResult(self.verdict, self.model)
