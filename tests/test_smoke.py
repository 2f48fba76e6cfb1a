from pathlib import Path
import io
import unittest
from contextlib import redirect_stdout, redirect_stderr

import z3

from sortie import cmdline
from sortie.adapters.z3_adapter import Z3Solver, UnsupportedOperator
from sortie.diagnostics import MalformedExpression
from sortie.elaboration import elaborate
from sortie.executive import Dispatcher, run_source
from sortie.ontology import Sort, Term, leaf
from sortie.reader import parse_one
from sortie.solver import Verdict
from sortie.space import Layer

base_folder = Path(__file__).parent.parent
zoo_ok = base_folder/"zoo/ok"
zoo_fail = base_folder/"zoo/fail"

def _verdicts(text, **kwargs) -> list[str]:
	out = io.StringIO()
	run_source(text, Dispatcher(Z3Solver(), out=out, **kwargs))
	return out.getvalue().splitlines()

class Z3AdapterTests(unittest.TestCase):

	def test_verdicts(self):
		for text, expect in [
			("(declare-fun x () Real)(assert (> x 0))(check-sat)", ["sat"]),
			("(declare-fun x () Real)(assert (> x 0))(assert (< x 0))(check-sat)", ["unsat"]),
			("(declare-fun p () Bool)(assert (=> p (not p)))(check-sat)(assert p)(check-sat)", ["sat", "unsat"]),
			("(check-sat)", ["sat"]),
		]:
			with self.subTest(text):
				self.assertEqual(expect, _verdicts(text))

	def test_arithmetic(self):
		script = """
			(declare-fun x () Real)
			(declare-fun y () Real)
			(assert (= (+ x y) 10))
			(assert (= (- x y) 4))
			(assert (= (* 2 x) 14.0))
			(check-sat)
			(assert (distinct x 7))
			(check-sat)
		"""
		self.assertEqual(["sat", "unsat"], _verdicts(script))

	def test_let_reaches_the_solver(self):
		script = """
			(declare-fun x () Real)
			(assert (let ((x 5) (y x)) (and (= x 5) (= y 0))))
			(check-sat)
			(get-model)
		"""
		lines = _verdicts(script, extensions=True)
		self.assertEqual("sat", lines[0])
		self.assertRegex(lines[1], r"^\(\(define-fun x \(\) Real 0(\.0)?\)\)$")

	def test_chained_comparison(self):
		self.assertEqual(["unsat"], _verdicts("(declare-fun x () Real)(assert (< 1 x 0))(check-sat)"))

	def test_rationals(self):
		script = "(declare-fun x () Real)(assert (= (* 4 x) 1))(assert (= x 0.25))(check-sat)"
		self.assertEqual(["sat"], _verdicts(script, rationals=True))

	def test_model(self):
		solver = Z3Solver()
		solver.declare_variable("p", Sort.BOOL)
		solver.add_assertion(leaf("p", Sort.BOOL))
		result = solver.check({"timeout": 1000})
		self.assertIs(Verdict.SATISFIABLE, result.verdict)
		self.assertEqual({"p": "true"}, result.model)

	def test_translation(self):
		solver = Z3Solver()
		solver.declare_variable("x", Sort.REAL)
		node, _ = parse_one("(ite (> x 1) (/ x 2) (- x))")
		term = elaborate(node, Layer({"x": Sort.REAL}))
		expr = solver.translate(term)
		x = z3.Real("x")
		# z3 may normalize the shape, so compare meanings.
		check = z3.Solver()
		check.add(z3.If(x > 1, x / 2, -x) != expr)
		self.assertEqual(z3.unsat, check.check())

	def test_unsupported_operator(self):
		solver = Z3Solver()
		with self.assertRaises(UnsupportedOperator):
			solver.add_assertion(Term("frobnicate", (leaf("1", Sort.REAL),), Sort.REAL))

	def test_too_few_arguments(self):
		solver = Z3Solver()
		with self.assertRaises(MalformedExpression):
			solver.add_assertion(Term("<", (leaf("1", Sort.REAL),), Sort.BOOL))

	def test_operator_applied_to_nothing(self):
		with self.assertRaisesRegex(MalformedExpression, "and needs at least 1 arguments"):
			_verdicts("(assert (and))")
		with self.assertRaisesRegex(MalformedExpression, "Nothing is known about q"):
			Z3Solver().add_assertion(leaf("q", Sort.BOOL))

	def test_sort_confusion_is_malformed(self):
		with self.assertRaises(MalformedExpression):
			_verdicts("(declare-fun x () Real)(assert x)")


class CommandLineTests(unittest.TestCase):

	def run_cli(self, *argv):
		out, err = io.StringIO(), io.StringIO()
		with redirect_stdout(out), redirect_stderr(err):
			try:
				cmdline.main(list(argv))
			except SystemExit as ex:
				code = ex.code
		return code, out.getvalue(), err.getvalue()

	def test_good_scripts(self):
		for name, expect in [
			("positive", "sat\n"),
			("squeeze", "sat\nunsat\n"),
			("early_exit", "unsat\n"),
		]:
			with self.subTest(name):
				code, out, err = self.run_cli(str(zoo_ok/(name+".smt2")))
				self.assertEqual(0, code, err)
				self.assertEqual(expect, out)

	def test_verbose_trace_stays_off_stdout(self):
		code, out, err = self.run_cli("-v", str(zoo_ok/"positive.smt2"))
		self.assertEqual(0, code)
		self.assertEqual("sat\n", out)
		self.assertIn("got :", err)

	def test_bad_scripts(self):
		for name, complaint in [
			("undeclared", "Undeclared variable: x"),
			("unknown_command", "Unknown command: (push 1)"),
		]:
			with self.subTest(name):
				code, out, err = self.run_cli(str(zoo_fail/(name+".smt2")))
				self.assertEqual(1, code)
				self.assertEqual("", out)
				self.assertIn(complaint, err)

	def test_extensions_flag(self):
		script = str(zoo_ok/"model.smt2")
		code, out, err = self.run_cli(script)
		self.assertEqual(1, code)
		self.assertEqual("", out)
		self.assertIn("Unknown command: (set-option :produce-models true)", err)
		code, out, err = self.run_cli("-x", script)
		self.assertEqual(0, code, err)
		self.assertEqual("sat\n((define-fun p () Bool false))\n", out)

	def test_missing_file(self):
		code, out, err = self.run_cli(str(zoo_fail/"no_such_file.smt2"))
		self.assertEqual(1, code)
		self.assertIn("Cannot read", err)

	def test_wrong_argument_count(self):
		code, out, err = self.run_cli()
		self.assertEqual(2, code)
		self.assertEqual("", out)
		self.assertIn("usage", err)
		code, out, err = self.run_cli("one.smt2", "two.smt2")
		self.assertEqual(2, code)

if __name__ == '__main__':
	unittest.main()
