"""
This is a front end for SMT-LIB2 scripts over Booleans and Reals.

{0}

For example:

    sortie problem.smt2

will print sat, unsat, or unknown for each (check-sat) in the script.

    sortie -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

parser = argparse.ArgumentParser(
	prog="sortie",
	description="Front end for SMT-LIB2 constraint scripts over Booleans and Reals.",
)
parser.add_argument("script", help="the SMT-LIB2 file to run.")
parser.add_argument('-v', "--verbose", action="count", help="Trace each form as it is read, and every let-binding, on stderr.")
parser.add_argument("--strict", action="store_true", help="Treat a list left open at end of input as an error.")
parser.add_argument('-r', "--rationals", action="store_true", help="Accept fractional literals such as 0.5, not only whole numbers.")
parser.add_argument("--timeout", type=int, metavar="MS", help="Give the solver this many milliseconds per check-sat.")
parser.add_argument('-x', "--extensions", action="store_true", help="Also accept set-option, declare-const and get-model.")

def parse_arguments(argv):
	from .diagnostics import UsageError
	if not argv:
		raise UsageError(__doc__.strip().format(parser.format_usage()))
	return parser.parse_args(argv)

def run(args) -> int:
	from .diagnostics import Report, SortieError
	from .executive import Dispatcher, run_script
	from .reader import strip_comments
	from .adapters.z3_adapter import Z3Solver
	report = Report(verbose=args.verbose)
	path = Path(args.script)
	try:
		with open(path, "r", encoding="utf-8") as fh:
			text = strip_comments(fh.read())
	except OSError as ex:
		print("Cannot read %s: %s" % (path, ex.strerror or ex), file=sys.stderr)
		return 1
	options = {"timeout": args.timeout} if args.timeout else {}
	dispatcher = Dispatcher(Z3Solver(), report, rationals=args.rationals, options=options, extensions=args.extensions)
	try:
		run_script(text, dispatcher, strict=args.strict)
	except SortieError as ex:
		report.complain(ex, path)
		return 1
	return 0

def main(argv=None):
	from .diagnostics import UsageError
	argv = sys.argv[1:] if argv is None else argv
	try: args = parse_arguments(argv)
	except UsageError as ex:
		print(ex, file=sys.stderr)
		sys.exit(2)
	sys.exit(run(args))
