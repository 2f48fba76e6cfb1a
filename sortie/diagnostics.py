"""
Everything that can go wrong, and how to tell the user about it.

The taxonomy is short because every problem is fatal:
one malformed form aborts the whole run.
Trace output goes to stderr and only when asked for;
stdout belongs to the verdicts.
"""
import sys
from boozetools.support.failureprone import SourceText, illustration

class SortieError(Exception):
	""" Base of the fatal conditions. """

class MalformedExpression(SortieError):
	"""
	Wrong arity, wrong node shape, undeclared name, non-atom operator.
	The node (if known) points back into the source for the illustration.
	"""
	def __init__(self, message:str, node=None):
		super().__init__(message)
		self.node = node

class UnknownCommand(SortieError):
	def __init__(self, node):
		super().__init__("Unknown command: %s" % node)
		self.node = node

class UsageError(SortieError):
	pass

class Report:
	""" Collects the bits of trace and complaint that go to the console. """

	def __init__(self, *, verbose:int=0, stream=None):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._stream = stream

	@property
	def stream(self):
		return self._stream or sys.stderr

	def info(self, *args):
		if self._verbose:
			print(*args, file=self.stream)

	def irregular(self, what:str):
		""" Things we tolerate but mention. """
		self.info("Tolerating", what)

	def complain(self, ex:Exception, path=None):
		""" Say what went wrong, and where, if the error knows. """
		print(ex, file=self.stream)
		node = getattr(ex, "node", None)
		if node is not None and node.source:
			print(illustrate(node.source, node.slice, path), file=self.stream)
		self.stream.flush()

def illustrate(text:str, span:slice, path=None, caption:str="") -> str:
	source = SourceText(text, filename=str(path)) if path else SourceText(text)
	row, col = source.find_row_col(span.start)
	single_line = source.line_of_text(row)
	width = max(span.stop - span.start, 1)
	return illustration(single_line, col, width, prefix='% 6d |' % row, caption=caption)
