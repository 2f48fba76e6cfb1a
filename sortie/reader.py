"""
The reader turns text into a generic tree: atoms and parenthesized groups.

There is no grammar to speak of. A group holds whatever it holds;
the later passes decide what it means. Atoms do not copy the source:
each one remembers the text it came from and the slice it occupies,
so the diagnostics can point right at it.

Malformed input does not raise here (except in strict mode).
It degrades into empty or partial atoms, which later stages reject.
"""
import re
from typing import Iterator, Union
from .diagnostics import MalformedExpression

WHITESPACE = frozenset(" \t\n\r\v\f")
PIPE = "|"

class Atom:
	""" A view of one token in the source text. """
	__slots__ = ("source", "slice")
	def __init__(self, source:str, span:slice):
		self.source, self.slice = source, span
	@property
	def text(self) -> str: return self.source[self.slice]
	def __str__(self): return self.text
	def __repr__(self): return "<Atom %r>" % self.text
	def __eq__(self, other):
		return isinstance(other, Atom) and self.text == other.text
	def __hash__(self): return hash(self.text)
	def is_quoted(self): return self.text.startswith(PIPE)
	def as_atom(self, what:str) -> "Atom": return self
	def as_group(self, what:str) -> "Group":
		raise MalformedExpression("Expected a list for %s, not %r" % (what, self.text), self)

class Group:
	""" An ordered bunch of nodes between parentheses. """
	__slots__ = ("items", "slice", "source")
	def __init__(self, items:tuple, span:slice, source:str=""):
		self.items, self.slice, self.source = items, span, source
	def __len__(self): return len(self.items)
	def __iter__(self): return iter(self.items)
	def __getitem__(self, index): return self.items[index]
	def __str__(self): return "(" + " ".join(map(str, self.items)) + ")"
	def __repr__(self): return "<Group %s>" % self
	def __eq__(self, other):
		return isinstance(other, Group) and self.items == other.items
	def __hash__(self): return hash(self.items)
	def head(self) -> str:
		""" The name of the operator or command that leads this group. """
		if not self.items:
			raise MalformedExpression("Empty list where a command or operator was expected", self)
		return self.items[0].as_atom("an operator name").text

	def as_atom(self, what:str) -> Atom:
		raise MalformedExpression("Expected %s, not a list" % what, self)
	def as_group(self, what:str) -> "Group": return self

	def expect_arity(self, size:int, what:str) -> "Group":
		if len(self.items) != size:
			pattern = "%s takes %d parts; got %d in %s"
			raise MalformedExpression(pattern % (what, size, len(self.items), self), self)
		return self

Node = Union[Atom, Group]

class Reader:
	"""
	Reads one top-level form at a time from the text.
	The position advances just past the form,
	so the remainder can be handed to a fresh reader with the same results.
	"""
	def __init__(self, text:str, *, strict=False, report=None):
		self._text = text
		self._pos = 0
		self._strict = strict
		self._report = report

	@property
	def position(self) -> int: return self._pos

	def remaining(self) -> str:
		return self._text[self._pos:]

	def at_end(self) -> bool:
		self._skip_whitespace()
		return self._pos >= len(self._text)

	def parse_one(self) -> Node:
		self._skip_whitespace()
		if self._peek() == "(":
			start = self._pos
			self._pos += 1
			items = []
			self._skip_whitespace()
			while self._peek() not in ("", ")"):
				items.append(self.parse_one())
				self._skip_whitespace()
			if self._peek() == ")":
				self._pos += 1
			else:
				self._unterminated(start)
			return Group(tuple(items), slice(start, self._pos), self._text)
		else:
			return self._parse_atom()

	def _parse_atom(self) -> Atom:
		text, start = self._text, self._pos
		end = len(text)
		if self._peek() == PIPE:
			close = text.find(PIPE, start+1)
			self._pos = end if close < 0 else close + 1
		else:
			pos = start
			while pos < end and text[pos] not in WHITESPACE and text[pos] not in "()":
				pos += 1
			self._pos = pos
		return Atom(text, slice(start, self._pos))

	def _unterminated(self, start:int):
		if self._strict:
			raise MalformedExpression("Unterminated list", Group((), slice(start, self._pos), self._text))
		if self._report is not None:
			self._report.irregular("an unterminated list at end of input")

	def _skip_whitespace(self):
		text, pos = self._text, self._pos
		while pos < len(text) and text[pos] in WHITESPACE:
			pos += 1
		self._pos = pos

	def _peek(self) -> str:
		return self._text[self._pos] if self._pos < len(self._text) else ""


def parse_one(text:str, *, strict=False) -> tuple[Node, str]:
	reader = Reader(text, strict=strict)
	node = reader.parse_one()
	return node, reader.remaining()

def read_all(text:str, *, strict=False, report=None) -> Iterator[Node]:
	""" Every top-level form in the text, in order. """
	reader = Reader(text, strict=strict, report=report)
	while not reader.at_end():
		node = reader.parse_one()
		if is_stuck(node):
			raise MalformedExpression("Unexpected ')'", node)
		yield node

def is_stuck(node:Node) -> bool:
	""" A stray close-paren reads as an empty atom and consumes nothing. """
	return node.slice.start == node.slice.stop

def strip_comments(text:str) -> str:
	"""
	A semicolon starts a comment which runs through the end of its line,
	line terminator included. This happens before parsing, over the whole text.
	"""
	return _COMMENT.sub("", text)

def blank_comments(text:str) -> str:
	""" Like strip_comments, but every offset into the text stays put. """
	return _COMMENT_BODY.sub(lambda m: " " * len(m.group()), text)

_COMMENT = re.compile(r";[^\n]*\n?")
_COMMENT_BODY = re.compile(r";[^\n]*")
