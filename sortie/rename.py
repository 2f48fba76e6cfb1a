"""
Renaming a declared symbol across a collection of scripts.

The registry maps a path to the text of a script. We find every atom that
refers to the global symbol under the cursor, and replace them all in one
batch. A let-binding of the same name hides the global within its body,
so those atoms are left alone.
"""
from collections import defaultdict
from typing import NamedTuple, Optional, Mapping
from boozetools.support.foundation import Visitor
from .diagnostics import SortieError, MalformedExpression
from .ontology import LET
from .reader import Atom, Group, Node, read_all, blank_comments

DECLARATIONS = frozenset(["declare-fun", "declare-const"])

class Edit(NamedTuple):
	path: str
	span: slice
	text: str

class OverlappingEdits(SortieError):
	pass

class _AtomFinder(Visitor):
	def __init__(self, offset:int):
		self._offset = offset

	def _covers(self, node:Node) -> bool:
		return node.slice.start <= self._offset < node.slice.stop

	def visit_Atom(self, atom:Atom) -> Optional[Atom]:
		return atom if self._covers(atom) else None

	def visit_Group(self, group:Group) -> Optional[Atom]:
		for item in group.items:
			if self._covers(item):
				return self.visit(item)

def symbol_at(text:str, offset:int) -> Optional[Atom]:
	finder = _AtomFinder(offset)
	for node in read_all(blank_comments(text)):
		found = finder.visit(node)
		if found is not None:
			return found
	return None


class _ReferenceCollector(Visitor):
	"""
	Walks an expression noting every atom that names the symbol.
	The `hidden` flag says a let-binding has taken the name over.
	"""
	def __init__(self, name:str):
		self._name = name
		self.found: list[slice] = []

	def visit_Atom(self, atom:Atom, hidden:bool):
		if not hidden and atom.text == self._name:
			self.found.append(atom.slice)

	def visit_Group(self, group:Group, hidden:bool):
		try: is_let = group.head() == LET and group.expect_arity(3, "let")
		except MalformedExpression: is_let = False
		if is_let:
			return self._let(group, hidden)
		# Not shaped like a let; walk it like any other list.
		for item in group.items[1:]:
			self.visit(item, hidden)

	def _let(self, group:Group, hidden:bool):
		_, bindings, body = group.items
		pairs = [
			b.as_group("a let-binding").expect_arity(2, "A let-binding").items
			for b in bindings.as_group("let-bindings")
		]
		binders = [name.as_atom("a bound name").text for name, _ in pairs]
		for _, value in pairs:
			self.visit(value, hidden)
		self.visit(body, hidden or self._name in binders)

def find_references(registry:Mapping[str, str], name:str) -> dict[str, list[slice]]:
	""" Every span, in every script, that refers to the global symbol `name`. """
	references = {}
	for path, text in registry.items():
		collector = _ReferenceCollector(name)
		for node in read_all(blank_comments(text)):
			_collect_form(collector, node)
		if collector.found:
			references[path] = collector.found
	return references

def _collect_form(collector:_ReferenceCollector, node:Node):
	""" Only declarations and assertions mention the symbol as a variable. """
	try: command = node.as_group("a command").head()
	except MalformedExpression: return
	if command in DECLARATIONS and len(node) > 1:
		collector.visit(node.items[1], False)
	elif command == "assert":
		for item in node.items[1:]:
			collector.visit(item, False)


def apply_edits(registry:Mapping[str, str], edits) -> dict[str, str]:
	"""
	Apply a batch of edits, returning the new registry.
	Within one file the edits may not overlap. Each file is rewritten
	back to front so the earlier offsets still mean what they meant.
	"""
	by_path = defaultdict(list)
	for edit in edits:
		by_path[edit.path].append(edit)
	result = dict(registry)
	for path, batch in by_path.items():
		batch.sort(key=lambda e: (e.span.start, e.span.stop))
		for before, after in zip(batch, batch[1:]):
			if after.span.start < before.span.stop:
				raise OverlappingEdits(before, after)
		text = result[path]
		for edit in reversed(batch):
			text = text[:edit.span.start] + edit.text + text[edit.span.stop:]
		result[path] = text
	return result

def rename_symbol(registry:Mapping[str, str], path:str, offset:int, new_name:str):
	"""
	Rename whatever global symbol sits under the cursor.
	Returns the edits grouped by path, and the registry with them applied.
	A cursor that is not on a reference to a declared symbol changes nothing.
	"""
	atom = symbol_at(registry[path], offset)
	if atom is None:
		return {}, dict(registry)
	references = find_references(registry, atom.text)
	if atom.slice not in references.get(path, ()):
		return {}, dict(registry)
	grouped = {
		where: [Edit(where, span, new_name) for span in spans]
		for where, spans in references.items()
	}
	edits = [edit for batch in grouped.values() for edit in batch]
	return grouped, apply_edits(registry, edits)
