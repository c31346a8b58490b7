"""
Syntax-aware transforms over IR expression code.

Expressions are kept as text end to end. Each transform parses the code with
tree-sitter's JavaScript grammar and splices replacements back into the
source by node byte ranges, so everything outside the rewritten nodes
stays exactly as written.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeAlias

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

from crossgen.errors import UnsupportedFeatureError

ObjectLiteral: TypeAlias = dict[str, "str | ObjectLiteral"]

JS_LANGUAGE = Language(tree_sitter_javascript.language())
_PARSER = Parser(JS_LANGUAGE)

_WORD = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")
_CASEABLE = re.compile(r"^[A-Za-z0-9_-]+$")

# Tried in order until one parses cleanly: statements and expressions as
# they are, a parenthesized object literal, then object members (method
# shorthand and getters).
_WRAPPERS: tuple[tuple[str, str], ...] = (("", ""), ("(", ")"), ("({", "})"))

_KEY_TYPES = ("property_identifier", "string")


@dataclass(slots=True)
class Source:
	"""Parsed code, along with the wrapper it had to be parsed in."""

	code: bytes
	tree: Tree
	prefix: str = ""
	suffix: str = ""

	@property
	def root(self) -> Node:
		return self.tree.root_node

	def text(self, node: Node) -> str:
		return self.code[node.start_byte : node.end_byte].decode("utf-8")

	def between(self, start: int, end: int) -> str:
		return self.code[start:end].decode("utf-8")


Visitor: TypeAlias = Callable[[Source, Node], "str | None"]


# =============================================================================
# Parsing and rendering
# =============================================================================


def parse(code: str, wrappers: tuple[tuple[str, str], ...] = _WRAPPERS) -> Source:
	"""Parse `code` with the first wrapper that yields an error-free tree.

	When none does, the bare code is parsed anyway; tree-sitter recovers
	around the broken region and the rest of the tree stays usable.
	"""
	for prefix, suffix in wrappers:
		source = (prefix + code + suffix).encode("utf-8")
		tree = _PARSER.parse(source)
		if not tree.root_node.has_error:
			return Source(source, tree, prefix, suffix)
	source = code.encode("utf-8")
	return Source(source, _PARSER.parse(source))


def _render(source: Source, node: Node, visit: Visitor) -> str:
	replaced = visit(source, node)
	if replaced is not None:
		return replaced
	out: list[str] = []
	pos = node.start_byte
	for child in node.children:
		out.append(source.between(pos, child.start_byte))
		out.append(_render(source, child, visit))
		pos = child.end_byte
	out.append(source.between(pos, node.end_byte))
	return "".join(out)


def rewrite(source: Source, visit: Visitor) -> str:
	"""Render `source` with every node `visit` replaces swapped out.

	`visit` is called outermost first and returns None to descend into a
	node's children instead of replacing it.
	"""
	root = source.root
	text = (
		source.between(0, root.start_byte)
		+ _render(source, root, visit)
		+ source.between(root.end_byte, len(source.code))
	)
	return text[len(source.prefix) : len(text) - len(source.suffix)]


# =============================================================================
# Member references
# =============================================================================


def member_name(source: Source, node: Node | None, obj: str) -> str | None:
	"""`name` when `node` is exactly `<obj>.name`, with `obj` a bare identifier."""
	if node is None or node.type != "member_expression":
		return None
	target = node.child_by_field_name("object")
	prop = node.child_by_field_name("property")
	if target is None or prop is None:
		return None
	if target.type != "identifier" or source.text(target) != obj:
		return None
	if prop.type != "property_identifier":
		return None
	return source.text(prop)


def _operand(node: Node) -> Node | None:
	"""Operand of a unary or update expression."""
	argument = node.child_by_field_name("argument")
	if argument is None and node.named_children:
		return node.named_children[0]
	return argument


def replace_state_refs(
	code: str,
	replace: Callable[[str], str | None],
	obj: str = "state",
) -> str:
	"""Replace each `state.<name>` read with `replace(name)`.

	`replace` returns None to leave a reference untouched.
	"""
	if not code.strip():
		return code

	def visit(source: Source, node: Node) -> str | None:
		name = member_name(source, node, obj)
		return None if name is None else replace(name)

	return rewrite(parse(code), visit)


def rewrite_state_assignments(
	code: str,
	setter: Callable[[str, str], str | None],
	obj: str = "state",
) -> str:
	"""Rewrite writes to `state.<name>` as `setter(name, value_code)`.

	Compound assignments and `++`/`--` are expanded so the setter always
	receives the full new value, e.g. `state.n += 2` -> `setter("n",
	"state.n + (2)")`. `setter` returns None to keep the original write.
	"""
	if not code.strip():
		return code

	def visit(source: Source, node: Node) -> str | None:
		if node.type == "assignment_expression":
			name = member_name(source, node.child_by_field_name("left"), obj)
			right = node.child_by_field_name("right")
			if name is None or right is None:
				return None
			return setter(name, _render(source, right, visit))

		if node.type == "augmented_assignment_expression":
			left = node.child_by_field_name("left")
			right = node.child_by_field_name("right")
			name = member_name(source, left, obj)
			if name is None or left is None or right is None:
				return None
			# `+=` -> `+`, `??=` -> `??`
			operator = source.between(left.end_byte, right.start_byte).strip()[:-1]
			value = _render(source, right, visit)
			return setter(name, f"{obj}.{name} {operator} ({value})")

		if node.type == "update_expression":
			name = member_name(source, _operand(node), obj)
			if name is None:
				return None
			operator = "-" if "--" in source.text(node) else "+"
			return setter(name, f"{obj}.{name} {operator} 1")

		return None

	return rewrite(parse(code), visit)


# =============================================================================
# Object literals
# =============================================================================


def _object_literal(code: str) -> tuple[Source, Node] | None:
	"""The `object` node when the whole of `code` is one object literal."""
	if not code.strip():
		return None
	source = parse(code, (("(", ")"),))
	if source.root.has_error:
		return None
	statements = [n for n in source.root.named_children if n.type != "comment"]
	if len(statements) != 1 or statements[0].type != "expression_statement":
		return None
	wrapped = statements[0].named_children
	if len(wrapped) != 1 or wrapped[0].type != "parenthesized_expression":
		return None
	inner = [n for n in wrapped[0].named_children if n.type != "comment"]
	if len(inner) != 1 or inner[0].type != "object":
		return None
	return source, inner[0]


def _key_name(source: Source, key: Node) -> str:
	text = source.text(key)
	return _unquote(text) if key.type == "string" else text


def kebab_case_object_keys(code: str) -> str:
	"""Rewrite top-level keys of an object literal to quoted kebab-case.

	Anything that is not a direct object literal (ternaries, calls,
	identifiers) is returned unchanged, and nested objects keep their keys.
	"""
	found = _object_literal(code)
	if found is None:
		return code
	source, literal = found
	keys: set[tuple[int, int]] = set()
	for pair in literal.named_children:
		if pair.type != "pair":
			continue
		key = pair.child_by_field_name("key")
		if key is not None and key.type in _KEY_TYPES:
			keys.add((key.start_byte, key.end_byte))

	def visit(source: Source, node: Node) -> str | None:
		if node.type in _KEY_TYPES and (node.start_byte, node.end_byte) in keys:
			return json.dumps(kebab_case(_key_name(source, node)))
		return None

	return rewrite(source, visit)


def _unquote(literal: str) -> str:
	body = literal[1:-1]
	out: list[str] = []
	i = 0
	escapes = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
	while i < len(body):
		ch = body[i]
		if ch == "\\" and i + 1 < len(body):
			nxt = body[i + 1]
			out.append(escapes.get(nxt, nxt))
			i += 2
			continue
		out.append(ch)
		i += 1
	return "".join(out)


def _not_static(code: str, reason: str) -> UnsupportedFeatureError:
	return UnsupportedFeatureError(
		f"Expected a static object literal ({reason}): {code.strip()!r}"
	)


def _static_object(source: Source, node: Node, code: str) -> ObjectLiteral:
	result: ObjectLiteral = {}
	for member in node.named_children:
		if member.type == "comment":
			continue
		if member.type != "pair":
			raise _not_static(code, f"unsupported member {source.text(member)!r}")
		key = member.child_by_field_name("key")
		value = member.child_by_field_name("value")
		if key is None or value is None:
			raise _not_static(code, "incomplete member")
		if key.type not in (*_KEY_TYPES, "number"):
			raise _not_static(code, f"unsupported key {source.text(key)!r}")
		result[_key_name(source, key)] = _static_value(source, value, code)
	return result


def _static_value(source: Source, node: Node, code: str) -> str | ObjectLiteral:
	if node.type == "object":
		return _static_object(source, node, code)
	text = source.text(node)
	if node.type == "string":
		return _unquote(text)
	if node.type == "number":
		return text
	if node.type == "template_string":
		if not any(child.type == "template_substitution" for child in node.named_children):
			return text[1:-1]
	elif node.type == "unary_expression" and text.startswith("-"):
		argument = _operand(node)
		if argument is not None and argument.type == "number":
			return f"-{source.text(argument)}"
	raise _not_static(code, f"unsupported value {text!r}")


def parse_object_literal(code: str) -> ObjectLiteral:
	"""Parse a static object literal such as a `css` binding.

	Raises `UnsupportedFeatureError` for anything dynamic.
	"""
	found = _object_literal(code)
	if found is None:
		raise _not_static(code, "not a single object literal")
	source, literal = found
	return _static_object(source, literal, code)


# =============================================================================
# Casing
# =============================================================================


def kebab_case(name: str) -> str:
	"""`backgroundColor` -> `background-color`; custom properties are kept."""
	if name.startswith("--") or not _CASEABLE.match(name):
		return name
	return "-".join(word.lower() for word in _WORD.findall(name))


def capitalize(name: str) -> str:
	return name[:1].upper() + name[1:]
