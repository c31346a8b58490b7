"""
Structured JSX emission.

Each syntactic fragment (attribute, handler, element, import line) is a small
node with an `emit(out)` method writing into a shared buffer, so escaping and
whitespace rules live here and nowhere else.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing_extensions import override

from crossgen.imports import ImportStatement


class JsxNode(ABC):
	"""Base class for emitted fragments."""

	__slots__: tuple[str, ...] = ()

	@abstractmethod
	def emit(self, out: list[str]) -> None:
		"""Emit this fragment into the output buffer."""


def emit(node: JsxNode) -> str:
	out: list[str] = []
	node.emit(out)
	return "".join(out)


# =============================================================================
# Escaping
# =============================================================================


def escape_string(s: str) -> str:
	"""Escape for double-quoted JS string literals."""
	return (
		s.replace("\\", "\\\\")
		.replace('"', '\\"')
		.replace("\n", "\\n")
		.replace("\r", "\\r")
		.replace("\t", "\\t")
		.replace("\u2028", "\\u2028")
		.replace("\u2029", "\\u2029")
	)


def escape_template(s: str) -> str:
	"""Escape raw text for a template literal body."""
	return s.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def escape_jsx_attr(s: str) -> str:
	"""Escape attribute value for JSX."""
	return s.replace("&", "&amp;").replace('"', "&quot;")


def js_string(s: str) -> str:
	return f'"{escape_string(s)}"'


# =============================================================================
# Attributes
# =============================================================================


@dataclass(slots=True)
class Attr(JsxNode):
	"""Static attribute: name="value"."""

	name: str
	value: str

	@override
	def emit(self, out: list[str]) -> None:
		out.append(self.name)
		out.append('="')
		out.append(escape_jsx_attr(self.value))
		out.append('"')


@dataclass(slots=True)
class ExprAttr(JsxNode):
	"""Expression attribute: name={code}."""

	name: str
	code: str

	@override
	def emit(self, out: list[str]) -> None:
		out.append(self.name)
		out.append("={")
		out.append(self.code)
		out.append("}")


@dataclass(slots=True)
class ElementAttr(JsxNode):
	"""Attribute holding a JSX subtree: name={<Tag />}."""

	name: str
	value: JsxNode

	@override
	def emit(self, out: list[str]) -> None:
		out.append(self.name)
		out.append("={")
		self.value.emit(out)
		out.append("}")


@dataclass(slots=True)
class SpreadAttr(JsxNode):
	"""Spread attribute: {...(code)}."""

	code: str

	@override
	def emit(self, out: list[str]) -> None:
		out.append("{...(")
		out.append(self.code)
		out.append(")}")


@dataclass(slots=True)
class HandlerAttr(JsxNode):
	"""Inline event handler: name={(params) => body}."""

	name: str
	params: Sequence[str]
	body: str

	@override
	def emit(self, out: list[str]) -> None:
		out.append(self.name)
		out.append("={(")
		out.append(", ".join(self.params))
		out.append(") => ")
		out.append(self.body)
		out.append("}")


# =============================================================================
# Children
# =============================================================================


@dataclass(slots=True)
class JsxText(JsxNode):
	"""Literal text, already in JSX text form; emitted verbatim."""

	text: str

	@override
	def emit(self, out: list[str]) -> None:
		out.append(self.text)


@dataclass(slots=True)
class JsxExpr(JsxNode):
	"""Expression child: {code}."""

	code: str

	@override
	def emit(self, out: list[str]) -> None:
		out.append("{")
		out.append(self.code)
		out.append("}")


@dataclass(slots=True)
class JsxElement(JsxNode):
	tag: str
	attrs: list[JsxNode] = field(default_factory=list)
	children: list[JsxNode] = field(default_factory=list)
	self_closing: bool = False

	@override
	def emit(self, out: list[str]) -> None:
		out.append("<")
		out.append(self.tag)
		for attr in self.attrs:
			out.append(" ")
			attr.emit(out)
		if self.self_closing:
			out.append(" />")
			return
		out.append(">")
		_emit_children(self.children, out)
		out.append("</")
		out.append(self.tag)
		out.append(">")


@dataclass(slots=True)
class Fragment(JsxNode):
	children: list[JsxNode] = field(default_factory=list)

	@override
	def emit(self, out: list[str]) -> None:
		out.append("<>")
		_emit_children(self.children, out)
		out.append("</>")


@dataclass(slots=True)
class RenderFunction(JsxNode):
	"""Child render callback: {(params) => { statements return body; }}."""

	params: Sequence[str]
	statements: Sequence[str]
	body: JsxNode

	@override
	def emit(self, out: list[str]) -> None:
		out.append("{(")
		out.append(", ".join(self.params))
		out.append(") => {\n")
		for stmt in self.statements:
			out.append(stmt)
			out.append("\n")
		out.append("return ")
		self.body.emit(out)
		out.append(";\n}}")


@dataclass(slots=True)
class StyleTag(JsxNode):
	"""<style jsx>{`css`}</style>"""

	css: str

	@override
	def emit(self, out: list[str]) -> None:
		out.append("<style jsx>{`")
		out.append(escape_template(self.css))
		out.append("`}</style>")


_INLINE = (JsxText, JsxExpr)


def _emit_children(children: Sequence[JsxNode], out: list[str]) -> None:
	# A line break next to text would be collapsed into it by JSX, so text
	# and expression children stay on the line of their neighbours.
	for i, child in enumerate(children):
		if i > 0 and not isinstance(child, _INLINE) and not isinstance(children[i - 1], _INLINE):
			out.append("\n")
		child.emit(out)


# =============================================================================
# Imports
# =============================================================================


def emit_import(stmt: ImportStatement) -> str:
	"""Render one merged import statement."""
	clauses: list[str] = []
	if stmt.default_import:
		clauses.append(stmt.default_import)
	if stmt.namespace_import:
		clauses.append(f"* as {stmt.namespace_import}")
	if stmt.values:
		members = ", ".join(
			f"{m.name} as {m.alias}" if m.alias else m.name for m in stmt.values
		)
		clauses.append(f"{{ {members} }}")
	return f"import {', '.join(clauses)} from {js_string(stmt.src)};"
