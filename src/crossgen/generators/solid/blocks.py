"""
Node -> JSX serialization for the SolidJS target.

Covers attribute and binding emission (class composition, event handlers,
spreads, style key casing) and the control-flow components `<For>` and
`<Show>`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from crossgen.emit import (
	Attr,
	ElementAttr,
	ExprAttr,
	Fragment,
	HandlerAttr,
	JsxElement,
	JsxExpr,
	JsxNode,
	JsxText,
	RenderFunction,
	SpreadAttr,
	js_string,
)
from crossgen.expressions import kebab_case_object_keys
from crossgen.generators.solid.options import SolidOptions
from crossgen.ir import ForNode, Node, else_branch, filter_empty_text_nodes

logger = logging.getLogger(__name__)

SELF_CLOSING_TAGS = frozenset(
	{
		"area",
		"base",
		"br",
		"col",
		"embed",
		"hr",
		"img",
		"input",
		"link",
		"meta",
		"param",
		"source",
		"track",
		"wbr",
	}
)

# Elements whose `onChange` fires per keystroke only as the native input event
INPUT_LIKE_TAGS = frozenset({"input", "textarea"})

DEFAULT_EVENT_ARGUMENTS = ("event",)
DEFAULT_INDEX_NAME = "index"

_EVENT_KEY = re.compile(r"^on[A-Z:]")

# Minimal trimmed length for a `css` binding to produce a css() call
_MIN_CSS_CODE_LENGTH = 4


@dataclass(slots=True)
class ClassAttribute:
	"""Result of class composition: the attribute (if any) and consumed keys."""

	attr: JsxNode | None
	properties: set[str] = field(default_factory=set)
	bindings: set[str] = field(default_factory=set)


def collect_class_string(node: Node, options: SolidOptions) -> ClassAttribute:
	"""Compose the `class` attribute from every class source on `node`.

	Static `class`/`className` properties and dynamic `class`/`className`
	bindings are merged; in styled-components mode a non-trivial `css`
	binding contributes a `css(...)` call. The `css` binding is always
	consumed.
	"""
	result = ClassAttribute(attr=None, bindings={"css"})

	static: list[str] = []
	for key in ("class", "className"):
		value = node.properties.get(key)
		if key in node.properties:
			result.properties.add(key)
		if value:
			static.append(value)

	dynamic: list[str] = []
	for key in ("class", "className"):
		binding = node.bindings.get(key)
		if binding is None:
			continue
		result.bindings.add(key)
		if binding.code:
			dynamic.append(binding.code)

	css = node.bindings.get("css")
	if (
		css is not None
		and len(css.code.strip()) > _MIN_CSS_CODE_LENGTH
		and options.styles_type == "styled-components"
	):
		dynamic.append(f"css({css.code.strip()})")

	static_string = " ".join(static)
	dynamic_string = ' + " " + '.join(dynamic)

	if static and not dynamic:
		result.attr = Attr("class", static_string)
	elif dynamic and not static:
		result.attr = ExprAttr("class", dynamic_string)
	elif static and dynamic:
		result.attr = ExprAttr("class", f"{js_string(static_string + ' ')} + {dynamic_string}")
	return result


def binding_attribute(node: Node, key: str) -> JsxNode | None:
	"""Serialize one binding per its type; None for empty bindings."""
	binding = node.bindings[key]
	code = binding.code
	if not code:
		return None
	if binding.type == "spread":
		return SpreadAttr(code)
	if _EVENT_KEY.match(key) or binding.type == "event":
		use_key = key
		if key == "onChange" and node.name in INPUT_LIKE_TAGS:
			use_key = "onInput"
		arguments = binding.arguments or list(DEFAULT_EVENT_ARGUMENTS)
		return HandlerAttr(use_key, arguments, code)
	if key == "style":
		cased = kebab_case_object_keys(code)
		if cased == code:
			logger.debug("Style binding passed through unchanged: %s", code)
		return ExprAttr(key, cased)
	return ExprAttr(key, code)


def render_children(children: list[Node], options: SolidOptions) -> list[JsxNode]:
	return [
		block_to_solid(child, options)
		for child in children
		if filter_empty_text_nodes(child)
	]


def render_for(node: ForNode, options: SolidOptions) -> JsxNode:
	"""`<For each={...}>{(item, _index) => {...}}</For>`.

	The index is read from Solid's index signal inside the body so that
	items do not subscribe to it unless the body uses it.
	"""
	children = render_children(node.children, options)
	body: JsxNode = children[0] if len(children) == 1 else Fragment(children)
	index_name = node.scope.index_name or DEFAULT_INDEX_NAME
	each = node.each
	return JsxElement(
		"For",
		attrs=[ExprAttr("each", each.code if each else "")],
		children=[
			RenderFunction(
				params=[node.scope.for_name, "_index"],
				statements=[f"const {index_name} = _index();"],
				body=body,
			)
		],
	)


def fallback_attribute(alternate: Node, options: SolidOptions) -> JsxNode:
	"""`fallback={...}` for a `<Show>` else branch."""
	rendered = block_to_solid(alternate, options)
	if isinstance(rendered, JsxExpr):
		return ExprAttr("fallback", rendered.code)
	if isinstance(rendered, JsxText):
		return ElementAttr("fallback", Fragment([rendered]))
	return ElementAttr("fallback", rendered)


def block_to_solid(node: Node, options: SolidOptions) -> JsxNode:
	"""Serialize one node (and its subtree) into a JSX fragment."""
	text = node.properties.get("_text")
	if text:
		return JsxText(text)
	text_binding = node.bindings.get("_text")
	if text_binding is not None and text_binding.code:
		return JsxExpr(text_binding.code)

	if isinstance(node, ForNode):
		return render_for(node, options)

	if node.name == "Fragment":
		return Fragment(render_children(node.children, options))

	attrs: list[JsxNode] = []
	alternate = else_branch(node) if node.name == "Show" else None
	if alternate is not None:
		attrs.append(fallback_attribute(alternate, options))

	class_attr = collect_class_string(node, options)
	if class_attr.attr is not None:
		attrs.append(class_attr.attr)

	for key, value in node.properties.items():
		if key in class_attr.properties or key == "_text":
			continue
		attrs.append(Attr(key, value))

	for key in node.bindings:
		if key in class_attr.bindings or key == "_text":
			continue
		attr = binding_attribute(node, key)
		if attr is not None:
			attrs.append(attr)

	if node.name in SELF_CLOSING_TAGS:
		return JsxElement(node.name, attrs=attrs, self_closing=True)
	return JsxElement(
		node.name, attrs=attrs, children=render_children(node.children, options)
	)
