"""
Tests for JSX fragment emission and import line rendering.
"""

from crossgen.emit import (
	Attr,
	ElementAttr,
	ExprAttr,
	Fragment,
	HandlerAttr,
	JsxElement,
	JsxExpr,
	JsxText,
	RenderFunction,
	SpreadAttr,
	StyleTag,
	emit,
	emit_import,
	js_string,
)
from crossgen.imports import ImportMember, ImportStatement

# =============================================================================
# Escaping
# =============================================================================


class TestEscaping:
	def test_js_string(self):
		assert js_string("hello") == '"hello"'
		assert js_string('say "hi"') == '"say \\"hi\\""'
		assert js_string("a\nb\tc") == '"a\\nb\\tc"'
		assert js_string("back\\slash") == '"back\\\\slash"'

	def test_line_separators(self):
		assert js_string("\u2028") == '"\\u2028"'

	def test_attr_value(self):
		assert emit(Attr("title", 'a "b" & c')) == 'title="a &quot;b&quot; &amp; c"'

	def test_style_tag_template(self):
		assert emit(StyleTag(".a::after { content: `x` }")) == (
			"<style jsx>{`.a::after { content: \\`x\\` }`}</style>"
		)


# =============================================================================
# Attributes
# =============================================================================


class TestAttributes:
	def test_expression(self):
		assert emit(ExprAttr("value", "count()")) == "value={count()}"

	def test_spread(self):
		assert emit(SpreadAttr("props")) == "{...(props)}"

	def test_handler(self):
		assert emit(HandlerAttr("onClick", ["event"], "go(event)")) == (
			"onClick={(event) => go(event)}"
		)
		assert emit(HandlerAttr("onKey", ["a", "b"], "f(a, b)")) == (
			"onKey={(a, b) => f(a, b)}"
		)

	def test_element_attr(self):
		node = ElementAttr("fallback", JsxElement("span", children=[JsxText("B")]))
		assert emit(node) == "fallback={<span>B</span>}"


# =============================================================================
# Elements
# =============================================================================


class TestElements:
	def test_element(self):
		node = JsxElement(
			"div",
			attrs=[Attr("id", "x"), ExprAttr("title", "t")],
			children=[JsxText("Hi"), JsxExpr("name")],
		)
		assert emit(node) == '<div id="x" title={t}>Hi{name}</div>'

	def test_self_closing(self):
		assert emit(JsxElement("input", [Attr("type", "text")], self_closing=True)) == (
			'<input type="text" />'
		)

	def test_fragment(self):
		node = Fragment([JsxElement("a"), JsxElement("b")])
		assert emit(node) == "<><a></a>\n<b></b></>"

	def test_render_function(self):
		node = RenderFunction(
			params=["item", "_index"],
			statements=["const index = _index();"],
			body=JsxElement("li", children=[JsxExpr("item")]),
		)
		assert emit(node) == (
			"{(item, _index) => {\nconst index = _index();\nreturn <li>{item}</li>;\n}}"
		)


# =============================================================================
# Imports
# =============================================================================


class TestEmitImport:
	def test_named(self):
		stmt = ImportStatement("solid-js", values=[ImportMember("Show"), ImportMember("For")])
		assert emit_import(stmt) == 'import { Show, For } from "solid-js";'

	def test_default_namespace_and_alias(self):
		stmt = ImportStatement(
			"./lib",
			default_import="Lib",
			namespace_import="all",
			values=[ImportMember("a", "b")],
		)
		assert emit_import(stmt) == 'import Lib, * as all, { a as b } from "./lib";'

