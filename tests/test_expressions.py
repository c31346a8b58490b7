"""
Tests for syntax-aware expression rewriting.
"""

import pytest
from crossgen.errors import UnsupportedFeatureError
from crossgen.expressions import (
	kebab_case,
	kebab_case_object_keys,
	parse,
	parse_object_literal,
	replace_state_refs,
	rewrite_state_assignments,
)


def read(name: str) -> str:
	return f"{name}()"


def write(name: str, value: str) -> str:
	return f"set_{name}({value})"


# =============================================================================
# Parsing
# =============================================================================


class TestParse:
	def test_plain_code_is_not_wrapped(self):
		source = parse("state.a = 1; foo()")
		assert source.prefix == ""
		assert not source.root.has_error

	def test_object_literal_is_parenthesized(self):
		source = parse("{ color: 'red', padding: 4 }")
		assert source.prefix == "("
		assert not source.root.has_error

	def test_method_shorthand_is_wrapped_in_object(self):
		source = parse("get double() { return state.count * 2 }")
		assert source.prefix == "({"
		assert not source.root.has_error

	def test_broken_code_still_parses(self):
		source = parse("Don't panic")
		assert source.prefix == ""
		assert source.root.has_error


# =============================================================================
# Reads
# =============================================================================


class TestReplaceStateRefs:
	def test_simple(self):
		assert replace_state_refs("state.count + 1", read) == "count() + 1"

	def test_ignores_nested_member(self):
		assert replace_state_refs("props.state.count", read) == "props.state.count"
		assert replace_state_refs("a?.state.count", read) == "a?.state.count"

	def test_ignores_strings_and_comments(self):
		code = "'state.count' /* state.count */"
		assert replace_state_refs(code, read) == code

	def test_template_interpolations(self):
		assert replace_state_refs("`n: ${state.count}`", read) == "`n: ${count()}`"

	def test_none_keeps_reference(self):
		assert replace_state_refs("state.other", lambda name: None) == "state.other"

	def test_property_chain(self):
		assert replace_state_refs("state.user.name", read) == "user().name"

	def test_custom_object(self):
		assert replace_state_refs("store.x + state.x", read, obj="store") == "x() + state.x"

	def test_regex_literal_is_opaque(self):
		code = "value.replace(/state.count/g, state.count)"
		assert replace_state_refs(code, read) == "value.replace(/state.count/g, count())"

	def test_method_shorthand(self):
		code = "get double() { return state.count * 2 }"
		assert replace_state_refs(code, read) == "get double() { return count() * 2 }"

	def test_jsx_expression(self):
		code = "<span title={state.label}>{state.count}</span>"
		assert replace_state_refs(code, read) == "<span title={label()}>{count()}</span>"


# =============================================================================
# Writes
# =============================================================================


class TestRewriteStateAssignments:
	def test_assignment(self):
		assert rewrite_state_assignments("state.count = 5", write) == "set_count(5)"

	def test_rhs_is_rewritten(self):
		code = "state.a = state.b = 1"
		assert rewrite_state_assignments(code, write) == "set_a(set_b(1))"

	def test_compound(self):
		assert rewrite_state_assignments("state.n += 2", write) == "set_n(state.n + (2))"
		assert rewrite_state_assignments("state.s ??= 'x'", write) == (
			"set_s(state.s ?? ('x'))"
		)

	def test_increment(self):
		assert rewrite_state_assignments("state.n++", write) == "set_n(state.n + 1)"
		assert rewrite_state_assignments("--state.n", write) == "set_n(state.n - 1)"

	def test_comparison_is_not_assignment(self):
		code = "state.n === 1 ? a : b"
		assert rewrite_state_assignments(code, write) == code

	def test_statement_terminators(self):
		code = "state.a = 1; state.b = foo(1, 2)"
		assert rewrite_state_assignments(code, write) == "set_a(1); set_b(foo(1, 2))"

	def test_newline_terminates_statement(self):
		code = "state.a = 1\nstate.b = 2"
		assert rewrite_state_assignments(code, write) == "set_a(1)\nset_b(2)"

	def test_inside_block(self):
		code = "if (x) { state.a = 1 }"
		assert rewrite_state_assignments(code, write) == "if (x) { set_a(1) }"

	def test_arrow_argument(self):
		code = "items.forEach((i) => state.last = i)"
		assert rewrite_state_assignments(code, write) == "items.forEach((i) => set_last(i))"

	def test_regex_argument_does_not_swallow_next_statement(self):
		code = "state.a = event.target.value.replace(/'/g, ''); state.b = state.b + 1"
		assert rewrite_state_assignments(code, write) == (
			"set_a(event.target.value.replace(/'/g, '')); set_b(state.b + 1)"
		)

	def test_division_and_regex_in_rhs(self):
		code = "state.a = x / 2; state.b = /a+b/.test(y)"
		assert rewrite_state_assignments(code, write) == (
			"set_a(x / 2); set_b(/a+b/.test(y))"
		)

	def test_none_keeps_write(self):
		code = "state.a = 1"
		assert rewrite_state_assignments(code, lambda name, value: None) == code


# =============================================================================
# Object literals
# =============================================================================


class TestKebabCaseObjectKeys:
	def test_top_level_keys(self):
		code = "{ fontSize: '12px', 'backgroundColor': color }"
		assert kebab_case_object_keys(code) == (
			'{ "font-size": \'12px\', "background-color": color }'
		)

	def test_nested_objects_keep_keys(self):
		assert kebab_case_object_keys("{ a: { fontSize: 1 } }") == (
			'{ "a": { fontSize: 1 } }'
		)

	def test_non_literals_unchanged(self):
		for code in ("cond ? { a: 1 } : {}", "styles()", "props.style", "{ a: 1 }.a"):
			assert kebab_case_object_keys(code) == code

	def test_custom_properties(self):
		assert kebab_case_object_keys("{ '--main-color': c }") == '{ "--main-color": c }'


class TestParseObjectLiteral:
	def test_static_values(self):
		code = "{ color: 'red', padding: 4, margin: -2, ':hover': { color: `blue` } }"
		assert parse_object_literal(code) == {
			"color": "red",
			"padding": "4",
			"margin": "-2",
			":hover": {"color": "blue"},
		}

	def test_empty(self):
		assert parse_object_literal("{}") == {}

	@pytest.mark.parametrize(
		"code",
		[
			"{ color: props.color }",
			"{ color: `${c}` }",
			"{ ...base }",
			"{ a: 1 b: 2 }",
			"{ a: 1 } + x",
			"theme.styles",
		],
	)
	def test_dynamic_values_raise(self, code: str):
		with pytest.raises(UnsupportedFeatureError, match="static object literal"):
			parse_object_literal(code)


class TestKebabCase:
	@pytest.mark.parametrize(
		"name,expected",
		[
			("backgroundColor", "background-color"),
			("color", "color"),
			("MyButton", "my-button"),
			("HTMLElement", "html-element"),
			("--custom-prop", "--custom-prop"),
			("@media (x)", "@media (x)"),
		],
	)
	def test_kebab_case(self, name: str, expected: str):
		assert kebab_case(name) == expected
