"""
Reactive state for the SolidJS target.

`update_state_code` builds the expression rewriter; `get_state` renders the
declarations placed at the top of the component function together with the
runtime imports they need.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from crossgen.expressions import (
	capitalize,
	replace_state_refs,
	rewrite_state_assignments,
)
from crossgen.generators.solid.options import SolidOptions
from crossgen.imports import Import
from crossgen.ir import Component, StateValue

SOLID_JS = "solid-js"
SOLID_STORE = "solid-js/store"


@dataclass(slots=True)
class State:
	"""Preamble code plus the runtime symbols it references."""

	code: str
	imports: list[Import] = field(default_factory=list)


def setter_name(name: str) -> str:
	return f"set{capitalize(name)}"


def update_state_code(
	*,
	component: Component,
	options: SolidOptions,
	update_setters: bool = True,
) -> Callable[[str], str]:
	"""Build `rewrite(code) -> code` retargeting state access for `options.state`.

	With `update_setters` false only reads are rewritten (literal attribute
	values); otherwise writes become setter calls as well. Only fields
	declared in `component.state` are touched, and the rewrite is idempotent.
	"""
	mode = options.state
	state = component.state

	def read(name: str) -> str | None:
		value = state.get(name)
		if value is None or mode == "mutable":
			return None
		if value.type == "method" or (mode == "store" and value.type == "property"):
			return name
		return f"{name}()"

	def write(name: str, value_code: str) -> str | None:
		value = state.get(name)
		if value is None or value.type != "property" or mode == "mutable":
			return None
		if mode == "store":
			return f"{setter_name(name)}(reconcile({value_code}))"
		return f"{setter_name(name)}({value_code})"

	def rewrite(code: str) -> str:
		if mode != "mutable" and state:
			if update_setters:
				code = rewrite_state_assignments(code, write)
			code = replace_state_refs(code, read)
		# Literal attribute values keep their whitespace
		return code.strip() if update_setters else code

	return rewrite


def _as_function(name: str, value: StateValue, rewrite: Callable[[str], str]) -> str:
	code = rewrite(value.code)
	if value.type == "getter" and code.startswith("get "):
		code = code[len("get ") :].lstrip()
	if code.startswith("function") or code.startswith("async function"):
		return code
	if code.startswith("async ") and code[len("async ") :].lstrip().startswith(name):
		return f"async function {code[len('async ') :].lstrip()}"
	if code.startswith(name):
		return f"function {code}"
	# Arrow functions and other expressions
	return f"const {name} = {code};"


def get_state_object_string(values: Mapping[str, StateValue]) -> str:
	"""Render state values as an object literal (getters and methods inline)."""
	if not values:
		return "{}"
	parts: list[str] = []
	for key, value in values.items():
		if value.type == "property":
			parts.append(f"{key}: {value.code.strip()}")
		else:
			parts.append(value.code.strip())
	return "{ " + ", ".join(parts) + " }"


def get_state(*, component: Component, options: SolidOptions) -> State | None:
	"""Render state declarations, or None when the component has no state."""
	if not component.state:
		return None

	if options.state == "mutable":
		return State(
			code=f"const state = createMutable({get_state_object_string(component.state)});",
			imports=[Import.named("createMutable", SOLID_STORE)],
		)

	rewrite = update_state_code(component=component, options=options, update_setters=True)
	read_only = update_state_code(
		component=component, options=options, update_setters=False
	)
	create = "createStore" if options.state == "store" else "createSignal"
	lines: list[str] = []
	has_property = False
	for name, value in component.state.items():
		if value.type == "property":
			has_property = True
			lines.append(
				f"const [{name}, {setter_name(name)}] = {create}({read_only(value.code).strip()});"
			)
		else:
			lines.append(_as_function(name, value, rewrite))

	imports: list[Import] = []
	if has_property and options.state == "store":
		imports = [Import.named("createStore", SOLID_STORE), Import.named("reconcile", SOLID_STORE)]
	elif has_property:
		imports = [Import.named("createSignal", SOLID_JS)]
	return State(code="\n".join(lines), imports=imports)
