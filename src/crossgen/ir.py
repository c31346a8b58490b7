"""
Framework-neutral component IR.

Nodes are a closed set of tagged variants (`ElementNode`, `ForNode`,
`ShowNode`, `TextNode`), each carrying a `kind` discriminant. The dict shape
accepted by `component_from_json` is the one emitted by the front-end parser
(camelCase keys).
"""

from __future__ import annotations

import copy
import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Literal, TypeAlias

from crossgen.errors import IRValidationError

BindingType: TypeAlias = Literal["normal", "spread", "event", "style", "class"]
StateValueType: TypeAlias = Literal["property", "getter", "method"]
NodeKind: TypeAlias = Literal["element", "for", "show", "text"]

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")


# =============================================================================
# Values
# =============================================================================


@dataclass(slots=True)
class Binding:
	"""A dynamic attribute: an expression plus an optional type tag."""

	code: str
	type: BindingType = "normal"
	arguments: list[str] | None = None


@dataclass(slots=True)
class StateValue:
	"""One reactive state field.

	For `getter` and `method` values, `code` holds the method-shorthand
	source, e.g. `get total() { return state.a + state.b }`.
	"""

	code: str
	type: StateValueType = "property"


@dataclass(slots=True)
class Hook:
	code: str
	deps: str | None = None


@dataclass(slots=True)
class ContextGet:
	name: str
	value: str | None = None


@dataclass(slots=True)
class ContextSet:
	name: str
	value: dict[str, StateValue] | None = None


@dataclass(slots=True)
class ComponentContext:
	get: dict[str, ContextGet] = field(default_factory=dict)
	set: dict[str, ContextSet] = field(default_factory=dict)


@dataclass(slots=True)
class Hooks:
	on_mount: Hook | None = None
	on_update: list[Hook] = field(default_factory=list)
	pre_component: Hook | None = None


@dataclass(slots=True)
class ComponentImport:
	"""An import the component source declared: `{local: imported}`.

	`imported` is `"default"` for default imports and `"*"` for namespaces.
	"""

	path: str
	imports: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class ForScope:
	for_name: str
	index_name: str | None = None


# =============================================================================
# Nodes
# =============================================================================


@dataclass(slots=True, kw_only=True)
class Node:
	"""Base class for all IR nodes."""

	kind: ClassVar[NodeKind]

	name: str = "div"
	properties: dict[str, str] = field(default_factory=dict)
	bindings: dict[str, Binding] = field(default_factory=dict)
	children: list[Node] = field(default_factory=list)
	meta: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, kw_only=True)
class ElementNode(Node):
	"""A plain element or component usage: `<div>`, `<Button>`, `<foo.bar>`."""

	kind: ClassVar[NodeKind] = "element"


@dataclass(slots=True, kw_only=True)
class ForNode(Node):
	"""Iteration over the `each` binding with loop-local names from `scope`."""

	kind: ClassVar[NodeKind] = "for"

	name: str = "For"
	scope: ForScope = field(default_factory=lambda: ForScope(for_name="item"))

	@property
	def each(self) -> Binding | None:
		return self.bindings.get("each")


@dataclass(slots=True, kw_only=True)
class ShowNode(Node):
	"""Conditional rendering of `children` when `when` is truthy.

	`meta["else"]` optionally holds the alternate subtree.
	"""

	kind: ClassVar[NodeKind] = "show"

	name: str = "Show"


@dataclass(slots=True, kw_only=True)
class TextNode(Node):
	"""Text content, stored as a `_text` property (literal) or binding."""

	kind: ClassVar[NodeKind] = "text"

	@property
	def literal(self) -> str | None:
		return self.properties.get("_text")


@dataclass(slots=True)
class Component:
	"""The root IR unit for a single emitted module."""

	name: str
	children: list[Node] = field(default_factory=list)
	context: ComponentContext = field(default_factory=ComponentContext)
	hooks: Hooks = field(default_factory=Hooks)
	state: dict[str, StateValue] = field(default_factory=dict)
	imports: list[ComponentImport] = field(default_factory=list)
	meta: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Constructors
# =============================================================================


def text(value: str) -> TextNode:
	"""Literal text node."""
	return TextNode(properties={"_text": value})


def text_expr(code: str) -> TextNode:
	"""Expression text node: `{code}`."""
	return TextNode(bindings={"_text": Binding(code)})


def clone_component(component: Component) -> Component:
	"""Deep copy; the compilation never aliases the caller's tree."""
	return copy.deepcopy(component)


# =============================================================================
# Traversal
# =============================================================================


def else_branch(node: Node) -> Node | None:
	"""The `meta["else"]` subtree of a conditional node, if it holds one."""
	alternate = node.meta.get("else")
	return alternate if isinstance(alternate, Node) else None


def _node_subtrees(node: Node) -> Iterator[Node]:
	yield from node.children
	alternate = else_branch(node)
	if alternate is not None:
		yield alternate


def walk(root: Component | Node | Iterable[Node]) -> Iterator[Node]:
	"""Yield every node in pre-order, including `meta["else"]` subtrees."""
	if isinstance(root, Component):
		stack = list(reversed(root.children))
	elif isinstance(root, Node):
		stack = [root]
	else:
		stack = list(reversed(list(root)))
	while stack:
		node = stack.pop()
		yield node
		stack.extend(reversed(list(_node_subtrees(node))))


def map_node(node: Node, fn: Callable[[Node], Node]) -> Node:
	"""Apply `fn` to `node`, then rebuild its subtrees from the result."""
	mapped = fn(node)
	children = [map_node(child, fn) for child in mapped.children]
	meta = dict(mapped.meta)
	alternate = else_branch(mapped)
	if alternate is not None:
		meta["else"] = map_node(alternate, fn)
	return replace(mapped, children=children, meta=meta)


def map_nodes(component: Component, fn: Callable[[Node], Node]) -> Component:
	"""Return a new component with `fn` applied to every node (pre-order).

	`fn` must not mutate its argument; it returns the node to keep.
	"""
	return replace(
		component, children=[map_node(child, fn) for child in component.children]
	)


# =============================================================================
# Queries
# =============================================================================


def filter_empty_text_nodes(node: Node) -> bool:
	"""False for literal text nodes that hold only whitespace."""
	return not (
		isinstance(node, TextNode)
		and node.literal is not None
		and not node.literal.strip()
	)


def get_refs(component: Component) -> list[str]:
	"""Identifiers bound through a `ref` binding, in first-seen order."""
	refs: list[str] = []
	for node in walk(component):
		ref = node.bindings.get("ref")
		if ref is not None and ref.code.strip() and ref.code.strip() not in refs:
			refs.append(ref.code.strip())
	return refs


def has_context(component: Component) -> bool:
	"""True when the component consumes context."""
	return bool(component.context.get)


def has_css(component: Component) -> bool:
	return any(
		(css := node.bindings.get("css")) is not None and css.code.strip()
		for node in walk(component)
	)


def strip_meta_properties(component: Component) -> Component:
	"""Drop `$`-prefixed properties and bindings (parser bookkeeping)."""

	def strip(node: Node) -> Node:
		return replace(
			node,
			properties={
				k: v for k, v in node.properties.items() if not k.startswith("$")
			},
			bindings={k: v for k, v in node.bindings.items() if not k.startswith("$")},
		)

	return map_nodes(component, strip)


# =============================================================================
# Validation
# =============================================================================


def validate_component(component: Component) -> None:
	"""Raise `IRValidationError` for structurally malformed IR."""
	if not component.name or not _IDENTIFIER_RE.match(component.name):
		raise IRValidationError(
			f"Component name {component.name!r} is not a valid identifier"
		)

	for i, child in enumerate(component.children):
		_validate_node(child, f"children[{i}]", component.name)

	provider_names: set[str] = set()
	for key, provider in component.context.set.items():
		if provider.name in provider_names:
			raise IRValidationError(
				f"Context provider {provider.name!r} is set more than once",
				path=f"context.set.{key}",
				component=component.name,
			)
		provider_names.add(provider.name)

	for i, hook in enumerate(component.hooks.on_update):
		if not isinstance(hook, Hook):
			raise IRValidationError(
				"onUpdate entries must be hooks",
				path=f"hooks.onUpdate[{i}]",
				component=component.name,
			)


def _validate_node(node: Node, path: str, component: str) -> None:
	if not isinstance(node, Node):
		raise IRValidationError(
			f"Expected a node, got {type(node).__name__}",
			path=path,
			component=component,
		)
	shared = node.properties.keys() & node.bindings.keys()
	if shared:
		raise IRValidationError(
			f"Keys {sorted(shared)} appear in both properties and bindings",
			path=path,
			component=component,
		)
	if isinstance(node, ForNode):
		each = node.each
		if each is None or not each.code.strip():
			raise IRValidationError(
				"For node is missing its `each` binding", path=path, component=component
			)
		if not node.scope.for_name:
			raise IRValidationError(
				"For node is missing `scope.forName`", path=path, component=component
			)
	for i, child in enumerate(node.children):
		_validate_node(child, f"{path}.children[{i}]", component)
	alternate = node.meta.get("else")
	if alternate is not None:
		if not isinstance(alternate, Node):
			raise IRValidationError(
				"`meta.else` must be a node", path=f"{path}.meta.else", component=component
			)
		_validate_node(alternate, f"{path}.meta.else", component)


# =============================================================================
# JSON interchange
# =============================================================================


def node_from_json(data: Mapping[str, Any], path: str = "node") -> Node:
	if not isinstance(data, Mapping):
		raise IRValidationError(
			f"Expected an object, got {type(data).__name__}", path=path
		)
	name = data.get("name", "div")
	properties = {str(k): str(v) for k, v in (data.get("properties") or {}).items()}
	bindings: dict[str, Binding] = {}
	for key, raw in (data.get("bindings") or {}).items():
		if raw is None:
			continue
		if not isinstance(raw, Mapping) or not isinstance(raw.get("code"), str):
			raise IRValidationError(
				f"Binding {key!r} must be an object with a string `code`",
				path=f"{path}.bindings.{key}",
			)
		arguments = raw.get("arguments")
		bindings[key] = Binding(
			code=raw["code"],
			type=raw.get("type") or "normal",
			arguments=list(arguments) if arguments is not None else None,
		)
	children = [
		node_from_json(child, f"{path}.children[{i}]")
		for i, child in enumerate(data.get("children") or [])
	]
	meta: dict[str, Any] = dict(data.get("meta") or {})
	if isinstance(meta.get("else"), Mapping):
		meta["else"] = node_from_json(meta["else"], f"{path}.meta.else")

	common: dict[str, Any] = {
		"name": name,
		"properties": properties,
		"bindings": bindings,
		"children": children,
		"meta": meta,
	}
	if "_text" in properties or "_text" in bindings:
		return TextNode(**common)
	if name == "For":
		scope = data.get("scope") or {}
		if not scope.get("forName"):
			raise IRValidationError(
				"For node is missing `scope.forName`", path=f"{path}.scope"
			)
		return ForNode(
			scope=ForScope(
				for_name=scope["forName"], index_name=scope.get("indexName") or None
			),
			**common,
		)
	if name == "Show":
		return ShowNode(**common)
	return ElementNode(**common)


def _hook_from_json(raw: Any, path: str) -> Hook | None:
	if raw is None:
		return None
	if isinstance(raw, str):
		return Hook(code=raw)
	if not isinstance(raw, Mapping) or not isinstance(raw.get("code", ""), str):
		raise IRValidationError("Hook must be an object with a string `code`", path=path)
	return Hook(code=raw.get("code", ""), deps=raw.get("deps") or None)


def _state_from_json(raw: Mapping[str, Any] | None) -> dict[str, StateValue]:
	state: dict[str, StateValue] = {}
	for key, value in (raw or {}).items():
		if isinstance(value, Mapping):
			state[key] = StateValue(
				code=str(value.get("code", "")), type=value.get("type") or "property"
			)
		else:
			state[key] = StateValue(code=str(value))
	return state


def component_from_json(data: Mapping[str, Any]) -> Component:
	"""Build a `Component` from the parser's JSON shape and validate it."""
	if not isinstance(data, Mapping):
		raise IRValidationError(f"Expected an object, got {type(data).__name__}")
	context_raw = data.get("context") or {}
	hooks_raw = data.get("hooks") or {}

	context = ComponentContext(
		get={
			key: ContextGet(name=value["name"], value=value.get("value"))
			for key, value in (context_raw.get("get") or {}).items()
		},
		set={
			key: ContextSet(
				name=value["name"],
				value=_state_from_json(value["value"]) if value.get("value") else None,
			)
			for key, value in (context_raw.get("set") or {}).items()
		},
	)
	on_update = [
		hook
		for i, raw in enumerate(hooks_raw.get("onUpdate") or [])
		if (hook := _hook_from_json(raw, f"hooks.onUpdate[{i}]")) is not None
	]
	hooks = Hooks(
		on_mount=_hook_from_json(hooks_raw.get("onMount"), "hooks.onMount"),
		on_update=on_update,
		pre_component=_hook_from_json(hooks_raw.get("preComponent"), "hooks.preComponent"),
	)
	component = Component(
		name=data.get("name", ""),
		children=[
			node_from_json(child, f"children[{i}]")
			for i, child in enumerate(data.get("children") or [])
		],
		context=context,
		hooks=hooks,
		state=_state_from_json(data.get("state")),
		imports=[
			ComponentImport(path=imp["path"], imports=dict(imp.get("imports") or {}))
			for imp in data.get("imports") or []
		],
		meta=dict(data.get("meta") or {}),
	)
	validate_component(component)
	return component


def node_to_json(node: Node) -> dict[str, Any]:
	out: dict[str, Any] = {
		"kind": node.kind,
		"name": node.name,
		"properties": dict(node.properties),
		"bindings": {
			key: _binding_to_json(binding) for key, binding in node.bindings.items()
		},
		"children": [node_to_json(child) for child in node.children],
		"meta": {
			key: node_to_json(value) if isinstance(value, Node) else value
			for key, value in node.meta.items()
		},
	}
	if isinstance(node, ForNode):
		out["scope"] = {
			"forName": node.scope.for_name,
			"indexName": node.scope.index_name,
		}
	return out


def _binding_to_json(binding: Binding) -> dict[str, Any]:
	out: dict[str, Any] = {"code": binding.code, "type": binding.type}
	if binding.arguments is not None:
		out["arguments"] = list(binding.arguments)
	return out


def _hook_to_json(hook: Hook | None) -> dict[str, Any] | None:
	if hook is None:
		return None
	return {"code": hook.code, "deps": hook.deps}


def component_to_json(component: Component) -> dict[str, Any]:
	"""Inverse of `component_from_json`; stable input for content hashing."""
	return {
		"name": component.name,
		"children": [node_to_json(child) for child in component.children],
		"context": {
			"get": {
				key: {"name": value.name, "value": value.value}
				for key, value in component.context.get.items()
			},
			"set": {
				key: {
					"name": value.name,
					"value": {
						k: {"code": v.code, "type": v.type}
						for k, v in (value.value or {}).items()
					},
				}
				for key, value in component.context.set.items()
			},
		},
		"hooks": {
			"onMount": _hook_to_json(component.hooks.on_mount),
			"onUpdate": [_hook_to_json(hook) for hook in component.hooks.on_update],
			"preComponent": _hook_to_json(component.hooks.pre_component),
		},
		"state": {
			key: {"code": value.code, "type": value.type}
			for key, value in component.state.items()
		},
		"imports": [
			{"path": imp.path, "imports": dict(imp.imports)} for imp in component.imports
		],
		"meta": dict(component.meta),
	}
