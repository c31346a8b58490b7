"""
The four-stage plugin contract.

Each stage is a left-to-right fold over the registered plugins: a plugin
receives the previous plugin's output and returns a value of the same kind.
Exceptions raised by plugins propagate unchanged and abort the compilation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Literal, TypeAlias

from typing_extensions import override

from crossgen.ir import Binding, Component, ContextSet, Hook, Node, map_nodes

logger = logging.getLogger(__name__)

CodeType: TypeAlias = Literal["properties", "bindings", "hooks", "context-set"]
CodeProcessor: TypeAlias = Callable[[str], str]
JsonStage: TypeAlias = Callable[[Component], Component]
CodeStage: TypeAlias = Callable[[str], str]


class Plugin:
	"""Base plugin with pass-through defaults.

	Subclass and override any of the stages. Stages must be pure: return a
	new (or explicitly copied) value rather than mutating shared state.
	"""

	def pre_json(self, component: Component) -> Component:
		"""Runs before structural preprocessing."""
		return component

	def post_json(self, component: Component) -> Component:
		"""Runs after preprocessing, before rendering."""
		return component

	def pre_code(self, code: str) -> str:
		"""Runs on the assembled module text, before formatting."""
		return code

	def post_code(self, code: str) -> str:
		"""Runs after formatting."""
		return code


@dataclass(slots=True)
class FunctionPlugin(Plugin):
	"""A plugin assembled from plain callables; missing stages pass through."""

	pre_json_fn: JsonStage | None = None
	post_json_fn: JsonStage | None = None
	pre_code_fn: CodeStage | None = None
	post_code_fn: CodeStage | None = None

	@override
	def pre_json(self, component: Component) -> Component:
		return self.pre_json_fn(component) if self.pre_json_fn else component

	@override
	def post_json(self, component: Component) -> Component:
		return self.post_json_fn(component) if self.post_json_fn else component

	@override
	def pre_code(self, code: str) -> str:
		return self.pre_code_fn(code) if self.pre_code_fn else code

	@override
	def post_code(self, code: str) -> str:
		return self.post_code_fn(code) if self.post_code_fn else code


def plugin(
	*,
	pre_json: JsonStage | None = None,
	post_json: JsonStage | None = None,
	pre_code: CodeStage | None = None,
	post_code: CodeStage | None = None,
) -> Plugin:
	"""Build a plugin from stage callables."""
	return FunctionPlugin(pre_json, post_json, pre_code, post_code)


# =============================================================================
# Stage runners
# =============================================================================


def run_pre_json_plugins(component: Component, plugins: Sequence[Plugin]) -> Component:
	for p in plugins:
		component = p.pre_json(component)
	return component


def run_post_json_plugins(component: Component, plugins: Sequence[Plugin]) -> Component:
	for p in plugins:
		component = p.post_json(component)
	return component


def run_pre_code_plugins(code: str, plugins: Sequence[Plugin]) -> str:
	for p in plugins:
		code = p.pre_code(code)
	return code


def run_post_code_plugins(code: str, plugins: Sequence[Plugin]) -> str:
	for p in plugins:
		code = p.post_code(code)
	return code


# =============================================================================
# Code processing
# =============================================================================


def process_component_code(
	component: Component,
	factory: Callable[[CodeType], CodeProcessor],
) -> Component:
	"""Return a copy with every expression passed through `factory(code_type)`."""
	properties = factory("properties")
	bindings = factory("bindings")
	hooks = factory("hooks")
	context_set = factory("context-set")

	def process_node(node: Node) -> Node:
		return replace(
			node,
			properties={
				# Literal text content is not code
				key: properties(value) if value and key != "_text" else value
				for key, value in node.properties.items()
			},
			bindings={
				key: Binding(
					code=bindings(binding.code),
					type=binding.type,
					arguments=binding.arguments,
				)
				if binding.code
				else binding
				for key, binding in node.bindings.items()
			},
		)

	def process_hook(hook: Hook | None) -> Hook | None:
		if hook is None:
			return None
		return Hook(
			code=hooks(hook.code) if hook.code else hook.code,
			deps=hooks(hook.deps) if hook.deps else hook.deps,
		)

	processed = map_nodes(component, process_node)
	on_update = [h for h in (process_hook(hook) for hook in component.hooks.on_update) if h]
	return replace(
		processed,
		hooks=replace(
			component.hooks,
			on_mount=process_hook(component.hooks.on_mount),
			on_update=on_update,
		),
		context=replace(
			component.context,
			set={
				key: ContextSet(
					name=provider.name,
					value={
						k: replace(v, code=context_set(v.code))
						for k, v in provider.value.items()
					}
					if provider.value
					else provider.value,
				)
				for key, provider in component.context.set.items()
			},
		),
	)


class CodeProcessorPlugin(Plugin):
	"""Runs every IR expression through a per-code-type processor.

	Applied as a `pre_json` stage.
	"""

	factory: Callable[[CodeType], CodeProcessor]

	def __init__(self, factory: Callable[[CodeType], CodeProcessor]) -> None:
		self.factory = factory

	@override
	def pre_json(self, component: Component) -> Component:
		logger.debug("Processing expression code for %s", component.name)
		return process_component_code(component, self.factory)
