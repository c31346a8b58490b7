"""
SolidJS backend: preprocessing, import aggregation and module assembly.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from typing_extensions import override

from mako.template import Template

from crossgen.emit import Fragment, JsxNode, StyleTag, emit, emit_import
from crossgen.generators.base import Generator, register_generator
from crossgen.generators.solid.blocks import block_to_solid
from crossgen.generators.solid.options import SolidOptions
from crossgen.generators.solid.state import (
	SOLID_JS,
	State,
	get_state,
	get_state_object_string,
	update_state_code,
)
from crossgen.generators.solid.styles import MIN_CSS_LENGTH, collect_css, hash_component
from crossgen.imports import Import, Imports
from crossgen.ir import (
	Binding,
	Component,
	ElementNode,
	ForNode,
	Node,
	clone_component,
	filter_empty_text_nodes,
	get_refs,
	has_context,
	has_css,
	map_nodes,
	strip_meta_properties,
	validate_component,
	walk,
)
from crossgen.plugins import (
	CodeProcessorPlugin,
	CodeType,
	Plugin,
	run_post_code_plugins,
	run_post_json_plugins,
	run_pre_code_plugins,
	run_pre_json_plugins,
)

logger = logging.getLogger(__name__)

SOLID_WEB = "solid-js/web"
STYLED_COMPONENTS = "solid-styled-components"
DYNAMIC_TAG = "Dynamic"


# =============================================================================
# Preprocessing
# =============================================================================


def add_provider_components(component: Component) -> Component:
	"""Wrap the root children in one `<Name.Provider>` per `context.set` entry."""
	children = component.children
	for provider in component.context.set.values():
		bindings: dict[str, Binding] = {}
		if provider.value:
			bindings["value"] = Binding(get_state_object_string(provider.value))
		children = [
			ElementNode(name=f"{provider.name}.Provider", bindings=bindings, children=children)
		]
	return replace(component, children=children)


def process_dynamic_components(component: Component) -> tuple[Component, bool]:
	"""Rewrite `<foo.bar>` to `<Dynamic component={foo.bar}>`.

	Returns the new component and whether any node was rewritten.
	"""
	found = False

	def process(node: Node) -> Node:
		nonlocal found
		if "." not in node.name:
			return node
		found = True
		return replace(
			node,
			name=DYNAMIC_TAG,
			bindings={"component": Binding(node.name), **node.bindings},
		)

	processed = map_nodes(component, process)
	if found:
		logger.debug("Found dynamic components in %s", component.name)
	return processed, found


# =============================================================================
# Imports
# =============================================================================


def collect_imports(
	component: Component,
	*,
	options: SolidOptions,
	state: State | None = None,
	found_dynamic: bool = False,
	has_styles: bool = False,
) -> Imports:
	"""Runtime symbols needed by the rendered component, in a stable order."""
	has_show = has_for = False
	for node in walk(component):
		has_show = has_show or node.name == "Show"
		has_for = has_for or isinstance(node, ForNode)
	on_mount = component.hooks.on_mount
	has_effects = any(hook.deps for hook in component.hooks.on_update)

	imports = Imports()
	if has_context(component):
		imports.add(Import.named("useContext", SOLID_JS))
	if has_show:
		imports.add(Import.named("Show", SOLID_JS))
	if has_for:
		imports.add(Import.named("For", SOLID_JS))
	if on_mount is not None and on_mount.code.strip():
		imports.add(Import.named("onMount", SOLID_JS))
	if has_effects:
		imports.add(Import.named("on", SOLID_JS))
		imports.add(Import.named("createEffect", SOLID_JS))
	if state is not None:
		imports.add_all(state.imports)
	if found_dynamic:
		imports.add(Import.named(DYNAMIC_TAG, SOLID_WEB))
	if has_styles and options.styles_type == "styled-components":
		imports.add(Import.named("css", STYLED_COMPONENTS))
	for imp in component.imports:
		for local, imported in imp.imports.items():
			if imported == "default":
				imports.add(Import.default(local, imp.path))
			elif imported == "*":
				imports.add(Import.namespace(local, imp.path))
			else:
				imports.add(
					Import.named(imported, imp.path, alias=local if local != imported else None)
				)
	return imports


# =============================================================================
# Assembly
# =============================================================================

TEMPLATE = Template(
	"""\
% for line in import_lines:
${line}
% endfor
% if pre_component:

${pre_component}
% endif

function ${name}(props) {
% for block in blocks:
${block}

% endfor
  return (
${jsx}
  );
}

export default ${name};
"""
)


def indent(text: str, level: int, unit: str = "  ") -> str:
	"""Indent all non-empty lines by level."""
	prefix = unit * level
	return "\n".join(
		(prefix + line) if line.strip() else line for line in text.splitlines()
	)


def render_hooks(component: Component) -> list[str]:
	blocks: list[str] = []
	on_mount = component.hooks.on_mount
	if on_mount is not None and on_mount.code.strip():
		blocks.append(f"onMount(() => {{\n  {on_mount.code.strip()}\n}});")
	for index, hook in enumerate(component.hooks.on_update):
		if not hook.deps:
			# Effects without a dependency list are not translated
			logger.warning(
				"Skipping onUpdate hook %d of %s: no dependencies declared",
				index,
				component.name,
			)
			continue
		fn_name = f"onUpdateFn_{index}"
		blocks.append(
			f"function {fn_name}() {{\n  {hook.code.strip()}\n}}\n"
			+ f"createEffect(on(() => {hook.deps}, {fn_name}));"
		)
	return blocks


def render_body(component: Component, options: SolidOptions, css: str = "") -> JsxNode:
	"""Root JSX: the rendered children plus the style block when non-trivial.

	A fragment wraps the result unless there is exactly one root element.
	"""
	children = [
		block_to_solid(child, options)
		for child in component.children
		if filter_empty_text_nodes(child)
	]
	if len(css.strip()) > MIN_CSS_LENGTH:
		children.append(StyleTag(css))
	if len(children) == 1:
		return children[0]
	return Fragment(children)


def render_module(
	component: Component,
	*,
	imports: Imports,
	state: State | None,
	jsx: JsxNode,
) -> str:
	blocks: list[str] = []
	if state is not None and state.code:
		blocks.append(state.code)
	refs = get_refs(component)
	if refs:
		blocks.append("\n".join(f"let {ref};" for ref in refs))
	if component.context.get:
		blocks.append(
			"\n".join(
				f"const {key} = useContext({ctx.name});"
				for key, ctx in component.context.get.items()
			)
		)
	blocks.extend(render_hooks(component))

	pre_component = component.hooks.pre_component
	rendered = TEMPLATE.render_unicode(
		name=component.name,
		import_lines=[emit_import(stmt) for stmt in imports.statements()],
		pre_component=pre_component.code.strip() if pre_component else "",
		blocks=[indent(block, 1) for block in blocks],
		jsx=indent(emit(jsx), 2),
	)
	return str(rendered).lstrip()


# =============================================================================
# Generator
# =============================================================================


@register_generator
class SolidGenerator(Generator[SolidOptions]):
	"""Compiles components into SolidJS modules."""

	name = "solid"

	@override
	@classmethod
	def default_options(cls) -> SolidOptions:
		return SolidOptions()

	def state_processor(self, component: Component) -> CodeProcessorPlugin:
		"""Implicit first `pre_json` stage retargeting every expression."""
		options = self.options

		def factory(code_type: CodeType):
			return update_state_code(
				component=component,
				options=options,
				update_setters=code_type != "properties",
			)

		return CodeProcessorPlugin(factory)

	@override
	def generate(self, component: Component) -> str:
		options = self.options
		json = clone_component(component)
		validate_component(json)

		plugins: list[Plugin] = [self.state_processor(json), *options.plugins]
		logger.debug(
			"Generating %s with %d user plugin(s)", json.name, len(options.plugins)
		)

		json = run_pre_json_plugins(json, plugins)
		json = add_provider_components(json)
		json = run_post_json_plugins(json, plugins)
		validate_component(json)

		json = strip_meta_properties(json)
		json, found_dynamic = process_dynamic_components(json)
		css = ""
		if options.styles_type == "style-tag":
			json, css = collect_css(json, prefix=hash_component(json))
		component_has_styles = has_css(json)

		state = get_state(component=json, options=options)
		imports = collect_imports(
			json,
			options=options,
			state=state,
			found_dynamic=found_dynamic,
			has_styles=component_has_styles,
		)
		code = render_module(
			json, imports=imports, state=state, jsx=render_body(json, options, css)
		)

		code = run_pre_code_plugins(code, plugins)
		if options.prettier:
			code = options.formatter(code)
		return run_post_code_plugins(code, plugins)


def component_to_solid(
	options: SolidOptions | Mapping[str, Any] | None = None,
) -> SolidGenerator:
	"""`component_to_solid(options)(component) -> str`."""
	return SolidGenerator(options)
