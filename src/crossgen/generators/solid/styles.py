"""
Scoped stylesheet collection for `styles_type="style-tag"`.

Each node with a static `css` object gets a generated class name, prefixed
with a content hash of the IR so that two components never share class
names. The collected rules are rendered as one stylesheet string.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field, replace

from crossgen.errors import UnsupportedFeatureError
from crossgen.expressions import ObjectLiteral, kebab_case, parse_object_literal
from crossgen.ir import Component, Node, component_to_json, map_nodes

logger = logging.getLogger(__name__)

# Stylesheets no longer than this (after trimming) are not emitted
MIN_CSS_LENGTH = 4


def hash_component(component: Component) -> str:
	"""Short, stable content hash of the IR."""
	payload = json.dumps(component_to_json(component), sort_keys=True, default=str)
	return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:8]


@dataclass
class CollectedStyles:
	component: Component
	rules: dict[str, ObjectLiteral] = field(default_factory=dict)

	@property
	def css(self) -> str:
		return render_css(self.rules)


def collect_styles(component: Component, *, prefix: str | None = None) -> CollectedStyles:
	"""Move static `css` bindings into generated classes.

	Returns the rewritten component (every `css` binding removed) and the
	class -> declarations map, in tree order.
	"""
	rules: dict[str, ObjectLiteral] = {}
	counts: dict[str, int] = {}

	def collect(node: Node) -> Node:
		css = node.bindings.get("css")
		if css is None:
			return node
		bindings = {k: v for k, v in node.bindings.items() if k != "css"}
		if not css.code.strip():
			return replace(node, bindings=bindings)
		try:
			value = parse_object_literal(css.code)
		except UnsupportedFeatureError as exc:
			raise UnsupportedFeatureError(
				f"Dynamic css is not supported with style-tag output: {exc.message}",
				component=component.name,
			) from exc
		if not value:
			return replace(node, bindings=bindings)
		base = kebab_case(node.name) or "div"
		index = counts[base] = counts.get(base, 0) + 1
		class_name = base
		if prefix:
			class_name += f"-{prefix}"
		if index > 1:
			class_name += f"-{index}"
		rules[class_name] = value
		properties = dict(node.properties)
		properties["class"] = f"{class_name} {properties.get('class', '')}".strip()
		return replace(node, properties=properties, bindings=bindings)

	collected = map_nodes(component, collect)
	logger.debug("Collected %d style rule(s) for %s", len(rules), component.name)
	return CollectedStyles(component=collected, rules=rules)


def collect_css(component: Component, *, prefix: str | None = None) -> tuple[Component, str]:
	styles = collect_styles(component, prefix=prefix)
	return styles.component, styles.css


# =============================================================================
# Rendering
# =============================================================================


def _declarations(styles: ObjectLiteral, indent: str) -> list[str]:
	return [
		f"{indent}{kebab_case(key)}: {value};"
		for key, value in styles.items()
		if isinstance(value, str)
	]


def _render_rule(selector: str, styles: ObjectLiteral, indent: str, out: list[str]) -> None:
	declarations = _declarations(styles, indent + "  ")
	if declarations:
		out.append(f"{indent}{selector} {{")
		out.extend(declarations)
		out.append(f"{indent}}}")
	for key, value in styles.items():
		if not isinstance(value, dict):
			continue
		if key.startswith("@"):
			out.append(f"{indent}{key} {{")
			_render_rule(selector, value, indent + "  ", out)
			out.append(f"{indent}}}")
		elif "&" in key:
			_render_rule(key.replace("&", selector), value, indent, out)
		elif key.startswith(":"):
			_render_rule(f"{selector}{key}", value, indent, out)
		else:
			_render_rule(f"{selector} {key}", value, indent, out)


def render_css(rules: dict[str, ObjectLiteral]) -> str:
	out: list[str] = []
	for class_name, styles in rules.items():
		_render_rule(f".{class_name}", styles, "", out)
	return "\n".join(out)
