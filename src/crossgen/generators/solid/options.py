from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias, get_args

from crossgen.errors import UnsupportedFeatureError
from crossgen.formatting import Formatter, PrettierFormatter
from crossgen.plugins import Plugin

StateMode: TypeAlias = Literal["signals", "store", "mutable"]
StylesType: TypeAlias = Literal["styled-components", "style-tag"]


@dataclass
class SolidOptions:
	"""
	Configuration for the SolidJS generator.

	Attributes:
	    state (str): Reactive state emission mode.
	    styles_type (str): `styled-components` emits `css(...)` calls,
	        `style-tag` collects a scoped stylesheet into a `<style>` block.
	    plugins (list[Plugin]): Stage callbacks, applied in order.
	    prettier (bool): Pass the result through `formatter` before the
	        post-code plugins.
	    formatter (Formatter): `text -> text` collaborator used when
	        `prettier` is true.
	"""

	state: StateMode = "signals"
	"""Reactive state emission mode: 'signals', 'store' or 'mutable'."""

	styles_type: StylesType = "styled-components"
	"""Style output mode: 'styled-components' or 'style-tag'."""

	plugins: list[Plugin] = field(default_factory=list)

	prettier: bool = True

	formatter: Formatter = field(default_factory=PrettierFormatter)

	def __post_init__(self) -> None:
		if self.state not in get_args(StateMode):
			raise UnsupportedFeatureError(
				f"Unknown state mode {self.state!r}; expected one of {get_args(StateMode)}"
			)
		if self.styles_type not in get_args(StylesType):
			raise UnsupportedFeatureError(
				f"Unknown styles type {self.styles_type!r}; "
				+ f"expected one of {get_args(StylesType)}"
			)
		self.plugins = list(self.plugins)
