"""
The contract every target backend satisfies.

A generator is configured once with its options and then compiles any number
of components. Each call deep-clones its input, so concurrent or repeated
calls never share mutable state.
"""

from __future__ import annotations

import dataclasses
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Generic, TypeVar

from crossgen.errors import UnsupportedFeatureError
from crossgen.ir import Component

O = TypeVar("O")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Global registry: target name -> generator class
GENERATOR_REGISTRY: dict[str, type["Generator[Any]"]] = {}


def merge_options(defaults: O, overrides: O | Mapping[str, Any] | None) -> O:
	"""Overlay `overrides` on a copy of the `defaults` dataclass.

	Mapping keys may be snake_case or camelCase (`stylesType`). Unknown keys
	raise `UnsupportedFeatureError`.
	"""
	if overrides is None:
		return dataclasses.replace(defaults)  # pyright: ignore[reportArgumentType]
	if isinstance(overrides, type(defaults)):
		return dataclasses.replace(overrides)  # pyright: ignore[reportArgumentType]
	if not isinstance(overrides, Mapping):
		raise TypeError(
			f"Options must be a mapping or {type(defaults).__name__}, "
			+ f"got {type(overrides).__name__}"
		)
	known = {f.name for f in dataclasses.fields(defaults)}  # pyright: ignore[reportArgumentType]
	changes: dict[str, Any] = {}
	for key, value in overrides.items():
		name = _CAMEL_BOUNDARY.sub("_", key).lower()
		if name not in known:
			raise UnsupportedFeatureError(
				f"Unknown option {key!r} for {type(defaults).__name__}"
			)
		changes[name] = value
	return dataclasses.replace(defaults, **changes)  # pyright: ignore[reportArgumentType]


class Generator(ABC, Generic[O]):
	"""Base class for single-target code generators."""

	name: ClassVar[str]
	options: O

	def __init__(self, options: O | Mapping[str, Any] | None = None) -> None:
		self.options = merge_options(self.default_options(), options)

	@classmethod
	@abstractmethod
	def default_options(cls) -> O:
		"""Fresh default options for this target."""

	@abstractmethod
	def generate(self, component: Component) -> str:
		"""Compile one component into the full module source text."""

	def __call__(self, component: Component) -> str:
		return self.generate(component)


_G = TypeVar("_G", bound=type[Generator[Any]])


def register_generator(cls: _G) -> _G:
	"""Class decorator adding a generator to `GENERATOR_REGISTRY`."""
	GENERATOR_REGISTRY[cls.name] = cls
	return cls


def get_generator(
	target: str, options: Mapping[str, Any] | None = None
) -> Callable[[Component], str]:
	cls = GENERATOR_REGISTRY.get(target)
	if cls is None:
		available = ", ".join(sorted(GENERATOR_REGISTRY)) or "none"
		raise UnsupportedFeatureError(
			f"Unknown target {target!r} (available: {available})"
		)
	return cls(options)
