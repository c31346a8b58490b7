from collections.abc import Callable
from typing import Any

import pytest
from crossgen.generators.solid import SolidOptions, component_to_solid
from crossgen.ir import Component


@pytest.fixture
def options() -> SolidOptions:
	"""Solid options with formatting disabled."""
	return SolidOptions(prettier=False)


@pytest.fixture
def compile_solid() -> Callable[..., str]:
	"""`compile_solid(component, **options)` with formatting disabled."""

	def run(component: Component, **overrides: Any) -> str:
		overrides.setdefault("prettier", False)
		return component_to_solid(SolidOptions(**overrides))(component)

	return run
