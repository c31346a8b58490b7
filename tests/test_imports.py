"""
Tests for import aggregation.
"""

import pytest
from crossgen.emit import emit_import
from crossgen.errors import CodegenError
from crossgen.imports import Import, Imports


def render(imports: Imports) -> list[str]:
	return [emit_import(stmt) for stmt in imports.statements()]


class TestImport:
	def test_equality(self):
		assert Import.named("a", "m") == Import.named("a", "m")
		assert Import.named("a", "m") != Import.default("a", "m")
		assert len({Import.named("a", "m"), Import.named("a", "m")}) == 1

	def test_local(self):
		assert Import.named("a", "m").local == "a"
		assert Import.named("a", "m", alias="b").local == "b"

	def test_repr(self):
		assert repr(Import.named("Show", "solid-js")) == "Import(name='Show', src='solid-js')"
		assert repr(Import.default("X", "./x")) == (
			"Import(name='X', src='./x', kind='default')"
		)


class TestImports:
	def test_empty(self):
		imports = Imports()
		assert len(imports) == 0
		assert imports.statements() == []

	def test_groups_by_source_in_insertion_order(self):
		imports = Imports(
			[
				Import.named("Show", "solid-js"),
				Import.named("Dynamic", "solid-js/web"),
				Import.named("For", "solid-js"),
			]
		)
		assert render(imports) == [
			'import { Show, For } from "solid-js";',
			'import { Dynamic } from "solid-js/web";',
		]

	def test_dedupes(self):
		imports = Imports()
		imports.add(Import.named("Show", "solid-js"))
		imports.add(Import.named("Show", "solid-js"))
		assert len(imports) == 1
		assert render(imports) == ['import { Show } from "solid-js";']

	def test_collision_raises(self):
		imports = Imports([Import.named("Button", "./a")])
		with pytest.raises(CodegenError, match="collision"):
			imports.add(Import.default("Button", "./b"))

	def test_merged_statement(self):
		imports = Imports(
			[
				Import.named("a", "m"),
				Import.default("D", "m"),
				Import.named("b", "m", alias="c"),
				Import.namespace("ns", "n"),
			]
		)
		assert render(imports) == [
			'import D, { a, b as c } from "m";',
			'import * as ns from "n";',
		]

	def test_same_name_from_two_sources_with_alias(self):
		imports = Imports([Import.named("Show", "solid-js")])
		assert imports.add(Import.named("Show", "./show", alias="LocalShow")) == "LocalShow"
		assert render(imports) == [
			'import { Show } from "solid-js";',
			'import { Show as LocalShow } from "./show";',
		]

	def test_collision_leaves_imports_unchanged(self):
		imports = Imports([Import.named("Button", "./a")])
		with pytest.raises(CodegenError):
			imports.add(Import.default("Button", "./b"))
		assert len(imports) == 1
		assert render(imports) == ['import { Button } from "./a";']
