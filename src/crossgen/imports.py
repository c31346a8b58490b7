"""Import aggregation: order-stable, deduplicated, grouped by source."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal, TypeAlias

from typing_extensions import override

from crossgen.errors import CodegenError

ImportKind: TypeAlias = Literal["default", "named", "namespace"]


class Import:
	"""Import descriptor for one local identifier."""

	name: str
	src: str
	kind: ImportKind
	alias: str | None

	def __init__(
		self,
		name: str,
		src: str,
		kind: ImportKind = "named",
		*,
		alias: str | None = None,
	) -> None:
		self.name = name
		self.src = src
		self.kind = kind
		self.alias = alias

	@classmethod
	def default(cls, name: str, src: str) -> Import:
		return cls(name, src, "default")

	@classmethod
	def named(cls, name: str, src: str, *, alias: str | None = None) -> Import:
		return cls(name, src, "named", alias=alias)

	@classmethod
	def namespace(cls, name: str, src: str) -> Import:
		return cls(name, src, "namespace")

	@property
	def local(self) -> str:
		"""Identifier this import binds in the module."""
		return self.alias or self.name

	@override
	def __eq__(self, other: object) -> bool:
		if not isinstance(other, Import):
			return NotImplemented
		return (self.name, self.src, self.kind, self.alias) == (
			other.name,
			other.src,
			other.kind,
			other.alias,
		)

	@override
	def __hash__(self) -> int:
		return hash((self.name, self.src, self.kind, self.alias))

	@override
	def __repr__(self) -> str:
		parts = [f"name={self.name!r}", f"src={self.src!r}"]
		if self.kind != "named":
			parts.append(f"kind={self.kind!r}")
		if self.alias:
			parts.append(f"alias={self.alias!r}")
		return f"Import({', '.join(parts)})"


@dataclass(slots=True)
class ImportMember:
	name: str
	alias: str | None = None


@dataclass
class ImportStatement:
	"""Merged import line for codegen output."""

	src: str
	default_import: str | None = None
	namespace_import: str | None = None
	values: list[ImportMember] = field(default_factory=list)


class Imports:
	"""Collects imports, dedupes them, and generates statements.

	Statements keep the order in which their source was first added. Binding
	the same local identifier to two different imports is an error.
	"""

	_by_src: dict[str, ImportStatement]
	_seen: set[tuple[str, str, str, str | None]]
	_locals: dict[str, tuple[str, str, str]]

	def __init__(self, imports: Iterable[Import] = ()) -> None:
		self._by_src = {}
		self._seen = set()
		self._locals = {}
		for imp in imports:
			self.add(imp)

	def add(self, imp: Import) -> str:
		"""Add import, returns the local identifier it binds."""
		key = (imp.src, imp.name, imp.kind, imp.alias)
		local = imp.local
		if key in self._seen:
			return local

		owner = (imp.src, imp.name, imp.kind)
		existing = self._locals.get(local)
		if existing is not None and existing != owner:
			raise CodegenError(
				f"Import name collision: {local!r} is imported from both "
				+ f"{existing[0]!r} and {imp.src!r}"
			)
		self._seen.add(key)
		self._locals[local] = owner

		stmt = self._by_src.setdefault(imp.src, ImportStatement(imp.src))
		if imp.kind == "default":
			stmt.default_import = local
		elif imp.kind == "namespace":
			stmt.namespace_import = local
		else:
			stmt.values.append(ImportMember(imp.name, imp.alias))
		return local

	def add_all(self, imports: Iterable[Import]) -> None:
		for imp in imports:
			self.add(imp)

	def __len__(self) -> int:
		return len(self._seen)

	def statements(self) -> list[ImportStatement]:
		"""Merged statements, one per source, in first-added order."""
		return list(self._by_src.values())
