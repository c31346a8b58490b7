from __future__ import annotations


class CodegenError(Exception):
	"""Base class for every failure raised by the compilation pipeline.

	Plugin exceptions are not wrapped in this type: they propagate as raised.
	"""

	component: str | None

	def __init__(self, message: str, *, component: str | None = None) -> None:
		super().__init__(message)
		self.message = message
		self.component = component

	def __str__(self) -> str:
		if self.component:
			return f"[{self.component}] {self.message}"
		return self.message


class IRValidationError(CodegenError):
	"""The IR is structurally malformed (e.g. a For node without `each`)."""

	path: str | None

	def __init__(
		self,
		message: str,
		*,
		path: str | None = None,
		component: str | None = None,
	) -> None:
		if path:
			message = f"{message} (at {path})"
		super().__init__(message, component=component)
		self.path = path


class UnsupportedFeatureError(CodegenError):
	"""The backend intentionally refuses to translate a construct."""


class FormatterError(CodegenError):
	"""The formatter collaborator could not run or rejected the text."""
