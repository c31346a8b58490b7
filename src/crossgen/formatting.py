"""Formatter collaborators: `text -> text`, allowed to fail."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Sequence
from typing import Protocol

from crossgen.errors import FormatterError

logger = logging.getLogger(__name__)

PRETTIER_ENV_VAR = "CROSSGEN_PRETTIER"


class Formatter(Protocol):
	def __call__(self, code: str) -> str: ...


def identity_formatter(code: str) -> str:
	return code


class PrettierFormatter:
	"""Formats TypeScript/JSX through an external `prettier` binary.

	The binary is resolved from `CROSSGEN_PRETTIER` when set, otherwise
	`prettier` on PATH. Failures raise `FormatterError`; nothing is retried.
	"""

	parser: str
	binary: str | None
	extra_args: tuple[str, ...]
	timeout: float

	def __init__(
		self,
		*,
		parser: str = "typescript",
		binary: str | None = None,
		extra_args: Sequence[str] = (),
		timeout: float = 30.0,
	) -> None:
		self.parser = parser
		self.binary = binary
		self.extra_args = tuple(extra_args)
		self.timeout = timeout

	def command(self) -> list[str]:
		binary = self.binary or os.environ.get(PRETTIER_ENV_VAR) or "prettier"
		resolved = shutil.which(binary)
		if resolved is None:
			raise FormatterError(
				f"Formatter binary {binary!r} not found. Install prettier or set "
				+ f"{PRETTIER_ENV_VAR}, or disable formatting with prettier=False."
			)
		return [resolved, "--parser", self.parser, *self.extra_args]

	def __call__(self, code: str) -> str:
		cmd = self.command()
		logger.debug("Running formatter: %s", " ".join(cmd))
		try:
			result = subprocess.run(
				cmd,
				input=code,
				capture_output=True,
				text=True,
				timeout=self.timeout,
				check=False,
			)
		except subprocess.TimeoutExpired as exc:
			raise FormatterError(f"Formatter timed out after {self.timeout}s") from exc
		except OSError as exc:
			raise FormatterError(f"Formatter could not be started: {exc}") from exc
		if result.returncode != 0:
			raise FormatterError(
				f"Formatter rejected the generated code:\n{result.stderr.strip()}"
			)
		return result.stdout
