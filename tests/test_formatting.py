"""
Tests for the formatter collaborators.
"""

import subprocess
from typing import Any

import pytest
from crossgen import formatting
from crossgen.errors import FormatterError
from crossgen.formatting import PRETTIER_ENV_VAR, PrettierFormatter, identity_formatter


@pytest.fixture
def fake_prettier(monkeypatch: pytest.MonkeyPatch):
	"""Resolve any binary and record subprocess invocations."""
	calls: list[dict[str, Any]] = []
	result = {"returncode": 0, "stdout": "formatted\n", "stderr": ""}

	def run(cmd: list[str], **kwargs: Any):
		calls.append({"cmd": cmd, **kwargs})
		return subprocess.CompletedProcess(cmd, **result)

	monkeypatch.setattr(formatting.shutil, "which", lambda name: f"/bin/{name}")
	monkeypatch.setattr(formatting.subprocess, "run", run)
	return calls, result


def test_identity_formatter():
	assert identity_formatter("x  =  1") == "x  =  1"


def test_missing_binary():
	formatter = PrettierFormatter(binary="crossgen-no-such-formatter")
	with pytest.raises(FormatterError, match="crossgen-no-such-formatter"):
		formatter("const a = 1;")


def test_env_var_selects_binary(monkeypatch: pytest.MonkeyPatch):
	monkeypatch.setenv(PRETTIER_ENV_VAR, "crossgen-env-formatter")
	monkeypatch.setattr(formatting.shutil, "which", lambda name: None)
	with pytest.raises(FormatterError, match="crossgen-env-formatter"):
		PrettierFormatter().command()


def test_runs_prettier(fake_prettier):
	calls, _ = fake_prettier
	formatter = PrettierFormatter(binary="prettier", extra_args=["--tab-width", "4"])
	assert formatter("const a=1") == "formatted\n"
	assert calls[0]["cmd"] == [
		"/bin/prettier",
		"--parser",
		"typescript",
		"--tab-width",
		"4",
	]
	assert calls[0]["input"] == "const a=1"


def test_nonzero_exit(fake_prettier):
	_, result = fake_prettier
	result.update(returncode=2, stdout="", stderr="SyntaxError: Unexpected token")
	with pytest.raises(FormatterError, match="Unexpected token"):
		PrettierFormatter()("const = ;")


def test_timeout(monkeypatch: pytest.MonkeyPatch):
	def run(cmd: list[str], **kwargs: Any):
		raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

	monkeypatch.setattr(formatting.shutil, "which", lambda name: f"/bin/{name}")
	monkeypatch.setattr(formatting.subprocess, "run", run)
	with pytest.raises(FormatterError, match="timed out"):
		PrettierFormatter(timeout=0.5)("x")
