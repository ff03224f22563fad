from __future__ import annotations

import os
import sys

import nox

CI = os.environ.get("CI") is not None

PYTHON_VERSIONS = ["3.10", "3.11", "3.12"]
PYTHON_DEFAULT_VERSION = PYTHON_VERSIONS[-1]

nox.options.default_venv_backend = "uv"
nox.options.stop_on_first_error = True
nox.options.reuse_existing_virtualenvs = not CI


if CI:
    # In CI, use Python interpreter provided by GitHub Actions
    PYTHON_VERSIONS = [sys.executable]


@nox.session(name="format", python=PYTHON_DEFAULT_VERSION, tags=["format", "check"])
def format_(session):
    """Lint the code and apply fixes in-place whenever possible."""
    session.install(".[lint]")
    session.run("ruff", "check", "--fix", ".")
    session.run("ruff", "format", ".")


@nox.session(python=PYTHON_DEFAULT_VERSION, tags=["lint", "check"])
def lint(session):
    """Run linters in readonly mode."""
    session.install(".[lint]")
    session.run("ruff", "check", "--diff", "--unsafe-fixes", ".")
    session.run("ruff", "format", "--diff", ".")
    session.run("mypy", "src")
    session.run("codespell", "src", "tests", "README.md")


@nox.session(python=PYTHON_VERSIONS, tags=["test", "check"])
def test(session):
    session.install("-e", ".[test]")
    session.run("pytest", "-vv", *session.posargs)
