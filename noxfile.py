"""
Nox sessions for nft-contract.

Sessions:
  - lint  : ruff over the package and tests
  - tests : pytest (unit + hypothesis property tests) with coverage
  - cov   : coverage report from the last `tests` run

Pass extra args to pytest like:
  nox -s tests -- -k "free_mint" -vv
"""

from __future__ import annotations

from pathlib import Path

import nox

nox.options.reuse_venv = True
nox.options.stop_on_first_error = False

REPO_ROOT = Path(__file__).resolve().parent
PY_PATHS = ["nft_contract", "noxfile.py"]
TEST_PYTHONS = ["3.11", "3.12"]


def _common_env(session: nox.Session) -> None:
    session.env.setdefault("PYTHONUNBUFFERED", "1")
    session.env.setdefault("PYTHONHASHSEED", "0")


@nox.session(name="lint", python="3.11")
def lint(session: nox.Session) -> None:
    """Static analysis: ruff."""
    _common_env(session)
    session.install("ruff>=0.6.0")
    session.run("ruff", "check", *PY_PATHS)


@nox.session(name="tests", python=TEST_PYTHONS)
def tests(session: nox.Session) -> None:
    """Unit and property tests."""
    _common_env(session)
    session.install("-e", f"{REPO_ROOT}[test]")
    session.run("coverage", "run", "--source=nft_contract", "-m", "pytest", *session.posargs)


@nox.session(name="cov", python="3.11")
def cov(session: nox.Session) -> None:
    session.install("coverage>=7.4.0")
    with session.chdir(str(REPO_ROOT)):
        session.run("coverage", "report", "-m")
