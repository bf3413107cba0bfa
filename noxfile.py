"""Nox sessions orchestrating the gas monitor unit suites."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

import nox


PYTHON_VERSIONS = ["3.11"]
PROJECT_ROOT = Path(__file__).parent

nox.options.sessions = [
    "tests(unit_core)",
    "tests(unit_logging)",
]


def _install_test_requirements(session: nox.Session) -> None:
    """Install core testing toolchain inside the session environment."""

    session.install("pytest>=7.4", "coverage>=7.4")


def _normalize_pythonpath(existing: str | None) -> str:
    parts = [str(PROJECT_ROOT)]
    if existing:
        parts.append(existing)
    return ":".join(part for part in parts if part)


def _build_env(session: nox.Session) -> dict[str, str]:
    env = dict(session.env)
    env["PYTHONPATH"] = _normalize_pythonpath(env.get("PYTHONPATH"))
    # Suites assert on the memory sink; keep stdout clean
    env.setdefault("LOG_SINKS", "memory")
    return env


def _run_suite(session: nox.Session, suite: str, targets: Iterable[str], extra: Iterable[str] = ()) -> None:
    _install_test_requirements(session)

    env = _build_env(session)
    data_file = PROJECT_ROOT / f".coverage.{suite}"

    session.log("Running %s suite: %s", suite, " ".join(targets))
    session.run(
        "coverage", "run", f"--data-file={data_file}", "-m", "pytest",
        *targets, *extra, *session.posargs,
        env=env,
    )
    session.run("coverage", "report", f"--data-file={data_file}", "--skip-empty", env=env)


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_core)")
def tests_unit_core(session: nox.Session) -> None:
    """Execute estimator, history, scan-mode, pipeline and runner suites."""

    _run_suite(session, "core", ["tests/unit"], extra=["--ignore=tests/unit/logging"])


@nox.session(python=PYTHON_VERSIONS, reuse_venv=True, name="tests(unit_logging)")
def tests_unit_logging(session: nox.Session) -> None:
    """Execute logging library unit suites."""

    _run_suite(session, "logging", ["tests/unit/logging"])
