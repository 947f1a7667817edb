"""Pytest configuration shared by the funcad test suites."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

from funcad.dsl import grammar
from funcad.dsl.ast import Document

FIXTURE_ROOT = Path(__file__).parent / "fixtures" / "programs"


@dataclass(frozen=True)
class FixtureProgram:
    """A bundled ``.fc`` example together with its parsed document."""

    name: str
    path: Path
    source: str
    document: Document


def load_fixture_programs(root: Path = FIXTURE_ROOT) -> list[FixtureProgram]:
    programs = []
    for path in sorted(root.glob("*.fc")):
        source = path.read_text(encoding="utf-8")
        document = grammar.parse_document(source, filename=str(path))
        programs.append(FixtureProgram(path.stem, path, source, document))
    return programs


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    # Any test taking a ``program`` argument runs once per bundled example.
    if "program" in metafunc.fixturenames:
        programs = load_fixture_programs()
        metafunc.parametrize("program", programs, ids=[program.name for program in programs])


@pytest.fixture(scope="session")
def fixture_programs() -> list[FixtureProgram]:
    return load_fixture_programs()
