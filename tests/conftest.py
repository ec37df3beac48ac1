"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from spec_sources.models import SpecRecord  # noqa: E402

# Project layout shared by the discovery tests
SPEC_FIXTURE = [
    "node_modules/test/App.spec.js",
    "packages/node_modules/folder/App.spec.js",
    "component/App.spec.ts",
    "component/App.cy.ts",
    "component/App.cy.js",
    "e2e/onboarding.spec.ts",
    "e2e/onboarding.cy.ts",
    "e2e/onboarding.cy.js",
    "e2e/onboarding.cy.js.mp4",
]


@pytest.fixture
def project_root(tmp_path):
    """Create a project directory populated with SPEC_FIXTURE files."""
    root = tmp_path / "findSpecs"
    for relative in SPEC_FIXTURE:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")
    return root


def make_spec(name: str) -> SpecRecord:
    """Minimal SpecRecord identified by ``name``."""
    return SpecRecord(
        absolute=f"/project/{name}",
        relative=name,
        relative_to_common_root=name,
        base_name=name,
        file_name=name.split(".")[0],
        file_extension=".js",
        spec_file_extension=".cy.js",
        name=name,
    )


@pytest.fixture
def spec_factory():
    """Factory fixture for SpecRecords identified by name."""
    return make_spec
