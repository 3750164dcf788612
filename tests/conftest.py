"""Shared pytest fixtures for rspec-outline tests."""

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def invoice_spec_path(fixtures_dir: Path) -> Path:
    """Return path to the sample invoice spec."""
    return fixtures_dir / "invoice_spec.rb"


@pytest.fixture
def invoice_spec_text(invoice_spec_path: Path) -> str:
    """Return the text of the sample invoice spec."""
    return invoice_spec_path.read_text(encoding="utf-8")


@pytest.fixture
def spec_project(tmp_path: Path, invoice_spec_text: str) -> Path:
    """Create a project with spec files under spec/."""
    models = tmp_path / "spec" / "models"
    models.mkdir(parents=True)
    (models / "invoice_spec.rb").write_text(invoice_spec_text, encoding="utf-8")
    (tmp_path / "spec" / "spec_helper.rb").write_text("RSpec.configure do |config|\nend\n")
    return tmp_path
