"""Shared pytest fixtures and test helpers for domain-access tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from domain_access.adapters.memory import MemoryDomainDirectory
from domain_access.config.settings import DomainAccessSettings
from domain_access.domain.records import DomainRecord

SAMPLE_TOML = """\
[[domains]]
id = "example_com"
hostname = "example.com"
name = "Example"
is_default = true

[[domains]]
id = "one_example_com"
hostname = "one.example.com"
name = "One"

[[domains]]
hostname = "two.example.com"
name = "Two"

[views.news]
path = "/news"
[views.news.access]
plugin = "domain"
domain = ["one_example_com"]

[views.shared]
[views.shared.access]
plugin = "domain"
domain = ["one_example_com", "two_example_com", "ghost"]

[views.locked]
path = "/locked"
[views.locked.access]
plugin = "domain"
domain = []

[views.public]
path = "/public"
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def records() -> list[DomainRecord]:
    return [
        DomainRecord(id="example_com", hostname="example.com", name="Example", is_default=True),
        DomainRecord(id="one_example_com", hostname="one.example.com", name="One"),
        DomainRecord(id="two_example_com", hostname="two.example.com", name="Two"),
    ]


@pytest.fixture
def directory(records: list[DomainRecord]) -> MemoryDomainDirectory:
    return MemoryDomainDirectory(records)


@pytest.fixture
def config_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary directory holding a sample domain_access.toml."""
    monkeypatch.delenv("DOMAIN_ACCESS_CONFIG", raising=False)
    (tmp_path / "domain_access.toml").write_text(SAMPLE_TOML, encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(config_root: Path) -> DomainAccessSettings:
    return DomainAccessSettings.from_cli(start=config_root)


@pytest.fixture
def _isolated_config(config_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the sample config directory so the CLI discovers it."""
    monkeypatch.chdir(config_root)
