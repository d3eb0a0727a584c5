"""Tests for AccessService."""

from __future__ import annotations

from pathlib import Path

import pytest

from domain_access.config.settings import DomainAccessSettings
from domain_access.services.access import AccessService


@pytest.fixture
def service(settings: DomainAccessSettings) -> AccessService:
    return AccessService(settings)


class TestCheck:
    def test_granted_by_host(self, service: AccessService) -> None:
        result = service.check("news", host="one.example.com")
        assert result.ok is True
        assert result.op == "check"
        assert result.data["granted"] is True
        assert result.data["active_domain"] == "one_example_com"
        assert result.data["plugin"] == "domain"
        assert result.data["route_requirements"] == {"_domain": "one_example_com"}

    def test_denied_other_host(self, service: AccessService) -> None:
        result = service.check("news", host="two.example.com")
        assert result.ok is True
        assert result.data["granted"] is False

    def test_unknown_host_falls_back_to_default(self, service: AccessService) -> None:
        result = service.check("news", host="elsewhere.test")
        assert result.data["active_domain"] == "example_com"
        assert result.data["granted"] is False

    def test_by_domain_id(self, service: AccessService) -> None:
        result = service.check("shared", domain_id="two_example_com")
        assert result.data["granted"] is True
        assert result.data["route_requirements"] == {
            "_domain": "one_example_com+two_example_com+ghost"
        }

    def test_empty_allow_list_denies_without_route_requirement(
        self, service: AccessService
    ) -> None:
        result = service.check("locked", domain_id="example_com")
        assert result.data["granted"] is False
        assert result.data["route_requirements"] == {}

    def test_cache_metadata(self, service: AccessService) -> None:
        result = service.check("news", host="one.example.com")
        assert result.data["cache"] == {"max_age": -1, "contexts": ["url.site"], "tags": []}

    def test_unrestricted_view(self, service: AccessService) -> None:
        result = service.check("public", host="anything.test")
        assert result.data["granted"] is True
        assert result.data["plugin"] == "none"
        assert result.data["cache"] is None

    def test_unknown_view(self, service: AccessService) -> None:
        result = service.check("missing")
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_unknown_plugin(self, tmp_path: Path) -> None:
        (tmp_path / "domain_access.toml").write_text(
            '[views.x.access]\nplugin = "role"\nroles = ["editor"]\n'
        )
        service = AccessService(DomainAccessSettings.from_cli(start=tmp_path))
        result = service.check("x")
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "UNKNOWN_PLUGIN"
        assert result.error.detail == {"plugin": "role"}

    def test_duplicate_domains_is_config_error(self, tmp_path: Path) -> None:
        (tmp_path / "domain_access.toml").write_text(
            '[[domains]]\nhostname = "a.test"\n[[domains]]\nhostname = "A.test"\n'
            '[views.v.access]\ndomain = ["a_test"]\n'
        )
        service = AccessService(DomainAccessSettings.from_cli(start=tmp_path))
        result = service.check("v", host="a.test")
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "CONFIG_ERROR"


SHAPES_TOML = """\
[[domains]]
id = "ab"
hostname = "ab.test"

[[domains]]
id = "a"
hostname = "a.test"

[[domains]]
id = "b"
hostname = "b.test"

[views.single.access]
domain = "ab"

[views.checkboxes.access]
domain = { a = "a", b = 0 }
"""


class TestAllowListShapes:
    @pytest.fixture
    def shapes(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AccessService:
        monkeypatch.delenv("DOMAIN_ACCESS_CONFIG", raising=False)
        (tmp_path / "domain_access.toml").write_text(SHAPES_TOML)
        return AccessService(DomainAccessSettings.from_cli(start=tmp_path))

    def test_string_is_a_single_id(self, shapes: AccessService) -> None:
        assert shapes.check("single", domain_id="a").data["granted"] is False
        result = shapes.check("single", domain_id="ab")
        assert result.data["granted"] is True
        assert result.data["route_requirements"] == {"_domain": "ab"}

    def test_checkbox_table_ignores_unchecked(self, shapes: AccessService) -> None:
        assert shapes.check("checkboxes", domain_id="a").data["granted"] is True
        result = shapes.check("checkboxes", domain_id="b")
        assert result.data["granted"] is False
        assert result.data["route_requirements"] == {"_domain": "a"}

    def test_checkbox_table_dependencies(self, shapes: AccessService) -> None:
        result = shapes.dependencies("checkboxes")
        assert result.data["dependencies"] == {"config": ["domain.record.a"]}
        assert result.warnings == []


class TestSummary:
    @pytest.mark.parametrize(
        ("view", "expected"),
        [
            ("news", "One"),
            ("shared", "Multiple domains"),
            ("locked", "No domain(s) selected"),
            ("public", "Unrestricted"),
        ],
    )
    def test_summaries(self, service: AccessService, view: str, expected: str) -> None:
        result = service.summary(view)
        assert result.ok is True
        assert result.data["summary"] == expected

    def test_unknown_view(self, service: AccessService) -> None:
        assert service.summary("missing").ok is False


class TestDependencies:
    def test_dangling_reported_as_warning(self, service: AccessService) -> None:
        result = service.dependencies("shared")
        assert result.ok is True
        assert result.data["dependencies"] == {
            "config": ["domain.record.one_example_com", "domain.record.two_example_com"]
        }
        assert result.warnings == ["Domain (ghost) no longer exists"]

    def test_unrestricted(self, service: AccessService) -> None:
        result = service.dependencies("public")
        assert result.data["dependencies"] == {}


class TestRoutesAndOptions:
    def test_routes(self, service: AccessService) -> None:
        result = service.routes()
        assert result.ok is True
        by_view = {item["view"]: item for item in result.data["items"]}
        assert by_view["news"]["path"] == "/news"
        assert by_view["news"]["requirements"] == {"_domain": "one_example_com"}
        assert by_view["shared"]["path"] == "/shared"
        assert by_view["locked"]["requirements"] == {}
        assert by_view["public"]["plugin"] == "none"
        assert result.data["count"] == 4

    def test_options(self, service: AccessService) -> None:
        result = service.options()
        assert [item["id"] for item in result.data["items"]] == [
            "example_com",
            "one_example_com",
            "two_example_com",
        ]
        assert result.data["items"][0]["default"] is True


class TestValidate:
    def test_valid(self, service: AccessService) -> None:
        result = service.validate(["one_example_com", "", "one_example_com"])
        assert result.ok is True
        assert result.data == {"domain": ["one_example_com"]}
        assert result.warnings == []

    def test_unknown_ids_warn(self, service: AccessService) -> None:
        result = service.validate(["ghost"])
        assert result.ok is True
        assert result.warnings == ["Unknown domain(s): ghost"]

    def test_empty(self, service: AccessService) -> None:
        result = service.validate(["", ""])
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.detail == {"field": "domain"}
