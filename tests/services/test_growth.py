"""Tests for GrowthService — simulation and bonus search results."""

from __future__ import annotations

from pathlib import Path

import pytest

from refnet.config.settings import RefnetSettings
from refnet.infrastructure.network import Network
from refnet.services.growth import GrowthService, linear_adoption


@pytest.fixture
def service(settings: RefnetSettings) -> GrowthService:
    return GrowthService(Network(settings))


class TestSimulate:
    def test_series(self, service: GrowthService) -> None:
        result = service.simulate(0.5, 3)
        assert result.ok
        assert result.data["series"] == [50.0, 100.0, 150.0]
        assert result.data["total"] == 150.0

    def test_invalid_probability(self, service: GrowthService) -> None:
        result = service.simulate(1.5, 3)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_PROBABILITY"

    def test_invalid_days(self, service: GrowthService) -> None:
        result = service.simulate(0.5, 0)
        assert result.error is not None
        assert result.error.code == "INVALID_PARAMETER"

    def test_uses_simulation_settings(self, tmp_path: Path) -> None:
        (tmp_path / "refnet.toml").write_text(
            "[simulation]\ninitial_referrers = 10\nreferral_capacity = 2\n"
        )
        settings = RefnetSettings.from_cli(project_root=tmp_path)
        result = GrowthService(Network(settings)).simulate(1.0, 3)
        assert result.data["series"] == [10.0, 20.0, 20.0]


class TestDaysToTarget:
    def test_reachable(self, service: GrowthService) -> None:
        result = service.days_to_target(1.0, 100)
        assert result.data["days"] == 1
        assert result.data["reachable"] is True
        assert result.warnings == []

    def test_unreachable(self, service: GrowthService) -> None:
        result = service.days_to_target(1.0, 5000)
        assert result.ok
        assert result.data["days"] is None
        assert result.data["reachable"] is False
        assert result.warnings


class TestMinBonus:
    def test_default_model(self, service: GrowthService) -> None:
        result = service.min_bonus(10, 500)
        assert result.ok
        assert result.data["bonus"] == 50
        assert result.data["reachable"] is True

    def test_custom_model(self, service: GrowthService) -> None:
        result = service.min_bonus(10, 500, adoption_prob=linear_adoption(300))
        assert result.data["bonus"] == 150

    def test_unreachable(self, service: GrowthService) -> None:
        result = service.min_bonus(5, 600)
        assert result.ok
        assert result.data["bonus"] is None
        assert result.warnings

    def test_invalid(self, service: GrowthService) -> None:
        result = service.min_bonus(0, 500)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_PARAMETER"


def test_linear_adoption() -> None:
    adoption = linear_adoption(200)
    assert adoption(0) == 0.0
    assert adoption(100) == 0.5
    assert adoption(500) == 1.0
