"""Shared pytest fixtures and test helpers for refnet tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from refnet.config.settings import RefnetSettings
from refnet.infrastructure.graph.referral_graph import ReferralGraph
from refnet.infrastructure.network import Network

# alice -> bob -> dave, bob -> erin, alice -> carol -> frank; gina -> hank
SAMPLE_REFERRALS: list[tuple[str, str]] = [
    ("alice", "bob"),
    ("alice", "carol"),
    ("bob", "dave"),
    ("bob", "erin"),
    ("carol", "frank"),
    ("gina", "hank"),
]


def build_graph(referrals: list[tuple[str, str]], users: list[str] | None = None) -> ReferralGraph:
    """Build a graph from ``(referrer, candidate)`` pairs, registering users first."""
    graph = ReferralGraph()
    for user_id in users or []:
        graph.add_user(user_id)
    for referrer_id, candidate_id in referrals:
        graph.add_user(referrer_id)
        graph.add_user(candidate_id)
        graph.add_referral(referrer_id, candidate_id)
    return graph


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's REFNET_* environment out of every test."""
    for name in ("REFNET_CONFIG", "REFNET_NETWORK__PATH", "REFNET_ANALYSIS__DEFAULT_TOP"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def graph() -> ReferralGraph:
    """Two-tree sample forest (see ``SAMPLE_REFERRALS``)."""
    return build_graph(SAMPLE_REFERRALS)


@pytest.fixture
def chain() -> ReferralGraph:
    """Straight chain A -> B -> C -> D."""
    return build_graph([("A", "B"), ("B", "C"), ("C", "D")])


@pytest.fixture
def settings(tmp_path: Path) -> RefnetSettings:
    """Default settings rooted at an empty temp directory."""
    return RefnetSettings.from_cli(project_root=tmp_path)


@pytest.fixture
def network(settings: RefnetSettings, graph: ReferralGraph) -> Network:
    """Network wrapping the sample forest."""
    return Network(settings, graph=graph)


@pytest.fixture
def network_file(tmp_path: Path) -> Path:
    """The sample forest written as a network file in a temp directory."""
    lines = ["# sample referral network", ""]
    lines += [f"{referrer},{candidate}" for referrer, candidate in SAMPLE_REFERRALS]
    lines.append("ivan")
    path = tmp_path / "referrals.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so config walk-up finds nothing stray."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """``-v`` turns telemetry on for the whole thread; turn it back off."""
    yield
    from refnet.services.telemetry import disable_telemetry

    disable_telemetry()
