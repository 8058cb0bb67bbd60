"""Network — the graph and its analyzer, bound to one settings object.

Services receive a Network at construction time, the way they would
receive any other shared resource. The graph is loaded lazily from the
configured network file on first access, so ``--help`` and the growth
commands never touch the file.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from refnet.infrastructure.graph.analyzer import NetworkAnalyzer
from refnet.infrastructure.graph.referral_graph import ReferralGraph
from refnet.infrastructure.loader import load_network

if TYPE_CHECKING:
    from refnet.config.settings import RefnetSettings


class Network:
    """Lazy holder for a ReferralGraph and the NetworkAnalyzer reading it."""

    def __init__(
        self,
        settings: RefnetSettings,
        *,
        graph: ReferralGraph | None = None,
    ) -> None:
        self.settings = settings
        self._graph = graph
        self._analyzer: NetworkAnalyzer | None = None

    @property
    def graph(self) -> ReferralGraph:
        """The graph, read from ``settings.network.path`` on first access.

        With no configured path an empty graph is used.
        """
        if self._graph is None:
            path = self.settings.network_file
            if path is None:
                self._graph = ReferralGraph()
            else:
                self._graph = load_network(path, delimiter=self.settings.network.delimiter)
        return self._graph

    @property
    def analyzer(self) -> NetworkAnalyzer:
        if self._analyzer is None:
            self._analyzer = NetworkAnalyzer(self.graph)
        return self._analyzer
