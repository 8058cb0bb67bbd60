"""BaseService — foundation for all refnet services.

Every service receives a :class:`Network` at construction time. The
Network provides the referral graph, its analyzer, and the settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from refnet.infrastructure.network import Network


class BaseService:
    """Base for service-layer classes.

    Subclasses implement operations on the shared network and convert
    domain errors into failed :class:`ServiceResult` values.

    Usage::

        class GraphService(BaseService):
            def reach(self, user_id: str) -> ServiceResult:
                analyzer = self._network.analyzer
                ...
    """

    def __init__(self, network: Network) -> None:
        self._network = network
