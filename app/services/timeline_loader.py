import itertools
import logging
from typing import Hashable, Optional

from app.clients.erp_api import TIMELINE_PATHS, ErpApiClient, ErpApiError
from app.schemas.common import RequestDomain
from app.schemas.timeline_schema import ApprovalStep
from app.services.adapters import to_approval_steps


logger = logging.getLogger("uvicorn.error")


class TimelineLoader:
    """Fetch per-level approval steps on demand.

    ``load`` returns ``None`` when the history cannot be used: the domain has
    no timeline endpoint, the fetch failed, or a newer load for the same view
    key started while this one was in flight (latest request id wins).

    The guard only works across calls on the same instance, so views that can
    switch requests while a fetch is pending must keep one loader alive. A
    loader built per call (as the HTTP routes do) still gets the fallback
    behaviour.
    """

    def __init__(self, client: ErpApiClient) -> None:
        self.client = client
        self._tickets = itertools.count(1)
        # view key -> ticket of the newest load still in flight
        self._latest: dict[Hashable, int] = {}

    def has_history(self, domain: RequestDomain) -> bool:
        return domain in TIMELINE_PATHS

    async def load(
        self,
        domain: RequestDomain,
        request_id: int,
        token: Optional[str] = None,
        view_key: Hashable = None,
    ) -> Optional[list[ApprovalStep]]:
        if not self.has_history(domain):
            return None
        key = view_key if view_key is not None else domain
        ticket = next(self._tickets)
        self._latest[key] = ticket
        try:
            payload = await self.client.get_timeline(domain, request_id, token)
        except ErpApiError as exc:
            logger.warning("Timeline fetch failed for %s %s: %s", domain.value, request_id, exc.message)
            return None
        finally:
            current = self._latest.get(key) == ticket
            if current:
                del self._latest[key]
        if not current:
            logger.info("Discarding stale timeline for %s %s", domain.value, request_id)
            return None
        return to_approval_steps(payload)
