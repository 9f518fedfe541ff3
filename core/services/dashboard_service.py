# =============================================================================
# core/services/dashboard_service.py - Admin Dashboard Counts
# =============================================================================

import logging

from core.services.crud_service import ALL_RESOURCES, CrudService
from lib.query_cache import QueryCache

logger = logging.getLogger(__name__)

STATS_CACHE_KEY = "admin-stats"


class DashboardService:
    """Row counts for every admin-managed table, cached as "admin-stats"."""

    def __init__(self, resources: dict[str, CrudService], cache: QueryCache):
        self.resources = resources
        self.cache = cache

    def _count_all(self) -> dict[str, int]:
        counts = {}
        for spec in ALL_RESOURCES:
            counts[spec.table] = self.resources[spec.path].count()
        logger.debug(f"Dashboard counts: {counts}")
        return counts

    def stats(self) -> dict[str, int]:
        return self.cache.get_or_fetch(STATS_CACHE_KEY, self._count_all)
