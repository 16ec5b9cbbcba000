"""Read-through cache for derived aggregates.

Every cached aggregate is registered in ``AGGREGATES`` together with the
months a write can make stale. Writers call ``invalidate_transaction`` or
``invalidate_budget`` and never list keys themselves.
"""
import logging
from dataclasses import dataclass

from django.conf import settings
from django.core.cache import caches

from .exceptions import CacheError
from .months import TREND_MONTHS, current_month, shift_month

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedAggregate:
    name: str
    prefix: str
    # months, starting at the written month, whose entry a transaction write can change
    transaction_reach: int
    budget_sensitive: bool

    def key(self, month):
        return f"{self.prefix}:{month}"

    def ttl(self, month, today=None):
        ttls = settings.TRACKER_CACHE_TTL
        if month == current_month(today):
            return ttls['current_month']
        return ttls[self.name]


DASHBOARD_STATS = CachedAggregate('dashboard', 'dashboard:stats', TREND_MONTHS, True)
MONTHLY_EXPENSES = CachedAggregate('monthly', 'expenses:monthly', 1, False)
CATEGORY_BREAKDOWN = CachedAggregate('breakdown', 'breakdown:category', 1, False)
BUDGET_ALERTS = CachedAggregate('alerts', 'budget:alerts', 1, True)

AGGREGATES = (DASHBOARD_STATS, MONTHLY_EXPENSES, CATEGORY_BREAKDOWN, BUDGET_ALERTS)


def transaction_keys(*months):
    keys = []
    for aggregate in AGGREGATES:
        for month in months:
            for offset in range(aggregate.transaction_reach):
                key = aggregate.key(shift_month(month, offset))
                if key not in keys:
                    keys.append(key)
    return keys


def budget_keys(*months):
    keys = []
    for aggregate in AGGREGATES:
        if not aggregate.budget_sensitive:
            continue
        for month in months:
            key = aggregate.key(month)
            if key not in keys:
                keys.append(key)
    return keys


class CacheLayer:
    """Wraps a Django cache handle; backend failures are logged, never raised."""

    def __init__(self, backend=None):
        self.backend = backend if backend is not None else caches[settings.TRACKER_CACHE_ALIAS]

    def _call(self, operation, *args):
        try:
            return getattr(self.backend, operation)(*args)
        except Exception as exc:
            raise CacheError(f"cache {operation} failed: {exc}") from exc

    def get(self, key):
        try:
            return self._call('get', key)
        except CacheError as exc:
            logger.warning("Treating %s as a miss: %s", key, exc)
            return None

    def set(self, key, value, ttl):
        try:
            self._call('set', key, value, ttl)
        except CacheError as exc:
            logger.warning("Could not store %s: %s", key, exc)

    def delete(self, key):
        self.delete_many([key])

    def delete_many(self, keys):
        if not keys:
            return
        try:
            self._call('delete_many', list(keys))
        except CacheError as exc:
            logger.warning("Could not invalidate %s: %s", ", ".join(keys), exc)

    def invalidate_transaction(self, *months):
        months = sorted(set(months))
        keys = transaction_keys(*months)
        logger.debug("Transaction write in %s invalidates %s", months, keys)
        self.delete_many(keys)

    def invalidate_budget(self, *months):
        months = sorted(set(months))
        keys = budget_keys(*months)
        logger.debug("Budget write in %s invalidates %s", months, keys)
        self.delete_many(keys)
