"""Monthly dashboard aggregation served through the tracker cache.

Store errors propagate to the caller; cache errors are absorbed by
``CacheLayer`` and only cost a recomputation.
"""
import logging
from decimal import Decimal

from django.db.models import Sum
from django.db.models.functions import Abs
from django.utils import timezone

from .cache import BUDGET_ALERTS, CATEGORY_BREAKDOWN, DASHBOARD_STATS, MONTHLY_EXPENSES, CacheLayer
from .categories import to_code, to_label
from .models import Budget, Transaction
from .months import current_month, long_label, month_bounds, short_label, trailing_months
from .serializers import TransactionSerializer

logger = logging.getLogger(__name__)

RECENT_COUNT = 5
WARNING_PERCENTAGE = Decimal('80')
EXCEEDED_PERCENTAGE = Decimal('100')


def month_transactions(month):
    start, end = month_bounds(month)
    return Transaction.objects.filter(date__range=(start, end)).order_by('-date', '-created_at')


def breakdown_by_category(transactions):
    breakdown = {}
    for transaction in transactions:
        label = to_label(transaction.category)
        breakdown[label] = breakdown.get(label, Decimal('0')) + abs(transaction.amount)
    return breakdown


def top_category(breakdown):
    """Largest total; ties go to the lexicographically smallest storage code."""
    if not breakdown:
        return None
    label, amount = min(
        breakdown.items(),
        key=lambda item: (-item[1], to_code(item[0])),
    )
    return {'category': label, 'amount': amount}


def alert_for(budget, spent):
    percentage = spent / budget.amount * 100
    label = to_label(budget.category)
    if percentage >= EXCEEDED_PERCENTAGE:
        kind, message = 'exceeded', f"Budget exceeded for {label}"
    elif percentage >= WARNING_PERCENTAGE:
        kind, message = 'warning', f"Approaching budget limit for {label}"
    else:
        return None
    return {
        'category': label,
        'type': kind,
        'message': message,
        'spent': spent,
        'budget': budget.amount,
        'percentage': float(percentage),
    }


def spent_by_category(transactions):
    spent = {}
    for transaction in transactions:
        spent[transaction.category] = spent.get(transaction.category, Decimal('0')) + abs(transaction.amount)
    return spent


class DashboardEngine:
    """Computes dashboard aggregates and keeps them in the cache.

    ``cache`` is the process-wide ``CacheLayer``; ``today`` decides which
    month counts as current for TTL purposes.
    """

    def __init__(self, cache=None, today=None):
        self.cache = cache if cache is not None else CacheLayer()
        self.today = today

    def _today(self):
        return self.today or timezone.localdate()

    def default_month(self):
        return current_month(self._today())

    def _read(self, aggregate, month, force_refresh):
        if force_refresh:
            logger.debug("Forced refresh of %s", aggregate.key(month))
            return None
        value = self.cache.get(aggregate.key(month))
        logger.debug("Cache %s for %s", "miss" if value is None else "hit", aggregate.key(month))
        return value

    def _write(self, aggregate, month, value):
        self.cache.set(aggregate.key(month), value, aggregate.ttl(month, self._today()))

    def get_dashboard(self, month=None, force_refresh=False):
        month = month or self.default_month()
        cached = self._read(DASHBOARD_STATS, month, force_refresh)
        if isinstance(cached, dict) and cached.get('month') == month:
            return cached

        transactions = list(month_transactions(month))
        total = sum((abs(t.amount) for t in transactions), Decimal('0'))
        breakdown = breakdown_by_category(transactions)
        alerts = self._alerts(month, transactions)

        trends = []
        for trend_month in trailing_months(month):
            if trend_month == month:
                amount = total
            else:
                amount = self.monthly_expenses(trend_month, force_refresh)
            trends.append({'month': trend_month, 'label': short_label(trend_month), 'amount': amount})

        recent = TransactionSerializer(transactions[:RECENT_COUNT], many=True).data
        snapshot = {
            'month': month,
            'monthly_expenses': {'total': total, 'month': long_label(month)},
            'recent_transactions': [dict(item) for item in recent],
            'top_spending_category': top_category(breakdown),
            'category_breakdown': breakdown,
            'spending_trends': trends,
            'budget_alerts': alerts,
            'transaction_count': len(transactions),
            'last_updated': timezone.now().isoformat(),
        }

        self._write(DASHBOARD_STATS, month, snapshot)
        self._write(MONTHLY_EXPENSES, month, total)
        self._write(CATEGORY_BREAKDOWN, month, breakdown)
        self._write(BUDGET_ALERTS, month, alerts)
        return snapshot

    def monthly_expenses(self, month, force_refresh=False):
        cached = self._read(MONTHLY_EXPENSES, month, force_refresh)
        if cached is not None:
            return cached
        start, end = month_bounds(month)
        total = Transaction.objects.filter(date__range=(start, end)).aggregate(total=Sum(Abs('amount')))['total']
        total = total if total is not None else Decimal('0')
        self._write(MONTHLY_EXPENSES, month, total)
        return total

    def category_breakdown(self, month, force_refresh=False):
        cached = self._read(CATEGORY_BREAKDOWN, month, force_refresh)
        if cached is not None:
            return cached
        breakdown = breakdown_by_category(month_transactions(month))
        self._write(CATEGORY_BREAKDOWN, month, breakdown)
        return breakdown

    def budget_alerts(self, month, force_refresh=False):
        cached = self._read(BUDGET_ALERTS, month, force_refresh)
        if cached is not None:
            return cached
        alerts = self._alerts(month, month_transactions(month))
        self._write(BUDGET_ALERTS, month, alerts)
        return alerts

    def _alerts(self, month, transactions):
        spent = spent_by_category(transactions)
        alerts = []
        for budget in Budget.objects.filter(month=month):
            alert = alert_for(budget, spent.get(budget.category, Decimal('0')))
            if alert is not None:
                alerts.append(alert)
        return alerts

    def budget_summary(self, month=None):
        """Budget against actual spending, one row per budget."""
        budgets = Budget.objects.all()
        if month:
            budgets = budgets.filter(month=month)

        spent_cache = {}
        summary = []
        for budget in budgets:
            if budget.month not in spent_cache:
                spent_cache[budget.month] = spent_by_category(month_transactions(budget.month))
            spent = spent_cache[budget.month].get(budget.category, Decimal('0'))
            summary.append({
                'id': str(budget.id),
                'category': to_label(budget.category),
                'month': budget.month,
                'budgeted': budget.amount,
                'spent': spent,
                'remaining': budget.amount - spent,
                'percentage': float(spent / budget.amount * 100),
                'over_budget': spent > budget.amount,
            })
        return summary
