import csv
import logging
from decimal import Decimal

from django.db import IntegrityError, transaction as db_transaction
from django.http import Http404, HttpResponse
from django.utils.timezone import now
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from .cache import CacheLayer
from .categories import to_code, to_label
from .dashboard import DashboardEngine, breakdown_by_category
from .exceptions import ConflictError, NotFoundError
from .models import Budget, Transaction
from .months import TREND_MONTHS, month_bounds, parse_month, shift_month
from .pagination import TransactionPagination
from .serializers import BudgetSerializer, TransactionSerializer

logger = logging.getLogger(__name__)


def success(data, status_code=status.HTTP_200_OK):
    return Response({'success': True, 'data': data}, status=status_code)


def month_param(request, name='month', window=1):
    """Validated ``YYYY-MM`` query parameter, or None when absent.

    ``window`` is how many months, ending at the requested one, the caller
    will read; all of them must be representable.
    """
    value = request.query_params.get(name)
    if not value:
        return None
    try:
        parse_month(value)
    except ValueError as exc:
        raise ValidationError({name: [str(exc)]})
    try:
        parse_month(shift_month(value, 1 - window))
    except ValueError:
        raise ValidationError({name: [f"Month is too early for a {window}-month window"]})
    return value


def category_param(request):
    # Unknown labels are ignored rather than rejected
    value = request.query_params.get('category')
    return to_code(value) if value else None


class TrackerViewSet(viewsets.ModelViewSet):
    """CRUD in the ``{success, data}`` envelope, invalidating the cache on writes."""

    entity = None
    cache_layer_class = CacheLayer

    def get_cache(self):
        return self.cache_layer_class()

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            raise NotFoundError(f"{self.entity} not found")

    def retrieve(self, request, *args, **kwargs):
        return success(self.get_serializer(self.get_object()).data)

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return success(serializer.data)

    def destroy(self, request, *args, **kwargs):
        self.perform_destroy(self.get_object())
        return success({'message': f"{self.entity} deleted successfully"})


class TransactionView(TrackerViewSet):
    serializer_class = TransactionSerializer
    pagination_class = TransactionPagination
    entity = "Transaction"

    def get_queryset(self):
        transactions = Transaction.objects.all()
        category = category_param(self.request)
        if category:
            transactions = transactions.filter(category=category)
        month = month_param(self.request)
        if month:
            transactions = transactions.filter(date__range=month_bounds(month))
        return transactions.order_by('-date', '-created_at')

    def list(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return success(serializer.data, status.HTTP_201_CREATED)

    def perform_create(self, serializer):
        instance = serializer.save()
        self.get_cache().invalidate_transaction(instance.month)

    def perform_update(self, serializer):
        old_month = serializer.instance.month
        instance = serializer.save()
        self.get_cache().invalidate_transaction(old_month, instance.month)

    def perform_destroy(self, instance):
        month = instance.month
        instance.delete()
        self.get_cache().invalidate_transaction(month)

    @action(detail=False, methods=['get'])
    def export(self, request):
        transactions = self.get_queryset()
        by_category = breakdown_by_category(transactions)
        total = sum(by_category.values(), Decimal('0'))

        response = HttpResponse(content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = f'attachment; filename="transactions_{now().date()}.csv"'

        writer = csv.writer(response)

        writer.writerow(['Summary'])
        writer.writerow(['Total expenses', f"{total:.2f}"])
        writer.writerow(['Transactions', len(transactions)])
        writer.writerow([])

        writer.writerow(['Expenses by category'])
        for label, amount in by_category.items():
            writer.writerow([label, f"{amount:.2f}"])
        writer.writerow([])

        writer.writerow(['Date', 'Description', 'Category', 'Amount'])
        for t in transactions:
            writer.writerow([t.date, t.description, to_label(t.category), f"{t.amount:.2f}"])

        return response


class BudgetView(TrackerViewSet):
    serializer_class = BudgetSerializer
    pagination_class = None
    entity = "Budget"

    def get_queryset(self):
        budgets = Budget.objects.all()
        month = month_param(self.request)
        if month:
            budgets = budgets.filter(month=month)
        category = category_param(self.request)
        if category:
            budgets = budgets.filter(category=category)
        return budgets.order_by('-created_at')

    def list(self, request, *args, **kwargs):
        return success(self.get_serializer(self.get_queryset(), many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        budget, created = Budget.objects.update_or_create(
            category=data['category'],
            month=data['month'],
            defaults={'amount': data['amount']},
        )
        logger.info("%s budget %s for %s", "Created" if created else "Updated", budget.category, budget.month)
        self.get_cache().invalidate_budget(budget.month)
        return success(self.get_serializer(budget).data, status.HTTP_201_CREATED)

    def perform_update(self, serializer):
        old_month = serializer.instance.month
        try:
            with db_transaction.atomic():
                instance = serializer.save()
        except IntegrityError:
            raise ConflictError("A budget for this category and month already exists")
        self.get_cache().invalidate_budget(old_month, instance.month)

    def perform_destroy(self, instance):
        month = instance.month
        instance.delete()
        self.get_cache().invalidate_budget(month)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        engine = DashboardEngine(self.get_cache())
        return success(engine.budget_summary(month_param(request)))


class DashboardView(APIView):
    engine_class = DashboardEngine

    def get_engine(self):
        return self.engine_class(CacheLayer())

    def force_refresh(self, request):
        return '_t' in request.query_params

    def get(self, request):
        month = month_param(request, window=TREND_MONTHS)
        snapshot = self.get_engine().get_dashboard(month, self.force_refresh(request))
        response = success(snapshot)
        response['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        response['Pragma'] = 'no-cache'
        response['Expires'] = '0'
        return response


class CategoryBreakdownView(DashboardView):

    def get(self, request):
        engine = self.get_engine()
        month = month_param(request) or engine.default_month()
        return success({
            'month': month,
            'breakdown': engine.category_breakdown(month, self.force_refresh(request)),
        })


class BudgetAlertsView(DashboardView):

    def get(self, request):
        engine = self.get_engine()
        month = month_param(request) or engine.default_month()
        return success({
            'month': month,
            'alerts': engine.budget_alerts(month, self.force_refresh(request)),
        })
