from django.urls import path, include
from rest_framework import routers

from .views import TransactionView, BudgetView, DashboardView, CategoryBreakdownView, BudgetAlertsView

router = routers.DefaultRouter(trailing_slash=False)
router.register(r'transactions', TransactionView, basename='transaction')
router.register(r'budgets', BudgetView, basename='budget')

urlpatterns = [
        path('api/', include(router.urls)),
        path('api/dashboard', DashboardView.as_view(), name='dashboard'),
        path('api/dashboard/breakdown', CategoryBreakdownView.as_view(), name='dashboard-breakdown'),
        path('api/dashboard/alerts', BudgetAlertsView.as_view(), name='dashboard-alerts'),
]
