import uuid

from django.core.validators import RegexValidator
from django.db import models

from .categories import Category, to_label
from .months import MONTH_RE, month_of

month_validator = RegexValidator(MONTH_RE.pattern, "Month must be in YYYY-MM format")


class Transaction(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    description = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    date = models.DateField(db_index=True)
    category = models.CharField(max_length=20, choices=Category.choices, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-date', '-created_at']

    @property
    def month(self):
        return month_of(self.date)

    def __str__(self):
        return f"{self.date} - {to_label(self.category)} - {self.amount}"


class Budget(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    category = models.CharField(max_length=20, choices=Category.choices)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    month = models.CharField(max_length=7, validators=[month_validator], help_text="YYYY-MM, e.g. 2025-04")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['category', 'month'], name='unique_budget_category_month'),
        ]

    def __str__(self):
        return f"{self.month} - {to_label(self.category)} - {self.amount}"
