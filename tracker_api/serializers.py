from decimal import Decimal

from rest_framework import serializers

from .categories import to_code, to_label
from .models import Budget, Transaction
from .months import parse_month

MIN_AMOUNT = Decimal('0.01')
MAX_AMOUNT = Decimal('999999')


class CategoryField(serializers.Field):
    """Display label at the API boundary, storage code in the database."""

    default_error_messages = {
        'invalid': "Invalid category: {value}",
    }

    def to_internal_value(self, data):
        code = to_code(data) if isinstance(data, str) else None
        if code is None:
            self.fail('invalid', value=data)
        return code

    def to_representation(self, value):
        return to_label(value)


def amount_field():
    return serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=MIN_AMOUNT,
        max_value=MAX_AMOUNT,
        error_messages={
            'min_value': "Amount must be positive",
            'max_value': "Amount too large",
        },
    )


class TransactionSerializer(serializers.ModelSerializer):
    description = serializers.CharField(
        min_length=1,
        max_length=100,
        error_messages={
            'blank': "Description is required",
            'min_length': "Description is required",
            'max_length': "Description too long",
        },
    )
    amount = amount_field()
    date = serializers.DateField(input_formats=['iso-8601', '%Y-%m-%dT%H:%M:%S.%fZ', '%Y-%m-%dT%H:%M:%SZ'])
    category = CategoryField()

    class Meta:
        model = Transaction
        fields = ['id', 'description', 'amount', 'date', 'category', 'created_at']
        read_only_fields = ['id', 'created_at']


class BudgetSerializer(serializers.ModelSerializer):
    amount = amount_field()
    category = CategoryField()
    month = serializers.CharField()

    class Meta:
        model = Budget
        fields = ['id', 'category', 'amount', 'month', 'created_at']
        read_only_fields = ['id', 'created_at']
        # (category, month) is upserted in the view rather than rejected here
        validators = []

    def validate_month(self, value):
        try:
            parse_month(value)
        except ValueError as exc:
            raise serializers.ValidationError(str(exc))
        return value
