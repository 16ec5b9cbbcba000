import uuid

import django.core.validators
from django.db import migrations, models


CATEGORY_CHOICES = [
    ('FOOD_DINING', 'Food & Dining'),
    ('TRANSPORTATION', 'Transportation'),
    ('SHOPPING', 'Shopping'),
    ('ENTERTAINMENT', 'Entertainment'),
    ('BILLS_UTILITIES', 'Bills & Utilities'),
    ('HEALTHCARE', 'Healthcare'),
    ('TRAVEL', 'Travel'),
    ('EDUCATION', 'Education'),
    ('GROCERIES', 'Groceries'),
    ('RENT', 'Rent'),
    ('OTHER', 'Other'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=100)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('date', models.DateField(db_index=True)),
                ('category', models.CharField(choices=CATEGORY_CHOICES, db_index=True, max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['-date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Budget',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('category', models.CharField(choices=CATEGORY_CHOICES, max_length=20)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('month', models.CharField(
                    help_text='YYYY-MM, e.g. 2025-04',
                    max_length=7,
                    validators=[django.core.validators.RegexValidator(
                        '^\\d{4}-\\d{2}$', 'Month must be in YYYY-MM format')],
                )),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='budget',
            constraint=models.UniqueConstraint(fields=('category', 'month'), name='unique_budget_category_month'),
        ),
    ]
