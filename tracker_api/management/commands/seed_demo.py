import random
from datetime import date
from decimal import Decimal

from django.core.management.base import BaseCommand

from tracker_api.cache import CacheLayer
from tracker_api.categories import Category
from tracker_api.models import Budget, Transaction
from tracker_api.months import current_month, parse_month, shift_month

SAMPLE_TRANSACTIONS = [
    ('Grocery shopping', Category.GROCERIES, '85.50'),
    ('Monthly rent payment', Category.RENT, '1200.00'),
    ('Dinner at Italian restaurant', Category.FOOD_DINING, '45.75'),
    ('Gas station fill-up', Category.TRANSPORTATION, '52.30'),
    ('Streaming subscription', Category.ENTERTAINMENT, '15.99'),
    ('Electricity bill', Category.BILLS_UTILITIES, '89.45'),
    ('Doctor visit copay', Category.HEALTHCARE, '25.00'),
    ('Online course purchase', Category.EDUCATION, '199.99'),
    ('Coffee shop', Category.FOOD_DINING, '4.50'),
    ('Taxi ride', Category.TRANSPORTATION, '12.75'),
    ('Online store purchase', Category.SHOPPING, '67.89'),
    ('Movie tickets', Category.ENTERTAINMENT, '24.00'),
    ('Pharmacy prescription', Category.HEALTHCARE, '18.50'),
    ('Internet bill', Category.BILLS_UTILITIES, '59.99'),
    ('Weekend trip hotel', Category.TRAVEL, '150.00'),
]

SAMPLE_BUDGETS = [
    (Category.GROCERIES, '400.00'),
    (Category.FOOD_DINING, '200.00'),
    (Category.TRANSPORTATION, '150.00'),
    (Category.ENTERTAINMENT, '100.00'),
    (Category.RENT, '1200.00'),
]


class Command(BaseCommand):
    help = "Fill the database with sample transactions and budgets"

    def add_arguments(self, parser):
        parser.add_argument('--months', type=int, default=3, help="How many months of history to create")
        parser.add_argument('--keep', action='store_true', help="Keep existing rows instead of clearing them")

    def handle(self, *args, **options):
        if not options['keep']:
            Transaction.objects.all().delete()
            Budget.objects.all().delete()
            self.stdout.write("Cleared existing data")

        this_month = current_month()
        months = [shift_month(this_month, -offset) for offset in range(options['months'])]

        created = []
        for month in months:
            first_day = parse_month(month)
            for _ in range(random.randint(15, 20)):
                description, category, amount = random.choice(SAMPLE_TRANSACTIONS)
                created.append(Transaction(
                    description=description,
                    category=category,
                    amount=Decimal(amount),
                    date=date(first_day.year, first_day.month, random.randint(1, 28)),
                ))
        Transaction.objects.bulk_create(created)
        self.stdout.write(f"Created {len(created)} transactions across {len(months)} months")

        for category, amount in SAMPLE_BUDGETS:
            Budget.objects.update_or_create(category=category, month=this_month,
                                            defaults={'amount': Decimal(amount)})
        self.stdout.write(f"Created {len(SAMPLE_BUDGETS)} budgets for {this_month}")

        cache = CacheLayer()
        cache.invalidate_transaction(*months)
        cache.invalidate_budget(this_month)
        self.stdout.write(self.style.SUCCESS("Seeding completed"))
