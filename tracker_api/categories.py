from django.db import models


class Category(models.TextChoices):
    FOOD_DINING = 'FOOD_DINING', 'Food & Dining'
    TRANSPORTATION = 'TRANSPORTATION', 'Transportation'
    SHOPPING = 'SHOPPING', 'Shopping'
    ENTERTAINMENT = 'ENTERTAINMENT', 'Entertainment'
    BILLS_UTILITIES = 'BILLS_UTILITIES', 'Bills & Utilities'
    HEALTHCARE = 'HEALTHCARE', 'Healthcare'
    TRAVEL = 'TRAVEL', 'Travel'
    EDUCATION = 'EDUCATION', 'Education'
    GROCERIES = 'GROCERIES', 'Groceries'
    RENT = 'RENT', 'Rent'
    OTHER = 'OTHER', 'Other'


FALLBACK_LABEL = Category.OTHER.label

# Built once; both directions are total over the 11 codes
LABEL_TO_CODE = {category.label: category.value for category in Category}
CODE_TO_LABEL = {code: label for label, code in LABEL_TO_CODE.items()}


def to_label(code):
    """Display label for a storage code, "Other" for anything unknown."""
    return CODE_TO_LABEL.get(code, FALLBACK_LABEL)


def to_code(value):
    """Storage code for a display label or an already-normalized code.

    Returns None when the value is neither.
    """
    if value in LABEL_TO_CODE:
        return LABEL_TO_CODE[value]
    if value in CODE_TO_LABEL:
        return value
    return None
