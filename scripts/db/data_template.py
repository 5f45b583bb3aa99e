# scripts/db/data_template.py
"""
Reference data loaded by ``seed_db.py catalog``.

Extend a template, or compose a smaller one for a test run:

    await seed_catalog(db_manager, {"tests": TEST_TEMPLATE})
"""

from decimal import Decimal
from typing import Any

SPECIALIZATION_TEMPLATE: list[dict[str, Any]] = [
    {"specialization_name": "General Medicine"},
    {"specialization_name": "Cardiology"},
    {"specialization_name": "Dermatology"},
    {"specialization_name": "Pediatrics"},
    {"specialization_name": "Orthopedics"},
    {"specialization_name": "Neurology"},
]

TEST_TEMPLATE: list[dict[str, Any]] = [
    {"test_name": "Complete Blood Count", "price": Decimal("50.00")},
    {"test_name": "Lipid Profile", "price": Decimal("30.00")},
    {"test_name": "Blood Glucose", "price": Decimal("15.00")},
    {"test_name": "Chest X-Ray", "price": Decimal("80.00")},
    {"test_name": "Electrocardiogram", "price": Decimal("60.00")},
]

MEDICATION_TEMPLATE: list[dict[str, Any]] = [
    {"medication_name": "Paracetamol 500mg", "price_per_unit": Decimal("0.50")},
    {"medication_name": "Amoxicillin 250mg", "price_per_unit": Decimal("1.20")},
    {"medication_name": "Ibuprofen 400mg", "price_per_unit": Decimal("0.80")},
    {"medication_name": "Atorvastatin 10mg", "price_per_unit": Decimal("20.00")},
]

DEFAULT_DATA_TEMPLATE: dict[str, list[dict[str, Any]]] = {
    "specializations": SPECIALIZATION_TEMPLATE,
    "tests": TEST_TEMPLATE,
    "medications": MEDICATION_TEMPLATE,
}

__all__ = [
    "DEFAULT_DATA_TEMPLATE",
    "SPECIALIZATION_TEMPLATE",
    "TEST_TEMPLATE",
    "MEDICATION_TEMPLATE",
]
