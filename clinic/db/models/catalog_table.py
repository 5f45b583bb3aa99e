# clinic/db/models/catalog_table.py
from __future__ import annotations
from decimal import Decimal
from typing import Optional
from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from .db_base_model import DbBaseModel, Money


class Test(DbBaseModel):
    """Laboratory test offered by the clinic."""

    __tablename__ = "tests"
    __test__ = False  # keep pytest from collecting the model

    test_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    test_name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(Money, nullable=False)


class Medication(DbBaseModel):
    __tablename__ = "medications"

    medication_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    medication_name: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True
    )
    description: Mapped[Optional[str]] = mapped_column(Text)
    price_per_unit: Mapped[Decimal] = mapped_column(Money, nullable=False)


__all__ = ["Test", "Medication"]
