# clinic/db/models/billing_table.py
from __future__ import annotations
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from sqlalchemy import ForeignKey, Integer, Enum as sqlalchemy_Enum
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .db_base_model import DbBaseModel, Money

if TYPE_CHECKING:
    from .patient_table import Patient
    from .doctor_table import Doctor
    from .medical_record_table import MedicalRecord


class BillingStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"


class Billing(DbBaseModel):
    """
    Invoice for one consultation.

    grand_total is written once at creation as
    consultation_fee + total_tests_price + total_medications_price.
    """

    __tablename__ = "billings"

    billing_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.patient_id"), nullable=False, index=True
    )
    doctor_id: Mapped[int] = mapped_column(
        ForeignKey("doctors.doctor_id"), nullable=False, index=True
    )
    medical_record_id: Mapped[int] = mapped_column(
        ForeignKey("medical_records.record_id"), nullable=False, unique=True
    )

    consultation_fee: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_tests_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    total_medications_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    grand_total: Mapped[Decimal] = mapped_column(Money, nullable=False)

    status: Mapped[BillingStatus] = mapped_column(
        sqlalchemy_Enum(
            BillingStatus,
            name="billing_status",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=BillingStatus.PENDING,
    )

    patient: Mapped["Patient"] = relationship("Patient")
    doctor: Mapped["Doctor"] = relationship("Doctor")
    medical_record: Mapped["MedicalRecord"] = relationship(
        "MedicalRecord", foreign_keys=[medical_record_id]
    )


__all__ = ["Billing", "BillingStatus"]
