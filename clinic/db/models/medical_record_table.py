# clinic/db/models/medical_record_table.py
from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship, Mapped, mapped_column
from .db_base_model import DbBaseModel, Money, ZERO

if TYPE_CHECKING:
    from .appointment_table import Appointment
    from .billing_table import Billing
    from .catalog_table import Test


class MedicalRecord(DbBaseModel):
    """Clinical findings of one consultation. One per completed appointment."""

    __tablename__ = "medical_records"

    record_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    appointment_id: Mapped[int] = mapped_column(
        ForeignKey("appointments.appointment_id"),
        nullable=False,
        unique=True,
    )
    doctor_id: Mapped[int] = mapped_column(
        ForeignKey("doctors.doctor_id"), nullable=False, index=True
    )
    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.patient_id"), nullable=False, index=True
    )

    symptoms: Mapped[Optional[str]] = mapped_column(Text)
    physical_examination: Mapped[Optional[str]] = mapped_column(Text)
    treatment_plan: Mapped[Optional[str]] = mapped_column(Text)
    follow_up_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    total_price: Mapped[Decimal] = mapped_column(Money, nullable=False, default=ZERO)

    # billings.medical_record_id points back here, so this side is added after
    # both tables exist
    billing_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey(
            "billings.billing_id",
            use_alter=True,
            name="fk_medical_records_billing_id_billings",
        ),
        nullable=True,
    )

    appointment: Mapped["Appointment"] = relationship("Appointment")

    tests: Mapped[list["MedicalRecordTest"]] = relationship(
        "MedicalRecordTest",
        back_populates="record",
        cascade="all, delete-orphan",
    )
    prescriptions: Mapped[list["Prescription"]] = relationship(
        "Prescription",
        back_populates="record",
        cascade="all, delete-orphan",
        foreign_keys="Prescription.record_id",
    )
    billing: Mapped[Optional["Billing"]] = relationship(
        "Billing", foreign_keys=[billing_id], post_update=True
    )


class MedicalRecordTest(DbBaseModel):
    __tablename__ = "medical_record_tests"

    record_test_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    record_id: Mapped[int] = mapped_column(
        ForeignKey("medical_records.record_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    test_id: Mapped[int] = mapped_column(ForeignKey("tests.test_id"), nullable=False)

    record: Mapped["MedicalRecord"] = relationship(
        "MedicalRecord", back_populates="tests"
    )
    test: Mapped["Test"] = relationship("Test")


class Prescription(DbBaseModel):
    __tablename__ = "prescriptions"

    prescription_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    record_id: Mapped[int] = mapped_column(
        ForeignKey("medical_records.record_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    medication_id: Mapped[int] = mapped_column(
        ForeignKey("medications.medication_id"), nullable=False
    )
    # Snapshot taken at prescription time; catalog renames do not rewrite history
    medication_name: Mapped[str] = mapped_column(String(100), nullable=False)
    dosage: Mapped[str] = mapped_column(String(100), nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Money, nullable=False, default=ZERO)

    billing_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("billings.billing_id"), nullable=True
    )

    record: Mapped["MedicalRecord"] = relationship(
        "MedicalRecord", back_populates="prescriptions", foreign_keys=[record_id]
    )


__all__ = ["MedicalRecord", "MedicalRecordTest", "Prescription"]
