"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2025-01-01 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum("Patient", "Doctor", "Administrator", name="user_role")
appointment_status = sa.Enum(
    "Requested", "Scheduled", "Completed", "Canceled", name="appointment_status"
)
schedule_status = sa.Enum("Scheduled", "Cancelled", "Completed", name="schedule_status")
billing_status = sa.Enum("Pending", "Paid", name="billing_status")

MONEY = sa.Numeric(10, 2)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password_hash", sa.String(100), nullable=False),
        sa.Column("role", user_role, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("user_id", name="pk_users"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "specializations",
        sa.Column("specialization_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("specialization_name", sa.String(100), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("specialization_id", name="pk_specializations"),
        sa.UniqueConstraint(
            "specialization_name", name="uq_specializations_specialization_name"
        ),
    )

    op.create_table(
        "tests",
        sa.Column("test_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("test_name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", MONEY, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("test_id", name="pk_tests"),
        sa.UniqueConstraint("test_name", name="uq_tests_test_name"),
    )

    op.create_table(
        "medications",
        sa.Column("medication_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("medication_name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price_per_unit", MONEY, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("medication_id", name="pk_medications"),
        sa.UniqueConstraint("medication_name", name="uq_medications_medication_name"),
    )

    op.create_table(
        "patients",
        sa.Column("patient_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("patient_code", sa.String(10), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("contact_number", sa.String(20), nullable=True),
        sa.Column("address", sa.String(250), nullable=True),
        sa.Column("medical_history", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("patient_id", name="pk_patients"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.user_id"],
            name="fk_patients_user_id_users",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("patient_code", name="uq_patients_patient_code"),
        sa.UniqueConstraint("user_id", name="uq_patients_user_id"),
    )

    op.create_table(
        "doctors",
        sa.Column("doctor_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("doctor_code", sa.String(12), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column("experience_years", sa.Integer(), nullable=False),
        sa.Column("qualification", sa.String(100), nullable=True),
        sa.Column("designation", sa.String(100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("doctor_id", name="pk_doctors"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.user_id"],
            name="fk_doctors_user_id_users",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("doctor_code", name="uq_doctors_doctor_code"),
        sa.UniqueConstraint("user_id", name="uq_doctors_user_id"),
    )

    op.create_table(
        "administrators",
        sa.Column("admin_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("admin_id", name="pk_administrators"),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.user_id"],
            name="fk_administrators_user_id_users",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("user_id", name="uq_administrators_user_id"),
    )

    op.create_table(
        "doctor_specializations",
        sa.Column("doctor_id", sa.Integer(), nullable=False),
        sa.Column("specialization_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint(
            "doctor_id", "specialization_id", name="pk_doctor_specializations"
        ),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctors.doctor_id"],
            name="fk_doctor_specializations_doctor_id_doctors",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["specialization_id"],
            ["specializations.specialization_id"],
            name="fk_doctor_specializations_specialization_id_specializations",
            ondelete="CASCADE",
        ),
    )

    op.create_table(
        "doctor_schedules",
        sa.Column("schedule_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", schedule_status, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("schedule_id", name="pk_doctor_schedules"),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctors.doctor_id"],
            name="fk_doctor_schedules_doctor_id_doctors",
        ),
    )
    op.create_index(
        "ix_doctor_schedules_doctor_id", "doctor_schedules", ["doctor_id"]
    )

    op.create_table(
        "appointments",
        sa.Column("appointment_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=False),
        sa.Column("appointment_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", appointment_status, nullable=False),
        sa.Column("symptoms", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("appointment_id", name="pk_appointments"),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["patients.patient_id"],
            name="fk_appointments_patient_id_patients",
        ),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctors.doctor_id"],
            name="fk_appointments_doctor_id_doctors",
        ),
    )
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"])
    op.create_index("ix_appointments_doctor_id", "appointments", ["doctor_id"])

    op.create_table(
        "medical_records",
        sa.Column("record_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("appointment_id", sa.Integer(), nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("symptoms", sa.Text(), nullable=True),
        sa.Column("physical_examination", sa.Text(), nullable=True),
        sa.Column("treatment_plan", sa.Text(), nullable=True),
        sa.Column("follow_up_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_price", MONEY, nullable=False),
        sa.Column("billing_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("record_id", name="pk_medical_records"),
        sa.ForeignKeyConstraint(
            ["appointment_id"],
            ["appointments.appointment_id"],
            name="fk_medical_records_appointment_id_appointments",
        ),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctors.doctor_id"],
            name="fk_medical_records_doctor_id_doctors",
        ),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["patients.patient_id"],
            name="fk_medical_records_patient_id_patients",
        ),
        sa.UniqueConstraint("appointment_id", name="uq_medical_records_appointment_id"),
    )
    op.create_index("ix_medical_records_doctor_id", "medical_records", ["doctor_id"])
    op.create_index("ix_medical_records_patient_id", "medical_records", ["patient_id"])

    op.create_table(
        "medical_record_tests",
        sa.Column("record_test_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("record_id", sa.Integer(), nullable=False),
        sa.Column("test_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("record_test_id", name="pk_medical_record_tests"),
        sa.ForeignKeyConstraint(
            ["record_id"],
            ["medical_records.record_id"],
            name="fk_medical_record_tests_record_id_medical_records",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["test_id"],
            ["tests.test_id"],
            name="fk_medical_record_tests_test_id_tests",
        ),
    )
    op.create_index(
        "ix_medical_record_tests_record_id", "medical_record_tests", ["record_id"]
    )

    op.create_table(
        "billings",
        sa.Column("billing_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("doctor_id", sa.Integer(), nullable=False),
        sa.Column("medical_record_id", sa.Integer(), nullable=False),
        sa.Column("consultation_fee", MONEY, nullable=False),
        sa.Column("total_tests_price", MONEY, nullable=False),
        sa.Column("total_medications_price", MONEY, nullable=False),
        sa.Column("grand_total", MONEY, nullable=False),
        sa.Column("status", billing_status, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("billing_id", name="pk_billings"),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["patients.patient_id"],
            name="fk_billings_patient_id_patients",
        ),
        sa.ForeignKeyConstraint(
            ["doctor_id"],
            ["doctors.doctor_id"],
            name="fk_billings_doctor_id_doctors",
        ),
        sa.ForeignKeyConstraint(
            ["medical_record_id"],
            ["medical_records.record_id"],
            name="fk_billings_medical_record_id_medical_records",
        ),
        sa.UniqueConstraint("medical_record_id", name="uq_billings_medical_record_id"),
    )
    op.create_index("ix_billings_patient_id", "billings", ["patient_id"])
    op.create_index("ix_billings_doctor_id", "billings", ["doctor_id"])

    op.create_table(
        "prescriptions",
        sa.Column("prescription_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("record_id", sa.Integer(), nullable=False),
        sa.Column("medication_id", sa.Integer(), nullable=False),
        sa.Column("medication_name", sa.String(100), nullable=False),
        sa.Column("dosage", sa.String(100), nullable=False),
        sa.Column("duration_days", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("total_price", MONEY, nullable=False),
        sa.Column("billing_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("prescription_id", name="pk_prescriptions"),
        sa.ForeignKeyConstraint(
            ["record_id"],
            ["medical_records.record_id"],
            name="fk_prescriptions_record_id_medical_records",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["medication_id"],
            ["medications.medication_id"],
            name="fk_prescriptions_medication_id_medications",
        ),
        sa.ForeignKeyConstraint(
            ["billing_id"],
            ["billings.billing_id"],
            name="fk_prescriptions_billing_id_billings",
        ),
    )
    op.create_index("ix_prescriptions_record_id", "prescriptions", ["record_id"])

    # Closes the medical_records <-> billings cycle
    with op.batch_alter_table("medical_records") as batch_op:
        batch_op.create_foreign_key(
            "fk_medical_records_billing_id_billings",
            "billings",
            ["billing_id"],
            ["billing_id"],
        )


def downgrade() -> None:
    with op.batch_alter_table("medical_records") as batch_op:
        batch_op.drop_constraint(
            "fk_medical_records_billing_id_billings", type_="foreignkey"
        )

    op.drop_table("prescriptions")
    op.drop_table("billings")
    op.drop_table("medical_record_tests")
    op.drop_table("medical_records")
    op.drop_table("appointments")
    op.drop_table("doctor_schedules")
    op.drop_table("doctor_specializations")
    op.drop_table("administrators")
    op.drop_table("doctors")
    op.drop_table("patients")
    op.drop_table("medications")
    op.drop_table("tests")
    op.drop_table("specializations")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (billing_status, schedule_status, appointment_status, user_role):
        enum_type.drop(bind, checkfirst=True)
