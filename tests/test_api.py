"""
End-to-end flow through the HTTP routers on an in-memory database.
"""

from decimal import Decimal

import pytest
import pytest_asyncio

from scripts.db import DEFAULT_DATA_TEMPLATE, bootstrap_admin, seed_catalog

API = "/api/v1"

ADMIN = {"username": "root.admin", "password": "admin-password"}
DOCTOR = {"username": "dr.smith", "password": "doctor-password"}
PATIENT = {"username": "jane.roe", "password": "patient-password"}


async def _login(client, credentials: dict) -> dict:
    response = await client.post(f"{API}/auth/login", json=credentials)
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


async def _catalog_id(client, headers, kind: str, name_field: str, name: str) -> int:
    response = await client.get(f"{API}/doctor/{kind}", headers=headers)
    assert response.status_code == 200
    return next(
        item[f"{kind[:-1]}_id"] for item in response.json() if item[name_field] == name
    )


@pytest_asyncio.fixture
async def seeded(db_manager, hasher):
    await seed_catalog(db_manager, DEFAULT_DATA_TEMPLATE)
    await bootstrap_admin(
        db_manager,
        hasher,
        username=ADMIN["username"],
        password=ADMIN["password"],
        full_name="Root Admin",
        email="admin@clinic.org",
    )
    return db_manager


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_reports_database(self, api_client):
        response = await api_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "Healthy"
        assert body["database"]["healthy"] is True
        assert "X-Request-ID" in response.headers


class TestAccessControl:
    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, api_client):
        response = await api_client.get(f"{API}/patient/personal-info")

        assert response.status_code == 401
        assert response.json()["error"] == "AUTHENTICATION_FAILED"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_bad_token_is_401(self, api_client):
        response = await api_client.get(
            f"{API}/doctor/appointments",
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_role_is_403(self, api_client, seeded):
        admin = await _login(api_client, ADMIN)

        response = await api_client.get(f"{API}/patient/personal-info", headers=admin)

        assert response.status_code == 403
        assert response.json()["error"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_bad_password_is_401(self, api_client, seeded):
        response = await api_client.post(
            f"{API}/auth/login",
            json={"username": ADMIN["username"], "password": "wrong-password"},
        )

        assert response.status_code == 401


class TestRegistrationEndpoints:
    @pytest.mark.asyncio
    async def test_register_then_username_is_taken(self, api_client):
        payload = {
            **PATIENT,
            "full_name": "Jane Roe",
            "email": "jane.roe@clinic.org",
            "date_of_birth": "1990-04-12",
        }

        created = await api_client.post(f"{API}/users/register", json=payload)
        assert created.status_code == 201

        check = await api_client.get(
            f"{API}/users/check-username", params={"username": "jane.roe"}
        )
        assert check.json() == {"username": "jane.roe", "available": False}

        duplicate = await api_client.post(f"{API}/users/register", json=payload)
        assert duplicate.status_code == 409
        assert duplicate.json()["error"] == "ALREADY_TAKEN"


class TestClinicFlow:
    @pytest.mark.asyncio
    async def test_appointment_to_paid_bill(self, api_client, seeded):
        admin = await _login(api_client, ADMIN)

        specializations = await api_client.get(
            f"{API}/admin/specializations", headers=admin
        )
        cardiology = next(
            s["specialization_id"]
            for s in specializations.json()
            if s["specialization_name"] == "Cardiology"
        )
        doctor_response = await api_client.post(
            f"{API}/admin/doctors",
            headers=admin,
            json={
                **DOCTOR,
                "full_name": "Dr. John Smith",
                "email": "john.smith@clinic.org",
                "experience_years": 12,
                "designation": "Consultant",
                "specialization_ids": [cardiology],
            },
        )
        assert doctor_response.status_code == 201, doctor_response.text
        doctor_id = doctor_response.json()["doctor_id"]

        registered = await api_client.post(
            f"{API}/users/register",
            json={
                **PATIENT,
                "full_name": "Jane Roe",
                "email": "jane.roe@clinic.org",
                "date_of_birth": "1990-04-12",
            },
        )
        assert registered.status_code == 201

        doctor = await _login(api_client, DOCTOR)
        patient = await _login(api_client, PATIENT)

        schedule = await api_client.post(
            f"{API}/doctor/schedules",
            headers=doctor,
            json={"start_date": "2099-06-01T09:00:00", "end_date": "2099-06-01T17:00:00"},
        )
        assert schedule.status_code == 201, schedule.text

        found = await api_client.get(
            f"{API}/patient/doctors",
            headers=patient,
            params={"specialization": "Cardiology"},
        )
        assert [d["doctor_id"] for d in found.json()] == [doctor_id]

        outside = await api_client.post(
            f"{API}/patient/appointments",
            headers=patient,
            json={"doctor_id": doctor_id, "appointment_date": "2099-06-01T18:00:00"},
        )
        assert outside.status_code == 409
        assert outside.json()["error"] == "SCHEDULE_CONFLICT"

        requested = await api_client.post(
            f"{API}/patient/appointments",
            headers=patient,
            json={
                "doctor_id": doctor_id,
                "appointment_date": "2099-06-01T10:00:00",
                "symptoms": "Chest pain",
            },
        )
        assert requested.status_code == 201, requested.text
        appointment_id = requested.json()["appointment_id"]
        assert requested.json()["status"] == "Requested"

        approved = await api_client.put(
            f"{API}/doctor/appointments/{appointment_id}/approve", headers=doctor
        )
        assert approved.json()["status"] == "Scheduled"

        moved = await api_client.put(
            f"{API}/patient/appointments/{appointment_id}/reschedule",
            headers=patient,
            json={"new_appointment_date": "2099-06-01T11:00:00"},
        )
        assert moved.status_code == 200, moved.text
        assert moved.json()["appointment"]["status"] == "Requested"

        await api_client.put(
            f"{API}/doctor/appointments/{appointment_id}/approve", headers=doctor
        )

        cbc = await _catalog_id(
            api_client, doctor, "tests", "test_name", "Complete Blood Count"
        )
        lipid = await _catalog_id(
            api_client, doctor, "tests", "test_name", "Lipid Profile"
        )
        statin = await _catalog_id(
            api_client, doctor, "medications", "medication_name", "Atorvastatin 10mg"
        )

        consult = await api_client.post(
            f"{API}/doctor/appointments/{appointment_id}/consult",
            headers=doctor,
            json={
                "symptoms": "Chest pain",
                "treatment_plan": "Statins, follow up in a month",
                "test_ids": [cbc, lipid],
                "prescriptions": [
                    {
                        "medication_id": statin,
                        "dosage": "10mg nightly",
                        "duration_days": 10,
                        "quantity": 10,
                    }
                ],
                "consultation_fee": "100.00",
            },
        )
        assert consult.status_code == 201, consult.text
        outcome = consult.json()
        assert outcome["appointment_status"] == "Completed"
        assert Decimal(outcome["billing"]["grand_total"]) == Decimal("380.00")
        billing_id = outcome["billing"]["billing_id"]

        history = await api_client.get(
            f"{API}/patient/medical-history", headers=patient
        )
        [record] = history.json()
        assert len(record["tests"]) == 2
        assert record["prescriptions"][0]["medication_name"] == "Atorvastatin 10mg"

        bills = await api_client.get(f"{API}/patient/bills", headers=patient)
        [bill] = bills.json()
        assert bill["status"] == "Pending"
        assert bill["doctor_name"] == "Dr. John Smith"

        paid = await api_client.put(f"{API}/doctor/bills/{billing_id}/pay", headers=doctor)
        assert paid.status_code == 200
        assert paid.json()["status"] == "Paid"

        again = await api_client.put(
            f"{API}/doctor/bills/{billing_id}/pay", headers=doctor
        )
        assert again.status_code == 409
        assert again.json()["error"] == "INVALID_TRANSITION"

    @pytest.mark.asyncio
    async def test_deleted_doctor_loses_access_and_open_appointments(
        self, api_client, seeded
    ):
        admin = await _login(api_client, ADMIN)
        created = await api_client.post(
            f"{API}/admin/doctors",
            headers=admin,
            json={
                **DOCTOR,
                "full_name": "Dr. John Smith",
                "email": "john.smith@clinic.org",
            },
        )
        doctor_id = created.json()["doctor_id"]
        await api_client.post(
            f"{API}/users/register",
            json={
                **PATIENT,
                "full_name": "Jane Roe",
                "email": "jane.roe@clinic.org",
                "date_of_birth": "1990-04-12",
            },
        )
        doctor = await _login(api_client, DOCTOR)
        patient = await _login(api_client, PATIENT)
        await api_client.post(
            f"{API}/doctor/schedules",
            headers=doctor,
            json={"start_date": "2099-06-01T09:00:00", "end_date": "2099-06-01T17:00:00"},
        )
        requested = await api_client.post(
            f"{API}/patient/appointments",
            headers=patient,
            json={"doctor_id": doctor_id, "appointment_date": "2099-06-01T10:00:00"},
        )
        appointment_id = requested.json()["appointment_id"]

        deleted = await api_client.delete(f"{API}/admin/doctors/{doctor_id}", headers=admin)
        assert deleted.status_code == 200
        assert deleted.json()["success"] is True

        stale = await api_client.get(f"{API}/doctor/appointments", headers=doctor)
        assert stale.status_code == 401

        appointment = await api_client.get(
            f"{API}/admin/appointments/{appointment_id}", headers=admin
        )
        assert appointment.json()["status"] == "Canceled"

        profile = await api_client.get(f"{API}/admin/doctors/{doctor_id}", headers=admin)
        assert profile.json()["is_active"] is False
