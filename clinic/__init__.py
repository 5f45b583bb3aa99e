# clinic/__init__.py
"""Clinic management API: appointments, schedules, records and billing."""
