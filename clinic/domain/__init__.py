# clinic/domain/__init__.py
"""
Status rules and multi-step workflows.

Engines live in their own modules (appointment_engine, schedule_engine,
consultation, billing_engine, registration) and are imported from there.
"""

from .errors import *
from .transitions import *
