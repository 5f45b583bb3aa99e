# clinic/domain/billing_engine.py
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from common import get_app_logger
from clinic.db.models import Billing, BillingStatus
from clinic.db.repositories import Repository
from .transitions import BILLING_TRANSITIONS, ensure_transition

logger = get_app_logger(__name__)


class BillingEngine:
    """Pending -> Paid, once. Amounts are never recomputed."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.billings = Repository(db, Billing, "Billing record")

    async def mark_paid(
        self, billing_id: int, *, doctor_id: Optional[int] = None
    ) -> Billing:
        """
        Raises:
            NotFoundError: Unknown bill, or not issued by ``doctor_id``
            InvalidTransitionError: Bill is already Paid
        """
        scope = []
        if doctor_id is not None:
            scope.append(Billing.doctor_id == doctor_id)
        billing = await self.billings.get_or_raise(billing_id, *scope, for_update=True)

        ensure_transition(
            "Billing record", billing.status, BillingStatus.PAID, BILLING_TRANSITIONS
        )
        billing.status = BillingStatus.PAID
        await self.db.flush()

        logger.info("Bill marked paid", billing_id=billing_id)
        return billing


__all__ = ["BillingEngine"]
