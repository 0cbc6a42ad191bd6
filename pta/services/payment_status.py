# pta/services/payment_status.py
"""
Writers of the paid flag.

``payment_status`` and ``payment_date`` on parents, and ``payment_status`` on
students, are only ever written from this module: by ``mark_parent_paid``
inside the payment transaction, and by the administrative override.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pta.core.context import RequestContext
from pta.core.errors import NotFoundError
from pta.core.logging import logger
from pta.core.permissions import require_roles
from pta.models import Parent, Student
from pta.models.base import utcnow
from pta.schemas.enums import UserRole
from pta.schemas.payments import PaymentStatusUpdate
from pta.services.base_service import BaseService


async def apply_status(db: AsyncSession, parent_ids: Iterable[int], paid: bool, at: datetime = None) -> int:
    """
    Set the paid flag on the given parents and all of their students.

    Must run inside the caller's transaction. Returns the number of students
    touched.
    """
    parent_ids = list(parent_ids)
    await db.execute(
        update(Parent)
        .where(Parent.id.in_(parent_ids))
        .values(payment_status=paid, payment_date=at if paid else None)
    )
    await db.execute(
        update(Student)
        .where(Student.parent_id.in_(parent_ids))
        .values(payment_status=paid)
    )
    result = await db.execute(
        select(func.count(Student.id)).where(Student.parent_id.in_(parent_ids))
    )
    return result.scalar_one()


async def mark_parent_paid(db: AsyncSession, parent_id: int, at: datetime) -> int:
    return await apply_status(db, [parent_id], True, at)


class PaymentStatusService(BaseService):
    """Administrative override of the paid flag, also used to open a new billing cycle"""

    async def set_status(self, context: RequestContext, data) -> Dict[str, Any]:
        require_roles(context, {UserRole.ADMIN})
        payload = self.validate(PaymentStatusUpdate, data)
        parent_ids: List[int] = list(dict.fromkeys(payload.parent_ids))

        stmt = select(Parent.id).where(
            Parent.id.in_(parent_ids),
            Parent.school_id == context.school_id,
        )
        found = set(await self.fetch_all(stmt))
        missing = [pid for pid in parent_ids if pid not in found]
        if missing:
            raise NotFoundError(
                f"Parent(s) not found: {', '.join(str(pid) for pid in missing)}",
                details={"parent_ids": missing},
            )

        async with self.transaction():
            students_updated = await apply_status(self.db, parent_ids, payload.payment_status, utcnow())

        logger.info(
            f"Payment status set to {payload.payment_status} for parents {parent_ids} "
            f"({students_updated} students) by {context.user_id}"
        )
        return {
            "parent_ids": parent_ids,
            "payment_status": payload.payment_status,
            "students_updated": students_updated,
        }
