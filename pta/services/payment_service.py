# pta/services/payment_service.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from pta.core.config import settings
from pta.core.context import RequestContext
from pta.core.errors import AuthorizationError, ValidationError
from pta.core.logging import logger
from pta.core.permissions import Entity, require_known_role, require_write
from pta.models import Parent, Payment
from pta.models.base import utcnow
from pta.schemas.enums import PAYMENT_CATEGORIES, PaymentCategory
from pta.schemas.payments import PaymentCreate
from pta.services.base_service import CRUDService
from pta.services.payment_status import mark_parent_paid


def default_amount(category: PaymentCategory) -> Decimal:
    if category is PaymentCategory.MEMBERSHIP:
        return settings.DEFAULT_MEMBERSHIP_AMOUNT
    return PAYMENT_CATEGORIES[category]["default_amount"]


def payment_categories() -> List[Dict[str, Any]]:
    """The category catalogue offered to payment forms"""
    return [
        {
            "value": category.value,
            "label": info["label"],
            "description": info["description"],
            "default_amount": default_amount(category),
        }
        for category, info in PAYMENT_CATEGORIES.items()
    ]


class PaymentService(CRUDService):
    """
    Payments are append-only.

    Recording one marks the parent, and every student of that parent, as
    paid in the same transaction. Payments are never updated or deleted.
    """
    model = Payment
    entity = Entity.PAYMENT
    create_schema = PaymentCreate
    filter_fields = ("parent_id", "category", "payment_method")
    label = "Payment"

    def list_options(self):
        return (
            selectinload(Payment.parent).selectinload(Parent.school),
            selectinload(Payment.created_by_user),
        )

    def detail_options(self):
        return (
            selectinload(Payment.parent).options(
                selectinload(Parent.school),
                selectinload(Parent.students),
            ),
            selectinload(Payment.created_by_user),
        )

    def ordering(self):
        return (Payment.created_at.desc(), Payment.id.desc())

    def apply_filters(self, stmt, filters: Dict[str, Any]):
        school_id = filters.pop("school_id", None)
        if school_id is not None:
            stmt = stmt.where(Payment.parent_id.in_(
                select(Parent.id).where(Parent.school_id == school_id)
            ))
        start_date: Optional[datetime] = filters.pop("start_date", None)
        end_date: Optional[datetime] = filters.pop("end_date", None)
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must not be after end_date", fields=["start_date", "end_date"])
        if start_date is not None:
            stmt = stmt.where(Payment.created_at >= start_date)
        if end_date is not None:
            stmt = stmt.where(Payment.created_at <= end_date)
        for key in ("category", "payment_method"):
            if filters.get(key) is not None:
                filters[key] = getattr(filters[key], "value", filters[key])
        return super().apply_filters(stmt, filters)

    async def create(self, context: RequestContext, data) -> Payment:
        require_write(context, self.entity)
        payload = self.validate(self.create_schema, data)
        amount = payload.amount if payload.amount is not None else default_amount(payload.category)
        if amount <= 0:
            raise ValidationError(
                f"No default amount for category '{payload.category.value}'; amount is required",
                fields=["amount"],
            )

        async with self.transaction():
            # Concurrent payments for one parent serialise on this row lock
            parent = await self.fetch_one(
                select(Parent).where(Parent.id == payload.parent_id).with_for_update()
            )
            if parent is None or parent.school_id != context.school_id:
                raise ValidationError("Parent not found in this school", fields=["parent_id"])

            now = utcnow()
            payment = Payment(
                parent_id=parent.id,
                amount=amount,
                category=payload.category.value,
                payment_method=payload.payment_method.value,
                notes=payload.notes,
                receipt_url=payload.receipt_url,
                created_by=context.user_id,
                created_at=now,
            )
            self.db.add(payment)
            await self.db.flush()
            payment_id = payment.id
            students_updated = await mark_parent_paid(self.db, parent.id, now)

        logger.info(
            f"Payment {payment_id} of {amount} recorded for parent {payload.parent_id} "
            f"by {context.user_id}; parent and {students_updated} students marked paid"
        )
        return await self.reload(payment_id)

    async def update(self, context: RequestContext, id: Any, data):
        require_known_role(context)
        raise AuthorizationError("Payments are append-only records")

    async def delete(self, context: RequestContext, id: Any) -> None:
        require_known_role(context)
        raise AuthorizationError("Payments are append-only records")
