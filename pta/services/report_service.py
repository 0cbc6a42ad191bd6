# pta/services/report_service.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from pta.core.context import RequestContext
from pta.core.errors import AuthorizationError, NotFoundError, ValidationError
from pta.core.logging import log_function_call, logger
from pta.core.permissions import STAFF_ROLES, require_known_role, require_roles
from pta.models import Class, Expense, Parent, Payment, Student, UserProfile
from pta.schemas.enums import UserRole
from pta.services.base_service import BaseService


def _money(value) -> float:
    return round(float(value or 0), 2)


class ReportService(BaseService):
    """Read-only aggregates for the dashboards; every report is confined to the caller's school"""

    def _school(self, context: RequestContext, school_id: Optional[int]) -> int:
        school_id = context.school_id if school_id is None else school_id
        if school_id is None or school_id != context.school_id:
            raise NotFoundError(f"School with ID {school_id} not found")
        return school_id

    async def _count(self, stmt) -> int:
        rows = await self.fetch_rows(stmt)
        return int(rows[0][0] or 0) if rows else 0

    @log_function_call(logger)
    async def school_summary(self, context: RequestContext, school_id: Optional[int] = None) -> Dict[str, Any]:
        require_roles(context, STAFF_ROLES)
        school_id = self._school(context, school_id)
        parent_ids = select(Parent.id).where(Parent.school_id == school_id)

        total_parents = await self._count(select(func.count(Parent.id)).where(Parent.school_id == school_id))
        paid_parents = await self._count(
            select(func.count(Parent.id)).where(Parent.school_id == school_id, Parent.payment_status.is_(True))
        )
        total_students = await self._count(select(func.count(Student.id)).where(Student.parent_id.in_(parent_ids)))
        paid_students = await self._count(
            select(func.count(Student.id)).where(Student.parent_id.in_(parent_ids), Student.payment_status.is_(True))
        )
        total_classes = await self._count(select(func.count(Class.id)).where(Class.school_id == school_id))

        payment_rows = await self.fetch_rows(
            select(func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.parent_id.in_(parent_ids))
        )
        total_payments, total_amount = payment_rows[0]
        total_amount = _money(total_amount)
        total_expenses = _money((await self.fetch_rows(
            select(func.coalesce(func.sum(Expense.amount), 0)).where(Expense.school_id == school_id)
        ))[0][0])

        return {
            "school_id": school_id,
            "total_parents": total_parents,
            "paid_parents": paid_parents,
            "payment_rate": round(paid_parents / total_parents * 100, 2) if total_parents else 0.0,
            "total_students": total_students,
            "paid_students": paid_students,
            "total_classes": total_classes,
            "total_payments": int(total_payments or 0),
            "total_amount": total_amount,
            "average_payment": round(total_amount / total_payments, 2) if total_payments else 0.0,
            "total_expenses": total_expenses,
            "net_balance": round(total_amount - total_expenses, 2),
        }

    async def teacher_report(self, context: RequestContext, teacher_id: str) -> List[Class]:
        """A teacher's classes with every student and the student's parent status"""
        require_known_role(context)
        if context.role is UserRole.TEACHER:
            if teacher_id != context.user_id:
                raise AuthorizationError("Teachers can only view their own report")
        elif context.role in STAFF_ROLES:
            teacher = await self.fetch_one(select(UserProfile).where(
                UserProfile.id == teacher_id,
                UserProfile.school_id == context.school_id,
            ))
            if teacher is None or UserRole.parse(teacher.role) is not UserRole.TEACHER:
                raise NotFoundError(f"Teacher with ID {teacher_id} not found")
        else:
            raise AuthorizationError(f"Role '{context.role.value}' cannot view teacher reports")

        stmt = (
            select(Class)
            .options(selectinload(Class.students).selectinload(Student.parent))
            .where(Class.teacher_id == teacher_id, Class.school_id == context.school_id)
            .order_by(Class.name, Class.id)
            .execution_options(populate_existing=True)
        )
        return await self.fetch_all(stmt)

    @log_function_call(logger)
    async def payment_analytics(
        self,
        context: RequestContext,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        require_roles(context, STAFF_ROLES)
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must not be after end_date", fields=["start_date", "end_date"])

        conditions = [Payment.parent_id.in_(select(Parent.id).where(Parent.school_id == context.school_id))]
        if start_date is not None:
            conditions.append(Payment.created_at >= start_date)
        if end_date is not None:
            conditions.append(Payment.created_at <= end_date)

        async def breakdown(column) -> Dict[str, Dict[str, Any]]:
            rows = await self.fetch_rows(
                select(column, func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
                .where(*conditions)
                .group_by(column)
                .order_by(column)
            )
            return {key: {"count": int(count), "total": _money(total)} for key, count, total in rows}

        by_category = await breakdown(Payment.category)
        by_method = await breakdown(Payment.payment_method)
        return {
            "start_date": start_date,
            "end_date": end_date,
            "payment_count": sum(item["count"] for item in by_category.values()),
            "total_amount": round(sum(item["total"] for item in by_category.values()), 2),
            "by_category": by_category,
            "by_method": by_method,
        }

    async def unpaid_parents(self, context: RequestContext) -> List[Parent]:
        require_roles(context, STAFF_ROLES)
        stmt = (
            select(Parent)
            .options(
                selectinload(Parent.school),
                selectinload(Parent.students).selectinload(Student.class_),
            )
            .where(Parent.school_id == context.school_id, Parent.payment_status.is_(False))
            .order_by(Parent.name, Parent.id)
            .execution_options(populate_existing=True)
        )
        return await self.fetch_all(stmt)

    async def classes_without_teachers(self, context: RequestContext) -> List[Class]:
        require_roles(context, STAFF_ROLES)
        stmt = (
            select(Class)
            .options(selectinload(Class.school), selectinload(Class.teacher), selectinload(Class.students))
            .where(Class.school_id == context.school_id, Class.teacher_id.is_(None))
            .order_by(Class.name, Class.id)
        )
        return await self.fetch_all(stmt)
