# pta/services/scoping.py
"""Turns a caller's visibility over an entity into SQL predicates."""
from typing import Callable, Dict, Tuple

from sqlalchemy import false, select

from pta.core.context import RequestContext
from pta.core.errors import AuthorizationError
from pta.core.permissions import Entity, Visibility
from pta.models import Class, Expense, Parent, Payment, School, Student, UserProfile


def school_parent_ids(school_id: int):
    return select(Parent.id).where(Parent.school_id == school_id)


def own_parent_ids(context: RequestContext):
    return select(Parent.id).where(
        Parent.user_id == context.user_id,
        Parent.school_id == context.school_id,
    )


def own_class_ids(context: RequestContext):
    return select(Class.id).where(
        Class.teacher_id == context.user_id,
        Class.school_id == context.school_id,
    )


_SCOPES: Dict[Tuple[Entity, Visibility], Callable] = {
    (Entity.SCHOOL, Visibility.OWN_SCHOOL): lambda ctx: School.id == ctx.school_id,
    (Entity.USER_PROFILE, Visibility.SELF): lambda ctx: UserProfile.id == ctx.user_id,
    (Entity.USER_PROFILE, Visibility.SCHOOL): lambda ctx: UserProfile.school_id == ctx.school_id,
    (Entity.CLASS, Visibility.OWN_CLASSES): lambda ctx: Class.id.in_(own_class_ids(ctx)),
    (Entity.CLASS, Visibility.SCHOOL): lambda ctx: Class.school_id == ctx.school_id,
    (Entity.PARENT, Visibility.SELF): lambda ctx: Parent.id.in_(own_parent_ids(ctx)),
    (Entity.PARENT, Visibility.SCHOOL): lambda ctx: Parent.school_id == ctx.school_id,
    (Entity.STUDENT, Visibility.OWN_CHILDREN): lambda ctx: Student.parent_id.in_(own_parent_ids(ctx)),
    (Entity.STUDENT, Visibility.CLASS_STUDENTS): lambda ctx: Student.class_id.in_(own_class_ids(ctx)),
    (Entity.STUDENT, Visibility.SCHOOL): lambda ctx: Student.parent_id.in_(school_parent_ids(ctx.school_id)),
    (Entity.PAYMENT, Visibility.OWN_PAYMENTS): lambda ctx: Payment.parent_id.in_(own_parent_ids(ctx)),
    (Entity.PAYMENT, Visibility.SCHOOL): lambda ctx: Payment.parent_id.in_(school_parent_ids(ctx.school_id)),
    (Entity.EXPENSE, Visibility.SCHOOL): lambda ctx: Expense.school_id == ctx.school_id,
}

# Visibilities that can be evaluated without the caller belonging to a school
_SCHOOLLESS = {(Entity.USER_PROFILE, Visibility.SELF)}


def scope_statement(stmt, entity: Entity, visibility: Visibility, context: RequestContext):
    """Narrow ``stmt`` (a select over ``entity``) to the rows ``context`` may see"""
    key = (entity, visibility)
    clause = _SCOPES.get(key)
    if clause is None:
        raise AuthorizationError(f"No access rule for {entity.value} with visibility {visibility.value}")
    if context.school_id is None and key not in _SCHOOLLESS:
        return stmt.where(false())
    return stmt.where(clause(context))
