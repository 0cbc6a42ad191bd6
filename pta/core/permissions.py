# pta/core/permissions.py
"""
Role-scoping table.

This is the single place that decides what each role may see and change.
Services ask it for a ``Visibility`` and turn that into SQL predicates
(see ``pta.services.scoping``); routes never branch on role strings.
"""
from enum import Enum
from typing import Dict, Iterable, Optional, Set
import logging

from pta.core.context import RequestContext
from pta.core.errors import AuthorizationError, UnknownRoleError
from pta.schemas.enums import UserRole

logger = logging.getLogger(__name__)


class Entity(str, Enum):
    SCHOOL = "school"
    USER_PROFILE = "user_profile"
    CLASS = "class"
    PARENT = "parent"
    STUDENT = "student"
    PAYMENT = "payment"
    EXPENSE = "expense"


class Visibility(str, Enum):
    NONE = "none"
    # The caller's own row (own profile, own parent record)
    SELF = "self"
    # The school row the caller belongs to
    OWN_SCHOOL = "own_school"
    # Students whose parent record is linked to the caller
    OWN_CHILDREN = "own_children"
    # Payments made by the parent record linked to the caller
    OWN_PAYMENTS = "own_payments"
    # Classes taught by the caller
    OWN_CLASSES = "own_classes"
    # Students enrolled in classes taught by the caller
    CLASS_STUDENTS = "class_students"
    # Every row of the caller's school
    SCHOOL = "school"


STAFF_ROLES = frozenset({UserRole.TREASURER, UserRole.PRINCIPAL, UserRole.ADMIN})


def _staff_scope() -> Dict[Entity, Visibility]:
    scope = {entity: Visibility.SCHOOL for entity in Entity}
    scope[Entity.SCHOOL] = Visibility.OWN_SCHOOL
    return scope


class RoleScopes:
    """Fixed role -> (entity -> visibility) mapping"""
    SCOPES: Dict[UserRole, Dict[Entity, Visibility]] = {
        UserRole.PARENT: {
            Entity.SCHOOL: Visibility.OWN_SCHOOL,
            Entity.USER_PROFILE: Visibility.SELF,
            Entity.PARENT: Visibility.SELF,
            Entity.STUDENT: Visibility.OWN_CHILDREN,
            Entity.PAYMENT: Visibility.OWN_PAYMENTS,
        },
        UserRole.TEACHER: {
            Entity.SCHOOL: Visibility.OWN_SCHOOL,
            Entity.USER_PROFILE: Visibility.SELF,
            Entity.STUDENT: Visibility.CLASS_STUDENTS,
            Entity.CLASS: Visibility.OWN_CLASSES,
        },
        UserRole.TREASURER: _staff_scope(),
        UserRole.PRINCIPAL: _staff_scope(),
        UserRole.ADMIN: _staff_scope(),
    }

    WRITERS: Dict[Entity, Set[UserRole]] = {
        Entity.SCHOOL: {UserRole.ADMIN},
        Entity.USER_PROFILE: {UserRole.ADMIN},
        Entity.CLASS: {UserRole.PRINCIPAL, UserRole.ADMIN},
        Entity.PARENT: {UserRole.TREASURER, UserRole.PRINCIPAL, UserRole.ADMIN},
        Entity.STUDENT: {UserRole.TREASURER, UserRole.PRINCIPAL, UserRole.ADMIN},
        Entity.PAYMENT: {UserRole.TREASURER, UserRole.ADMIN},
        Entity.EXPENSE: {UserRole.TREASURER, UserRole.PRINCIPAL, UserRole.ADMIN},
    }

    @classmethod
    def visibility(cls, role: UserRole, entity: Entity) -> Visibility:
        return cls.SCOPES.get(role, {}).get(entity, Visibility.NONE)

    @classmethod
    def can_write(cls, role: UserRole, entity: Entity) -> bool:
        return role in cls.WRITERS.get(entity, set())


def require_known_role(context: RequestContext) -> None:
    if not context.is_known:
        logger.warning(f"Rejected request from user {context.user_id} with unknown role")
        raise UnknownRoleError()


def require_visibility(context: RequestContext, entity: Entity) -> Visibility:
    """Return the caller's visibility over ``entity`` or raise if it has none"""
    require_known_role(context)
    visibility = RoleScopes.visibility(context.role, entity)
    if visibility is Visibility.NONE:
        logger.warning(
            f"Permission denied: user {context.user_id} with role {context.role.value} "
            f"attempted to read {entity.value} records"
        )
        raise AuthorizationError(f"Role '{context.role.value}' cannot view {entity.value} records")
    return visibility


def require_write(context: RequestContext, entity: Entity) -> None:
    require_known_role(context)
    if not RoleScopes.can_write(context.role, entity):
        logger.warning(
            f"Permission denied: user {context.user_id} with role {context.role.value} "
            f"attempted to modify {entity.value} records"
        )
        raise AuthorizationError(f"Role '{context.role.value}' cannot modify {entity.value} records")


def require_roles(context: RequestContext, roles: Iterable[UserRole]) -> None:
    require_known_role(context)
    if context.role not in set(roles):
        raise AuthorizationError("Operation not permitted")


def require_same_school(context: RequestContext, school_id: Optional[int]) -> None:
    """Writes are confined to the caller's own school"""
    if school_id is None or school_id != context.school_id:
        raise AuthorizationError("Records outside your school cannot be modified")
