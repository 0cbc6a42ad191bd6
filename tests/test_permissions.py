import pytest

from pta.core.context import RequestContext
from pta.core.errors import AuthorizationError, UnknownRoleError
from pta.core.permissions import (
    Entity,
    RoleScopes,
    Visibility,
    require_same_school,
    require_visibility,
    require_write,
)
from pta.schemas.enums import UserRole


def ctx(role, school_id=1):
    return RequestContext.build("user-1", role, school_id)


@pytest.mark.parametrize("raw, expected", [
    ("parent", UserRole.PARENT),
    (" Treasurer ", UserRole.TREASURER),
    (UserRole.ADMIN, UserRole.ADMIN),
    ("janitor", UserRole.UNKNOWN),
    (None, UserRole.UNKNOWN),
])
def test_role_parsing_is_closed(raw, expected):
    assert UserRole.parse(raw) is expected


def test_parent_visibility():
    assert RoleScopes.visibility(UserRole.PARENT, Entity.STUDENT) is Visibility.OWN_CHILDREN
    assert RoleScopes.visibility(UserRole.PARENT, Entity.PAYMENT) is Visibility.OWN_PAYMENTS
    assert RoleScopes.visibility(UserRole.PARENT, Entity.CLASS) is Visibility.NONE
    assert RoleScopes.visibility(UserRole.PARENT, Entity.EXPENSE) is Visibility.NONE


def test_teacher_visibility():
    assert RoleScopes.visibility(UserRole.TEACHER, Entity.STUDENT) is Visibility.CLASS_STUDENTS
    assert RoleScopes.visibility(UserRole.TEACHER, Entity.CLASS) is Visibility.OWN_CLASSES
    assert RoleScopes.visibility(UserRole.TEACHER, Entity.PARENT) is Visibility.NONE
    assert RoleScopes.visibility(UserRole.TEACHER, Entity.PAYMENT) is Visibility.NONE


@pytest.mark.parametrize("role", [UserRole.TREASURER, UserRole.PRINCIPAL, UserRole.ADMIN])
def test_staff_see_whole_school(role):
    for entity in Entity:
        expected = Visibility.OWN_SCHOOL if entity is Entity.SCHOOL else Visibility.SCHOOL
        assert RoleScopes.visibility(role, entity) is expected


def test_unknown_role_is_rejected_everywhere():
    for entity in Entity:
        with pytest.raises(UnknownRoleError) as exc:
            require_visibility(ctx("janitor"), entity)
        assert exc.value.error_code == "UNKNOWN_ROLE"
        assert exc.value.status_code == 403
        with pytest.raises(UnknownRoleError):
            require_write(ctx("janitor"), entity)


def test_missing_visibility_raises_authorization_error():
    with pytest.raises(AuthorizationError) as exc:
        require_visibility(ctx(UserRole.TEACHER), Entity.PAYMENT)
    assert exc.value.error_code == "PERMISSION_DENIED"


@pytest.mark.parametrize("role, entity, allowed", [
    (UserRole.ADMIN, Entity.SCHOOL, True),
    (UserRole.PRINCIPAL, Entity.SCHOOL, False),
    (UserRole.PRINCIPAL, Entity.CLASS, True),
    (UserRole.TREASURER, Entity.CLASS, False),
    (UserRole.TREASURER, Entity.PAYMENT, True),
    (UserRole.PRINCIPAL, Entity.PAYMENT, False),
    (UserRole.TEACHER, Entity.STUDENT, False),
    (UserRole.PARENT, Entity.PARENT, False),
    (UserRole.TREASURER, Entity.EXPENSE, True),
])
def test_write_table(role, entity, allowed):
    if allowed:
        require_write(ctx(role), entity)
    else:
        with pytest.raises(AuthorizationError):
            require_write(ctx(role), entity)


def test_writes_confined_to_own_school():
    require_same_school(ctx(UserRole.ADMIN, school_id=1), 1)
    with pytest.raises(AuthorizationError):
        require_same_school(ctx(UserRole.ADMIN, school_id=1), 2)
    with pytest.raises(AuthorizationError):
        require_same_school(ctx(UserRole.ADMIN, school_id=None), None)
