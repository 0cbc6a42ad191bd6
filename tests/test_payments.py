import asyncio
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError

from pta.core.context import RequestContext
from pta.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
    UnknownRoleError,
    ValidationError,
)
from pta.models import Parent, Payment, School, Student, UserProfile
from pta.services import payment_service as payment_module
from pta.services.parent_service import ParentService
from pta.services.payment_service import PaymentService, payment_categories
from pta.services.payment_status import PaymentStatusService
from pta.services.student_service import StudentService

pytestmark = pytest.mark.anyio


async def payment_count(db) -> int:
    return (await db.execute(select(func.count(Payment.id)))).scalar_one()


async def status_of(db, parent_id):
    parent = (await db.execute(
        select(Parent).where(Parent.id == parent_id).execution_options(populate_existing=True)
    )).scalar_one()
    students = (await db.execute(
        select(Student).where(Student.parent_id == parent_id).execution_options(populate_existing=True)
    )).scalars().all()
    return parent, students


async def test_payment_marks_parent_and_children_paid(db, world):
    service = PaymentService(db)

    payment = await service.create(world.ctx.treasurer, {
        "parent_id": world.jane.id,
        "amount": 250,
        "payment_method": "cash",
    })

    assert payment.amount == Decimal("250")
    assert payment.category == "membership"
    assert payment.created_by == world.treasurer.id
    assert payment.parent.school.name == "Lincoln Elementary"

    parent, students = await status_of(db, world.jane.id)
    assert parent.payment_status is True
    assert parent.payment_date is not None
    assert len(students) == 2
    assert all(s.payment_status for s in students)

    # Nobody else is touched
    other, other_students = await status_of(db, world.john.id)
    assert other.payment_status is False
    assert not any(s.payment_status for s in other_students)


async def test_negative_amount_creates_nothing(db, world):
    service = PaymentService(db)

    with pytest.raises(ValidationError) as exc:
        await service.create(world.ctx.treasurer, {
            "parent_id": world.jane.id,
            "amount": -50,
            "payment_method": "cash",
        })

    assert "amount" in exc.value.fields
    assert await payment_count(db) == 0
    parent, students = await status_of(db, world.jane.id)
    assert parent.payment_status is False
    assert not any(s.payment_status for s in students)


async def test_unknown_payment_method_is_rejected(db, world):
    with pytest.raises(ValidationError) as exc:
        await PaymentService(db).create(world.ctx.treasurer, {
            "parent_id": world.jane.id,
            "amount": 100,
            "payment_method": "bogus",
        })
    assert exc.value.fields == ["payment_method"]
    assert await payment_count(db) == 0


async def test_parent_from_other_school_is_rejected(db, world):
    with pytest.raises(ValidationError) as exc:
        await PaymentService(db).create(world.ctx.treasurer, {"parent_id": world.remote.id, "amount": 100})
    assert exc.value.fields == ["parent_id"]
    assert await payment_count(db) == 0


async def test_missing_parent_is_rejected(db, world):
    with pytest.raises(ValidationError):
        await PaymentService(db).create(world.ctx.treasurer, {"parent_id": 9999, "amount": 100})


async def test_store_failure_rolls_back_everything(db, world, monkeypatch):
    async def broken(*args, **kwargs):
        raise OperationalError("UPDATE parents", {}, Exception("database is locked"))

    monkeypatch.setattr(payment_module, "mark_parent_paid", broken)

    with pytest.raises(StoreUnavailableError):
        await PaymentService(db).create(world.ctx.treasurer, {"parent_id": world.jane.id, "amount": 250})

    assert await payment_count(db) == 0
    parent, _ = await status_of(db, world.jane.id)
    assert parent.payment_status is False


async def test_constraint_failure_is_a_conflict(db, world, monkeypatch):
    async def broken(*args, **kwargs):
        raise IntegrityError("UPDATE students", {}, Exception("constraint failed"))

    monkeypatch.setattr(payment_module, "mark_parent_paid", broken)

    with pytest.raises(ConflictError):
        await PaymentService(db).create(world.ctx.treasurer, {"parent_id": world.jane.id, "amount": 250})
    assert await payment_count(db) == 0


async def test_unreachable_store_is_reported_as_unavailable(unreachable_db):
    context = RequestContext.build("treasurer-lincoln", "treasurer", 1)

    with pytest.raises(StoreUnavailableError):
        await ParentService(unreachable_db).get_all(context)

    with pytest.raises(StoreUnavailableError):
        await PaymentService(unreachable_db).create(context, {"parent_id": 1, "amount": 250})


async def test_only_treasurer_and_admin_record_payments(db, world):
    service = PaymentService(db)
    for context in (world.ctx.principal, world.ctx.teacher, world.ctx.parent):
        with pytest.raises(AuthorizationError):
            await service.create(context, {"parent_id": world.jane.id, "amount": 250})
    with pytest.raises(UnknownRoleError):
        await service.create(world.ctx.unknown, {"parent_id": world.jane.id, "amount": 250})

    await service.create(world.ctx.admin, {"parent_id": world.jane.id, "amount": 250})
    assert await payment_count(db) == 1


async def test_repeat_payments_are_all_kept(db, world):
    service = PaymentService(db)
    first = await service.create(world.ctx.treasurer, {"parent_id": world.jane.id, "amount": 250})
    second = await service.create(world.ctx.treasurer, {
        "parent_id": world.jane.id,
        "amount": 100,
        "category": "event",
        "payment_method": "gcash",
    })

    payments = await service.get_all(world.ctx.treasurer, parent_id=world.jane.id)
    assert [p.id for p in payments] == [second.id, first.id]


async def test_concurrent_payments_for_one_parent(file_session_factory):
    async with file_session_factory() as seed:
        school = School(name="Lincoln Elementary")
        seed.add(school)
        await seed.flush()
        seed.add(UserProfile(id="treasurer-lincoln", role="treasurer", school_id=school.id))
        parent = Parent(name="Jane Doe", school_id=school.id)
        seed.add(parent)
        await seed.flush()
        seed.add_all([
            Student(name="Amy Doe", parent_id=parent.id),
            Student(name="Ben Doe", parent_id=parent.id),
        ])
        await seed.commit()
        school_id, parent_id = school.id, parent.id

    context = RequestContext.build("treasurer-lincoln", "treasurer", school_id)

    async def pay(amount):
        async with file_session_factory() as session:
            return await PaymentService(session).create(context, {"parent_id": parent_id, "amount": amount})

    first, second = await asyncio.gather(pay(250), pay(100))
    assert first.id != second.id

    async with file_session_factory() as check:
        assert await payment_count(check) == 2
        parent, students = await status_of(check, parent_id)
        assert parent.payment_status is True
        assert [s.payment_status for s in students] == [True, True]


async def test_default_amount_comes_from_category(db, world):
    service = PaymentService(db)
    membership = await service.create(world.ctx.treasurer, {"parent_id": world.jane.id})
    uniform = await service.create(world.ctx.treasurer, {"parent_id": world.john.id, "category": "uniform"})

    assert membership.amount == Decimal("250")
    assert uniform.amount == Decimal("500")


async def test_category_without_default_needs_an_amount(db, world):
    with pytest.raises(ValidationError) as exc:
        await PaymentService(db).create(world.ctx.treasurer, {"parent_id": world.jane.id, "category": "donation"})
    assert exc.value.fields == ["amount"]
    assert await payment_count(db) == 0


async def test_payments_are_append_only(db, world):
    service = PaymentService(db)
    payment = await service.create(world.ctx.treasurer, {"parent_id": world.jane.id, "amount": 250})

    with pytest.raises(AuthorizationError):
        await service.update(world.ctx.admin, payment.id, {"amount": 1})
    with pytest.raises(AuthorizationError):
        await service.delete(world.ctx.admin, payment.id)
    assert await payment_count(db) == 1


async def test_parent_sees_only_own_payments(db, world):
    service = PaymentService(db)
    own = await service.create(world.ctx.treasurer, {"parent_id": world.jane.id, "amount": 250})
    other = await service.create(world.ctx.treasurer, {"parent_id": world.john.id, "amount": 250})

    visible = await service.get_all(world.ctx.parent)
    assert [p.id for p in visible] == [own.id]
    with pytest.raises(NotFoundError):
        await service.get_by_id(world.ctx.parent, other.id)
    with pytest.raises(AuthorizationError):
        await service.get_all(world.ctx.teacher)


async def test_date_range_must_be_ordered(db, world):
    from datetime import datetime

    with pytest.raises(ValidationError):
        await PaymentService(db).get_all(
            world.ctx.treasurer,
            start_date=datetime(2026, 2, 1),
            end_date=datetime(2026, 1, 1),
        )


async def test_new_student_inherits_parent_status(db, world):
    await PaymentService(db).create(world.ctx.treasurer, {"parent_id": world.jane.id, "amount": 250})

    student = await StudentService(db).create(world.ctx.treasurer, {
        "name": "Cleo Doe",
        "parent_id": world.jane.id,
    })
    assert student.payment_status is True

    unpaid = await StudentService(db).create(world.ctx.treasurer, {
        "name": "Dan Roe",
        "parent_id": world.john.id,
    })
    assert unpaid.payment_status is False


async def test_reassigned_student_takes_new_parent_status(db, world):
    await PaymentService(db).create(world.ctx.treasurer, {"parent_id": world.jane.id, "amount": 250})

    moved = await StudentService(db).update(world.ctx.treasurer, world.amy.id, {"parent_id": world.john.id})
    assert moved.parent_id == world.john.id
    assert moved.payment_status is False


async def test_status_fields_cannot_be_written_directly(db, world):
    with pytest.raises(ValidationError) as exc:
        await ParentService(db).update(world.ctx.admin, world.jane.id, {"payment_status": True})
    assert exc.value.fields == ["payment_status"]


async def test_override_resets_billing_cycle(db, world):
    await PaymentService(db).create(world.ctx.treasurer, {"parent_id": world.jane.id, "amount": 250})

    result = await PaymentStatusService(db).set_status(world.ctx.admin, {
        "parent_ids": [world.jane.id, world.john.id],
        "payment_status": False,
    })

    assert result == {
        "parent_ids": [world.jane.id, world.john.id],
        "payment_status": False,
        "students_updated": 3,
    }
    parent, students = await status_of(db, world.jane.id)
    assert parent.payment_status is False
    assert parent.payment_date is None
    assert not any(s.payment_status for s in students)
    # History is untouched
    assert await payment_count(db) == 1


async def test_override_can_mark_paid(db, world):
    await PaymentStatusService(db).set_status(world.ctx.admin, {
        "parent_ids": [world.john.id],
        "payment_status": True,
    })
    parent, students = await status_of(db, world.john.id)
    assert parent.payment_status is True
    assert parent.payment_date is not None
    assert all(s.payment_status for s in students)


async def test_override_is_admin_only(db, world):
    with pytest.raises(AuthorizationError):
        await PaymentStatusService(db).set_status(world.ctx.treasurer, {
            "parent_ids": [world.jane.id],
            "payment_status": False,
        })


async def test_override_rejects_parents_of_other_schools(db, world):
    with pytest.raises(NotFoundError) as exc:
        await PaymentStatusService(db).set_status(world.ctx.admin, {
            "parent_ids": [world.jane.id, world.remote.id],
            "payment_status": True,
        })
    assert exc.value.details == {"parent_ids": [world.remote.id]}
    parent, _ = await status_of(db, world.jane.id)
    assert parent.payment_status is False


def test_category_catalogue():
    categories = {c["value"]: c for c in payment_categories()}
    assert set(categories) == {
        "membership", "fundraising", "donation", "event", "supplies", "uniform", "other",
    }
    assert categories["membership"]["default_amount"] == Decimal("250")
    assert categories["membership"]["label"] == "PTA Membership"
