from typing import Any, Dict
from sqlalchemy.orm import selectinload

from pta.core.context import RequestContext
from pta.core.errors import ValidationError
from pta.core.permissions import Entity
from pta.models import Expense
from pta.schemas.expenses import ExpenseCreate, ExpenseUpdate
from pta.services.base_service import CRUDService


class ExpenseService(CRUDService):
    model = Expense
    entity = Entity.EXPENSE
    create_schema = ExpenseCreate
    update_schema = ExpenseUpdate
    filter_fields = ("school_id", "category")
    label = "Expense"

    def list_options(self):
        return (selectinload(Expense.school), selectinload(Expense.created_by_user))

    def ordering(self):
        return (Expense.created_at.desc(), Expense.id.desc())

    async def prepare_create(self, context: RequestContext, payload: ExpenseCreate) -> Dict[str, Any]:
        values = payload.model_dump(exclude={"school_id"})
        values["school_id"] = self.school_for_write(context, payload.school_id)
        values["created_by"] = context.user_id
        return values

    async def prepare_update(self, context: RequestContext, obj: Expense, changes: Dict[str, Any]) -> Dict[str, Any]:
        for key in ("description", "amount", "category"):
            if key in changes and changes[key] is None:
                raise ValidationError(f"{key} cannot be empty", fields=[key])
        return changes
