from typing import Any, Dict

from pta.core.context import RequestContext
from pta.core.permissions import Entity
from pta.models import School
from pta.schemas.school import SchoolCreate, SchoolUpdate
from pta.services.base_service import CRUDService


class SchoolService(CRUDService):
    """Schools are the tenancy root; every caller sees only its own school"""
    model = School
    entity = Entity.SCHOOL
    create_schema = SchoolCreate
    update_schema = SchoolUpdate
    label = "School"

    async def prepare_create(self, context: RequestContext, payload: SchoolCreate) -> Dict[str, Any]:
        return {"name": payload.name, "address": payload.address}
