from datetime import datetime
from typing import Optional
from ..common.summaries import ORMModel


class SchoolResponse(ORMModel):
    id: int
    name: str
    address: Optional[str] = None
    created_at: datetime
