from datetime import datetime
from typing import Optional
from ..common.summaries import ORMModel, SchoolSummary


class UserProfileResponse(ORMModel):
    id: str
    full_name: Optional[str] = None
    role: str
    school_id: Optional[int] = None
    created_at: datetime
    school: Optional[SchoolSummary] = None
