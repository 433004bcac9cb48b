from datetime import datetime

from pydantic import BaseModel


class ReportResponse(BaseModel):
    id: int
    damage_score: int | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ScanResponse(BaseModel):
    success: bool
    damage_score: int
    auto_reported: bool
