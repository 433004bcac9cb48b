from typing import Literal

from pydantic import BaseModel

Severity = Literal["Critical", "Moderate", "Minor"]


class Assessment(BaseModel):
    damage_score: int
    damage_type: str
    severity: Severity
    description: str
    recommended_action: str
