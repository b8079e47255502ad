"""
Pydantic schemas for the audit trail.
"""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator


class AuditEntryResponse(BaseModel):
    id: int
    event_type: str
    account_id: str | None
    actor_id: str | None
    details: dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("details", mode="before")
    @classmethod
    def parse_details(cls, value):
        # Stored as a JSON string
        if isinstance(value, str):
            return json.loads(value)
        return value
