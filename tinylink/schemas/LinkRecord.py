from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

class LinkRecord(BaseModel):
    # JSON keys are camelCase, Python attributes snake_case
    code: str
    url: str
    clicks: int = Field(0, ge=0)
    created_at: datetime = Field(..., alias="createdAt")
    last_clicked_at: Optional[datetime] = Field(None, alias="lastClickedAt")

    class Config:
        from_attributes = True
        populate_by_name = True
