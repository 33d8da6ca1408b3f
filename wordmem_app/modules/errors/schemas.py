"""Request payloads for error review endpoints."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateRoundPayload(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    session_id: int = Field(alias='sessionId', gt=0)
    word_ids: List[int] = Field(alias='wordIds', min_length=1)
    round_number: Optional[int] = Field(default=None, alias='roundNumber', gt=0)


class RoundStatusPayload(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    status: str
    completed_at: Optional[str] = Field(default=None, alias='completedAt')


class GenerateRoundPayload(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    session_id: int = Field(alias='sessionId', gt=0)
    round_number: Optional[int] = Field(default=None, alias='roundNumber', gt=0)
    word_count: Optional[int] = Field(default=None, alias='wordCount', gt=0, strict=True)
