"""Request payloads for training endpoints (camelCase or snake_case keys)."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wordmem_app.models import WordError


class CreateSessionPayload(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True, str_strip_whitespace=True)

    session_name: str = Field(alias='sessionName', min_length=1, max_length=255)
    word_ids: List[int] = Field(alias='wordIds', min_length=1)
    settings: Optional[Dict[str, Any]] = None


class StatusPayload(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    status: str
    completed_at: Optional[str] = Field(default=None, alias='completedAt')


class ResultItem(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    word_id: int = Field(alias='wordId')
    is_correct: bool = Field(alias='isCorrect')
    user_input: Optional[str] = Field(default='', alias='userInput')
    error_type: Optional[str] = Field(default=WordError.TYPE_SPELLING, alias='errorType')
    time_spent: float = Field(default=0, alias='timeSpent', ge=0)

    @field_validator('error_type')
    @classmethod
    def known_error_type(cls, value: Optional[str]) -> str:
        if not value:
            return WordError.TYPE_SPELLING
        if value not in WordError.TYPES:
            raise ValueError(f"errorType must be one of {', '.join(WordError.TYPES)}")
        return value

    @field_validator('time_spent', mode='before')
    @classmethod
    def null_time_is_zero(cls, value):
        return 0 if value is None else value


class ResultsPayload(BaseModel):
    model_config = ConfigDict(extra='ignore')

    results: List[ResultItem]
