"""Request payloads for wordbook endpoints."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WordbookPayload(BaseModel):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = ''
