"""Request payloads for word endpoints."""
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WordFields(BaseModel):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)

    word: str = Field(min_length=1, max_length=255)
    definition: Optional[str] = None
    example_sentence: Optional[str] = None
    pronunciation_us: Optional[str] = None
    pronunciation_uk: Optional[str] = None

    @field_validator('word')
    @classmethod
    def lower_case_word(cls, value: str) -> str:
        return value.lower()


class CreateWordPayload(WordFields):
    wordbook_id: int = Field(gt=0)


class BatchWordsPayload(BaseModel):
    model_config = ConfigDict(extra='ignore')

    wordbook_id: int = Field(gt=0)
    words: List[Union[WordFields, str]] = Field(min_length=1)

    def entries(self) -> List[dict]:
        rows = []
        for item in self.words:
            if isinstance(item, str):
                text = item.strip().lower()
                if text:
                    rows.append({'word': text})
            else:
                rows.append(item.model_dump(exclude_none=True))
        return rows


class DownloadAudioPayload(BaseModel):
    model_config = ConfigDict(extra='ignore')

    accent: Optional[str] = 'us'
