from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

class SummaryResponse(BaseModel):
    summary: str
    translation: Optional[str] = None

class TranslateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    target_language: Optional[str] = Field(None, alias="targetLanguage")

class TranslateResponse(BaseModel):
    translation: str

class ErrorResponse(BaseModel):
    error: str
