from typing import Iterable, Optional

from docbrief.core.config import settings
from docbrief.core.exceptions import PayloadTooLargeError, UnsupportedFormatError

def validate_file_size(file_size: int, max_size: int = None) -> None:
    max_size = max_size or settings.MAX_FILE_SIZE
    if file_size > max_size:
        raise PayloadTooLargeError(file_size, max_size)

def validate_content_type(content_type: Optional[str], allowed: Iterable[str] = None) -> str:
    allowed = list(allowed or settings.supported_content_types)
    if content_type not in allowed:
        raise UnsupportedFormatError(content_type)
    return content_type

def validate_target_language(language: Optional[str]) -> str:
    language = (language or "").strip()
    if not language:
        raise ValueError("Target language is required")
    if len(language) > 32:
        raise ValueError("Target language is too long. Maximum length is 32 characters.")
    return language
