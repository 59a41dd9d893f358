import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

import httpx
from google.api_core import exceptions as google_exceptions

from docbrief.core.config import Settings
from docbrief.core.exceptions import ErrorKind, RemoteError, MalformedResponseError
from docbrief.utils.logger import logger

TIMEOUT_STATUSES = {408, 504}
QUOTA_STATUSES = {402}
QUOTA_ERROR_CODES = {"insufficient_quota", "quota_exceeded", "billing_hard_limit_reached"}


@dataclass(frozen=True)
class GenerationConfig:
    temperature: float = 0.7
    max_output_tokens: int = 1000
    top_k: Optional[int] = None
    top_p: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


def kind_for_status(status: Optional[int], quota_exhausted: bool = False) -> ErrorKind:
    """Pick an error kind from an HTTP status and the provider's quota signal"""
    if quota_exhausted or status in QUOTA_STATUSES:
        return ErrorKind.QUOTA_EXCEEDED
    if status == 429:
        return ErrorKind.RATE_LIMITED
    if status in TIMEOUT_STATUSES:
        return ErrorKind.TIMEOUT
    return ErrorKind.UPSTREAM_ERROR


class CompletionClient(ABC):
    """Prompt in, text out. One request per call, no retries."""

    @abstractmethod
    async def complete(self, prompt: str, config: GenerationConfig) -> str:
        ...


class GeminiCompletionClient(CompletionClient):
    """Gemini generateContent through the google-generativeai SDK"""

    def __init__(self, settings: Settings, model=None):
        self.model_name = settings.GEMINI_MODEL
        self.timeout = settings.REMOTE_TIMEOUT_SECONDS

        if model is not None:
            self.model = model
        elif not settings.GEMINI_API_KEY:
            logger.warning("GEMINI_API_KEY not found. Summary service will not work properly.")
            self.model = None
        else:
            import google.generativeai as genai
            genai.configure(api_key=settings.GEMINI_API_KEY)
            self.model = genai.GenerativeModel(settings.GEMINI_MODEL)
            logger.info(f"Initialized Gemini client with model: {settings.GEMINI_MODEL}")

    async def complete(self, prompt: str, config: GenerationConfig) -> str:
        if self.model is None:
            raise RemoteError("Gemini API not configured", status=None, kind=ErrorKind.UPSTREAM_ERROR)

        try:
            response = await self.model.generate_content_async(
                prompt,
                generation_config=config.to_dict(),
                request_options={"timeout": self.timeout},
            )
        except google_exceptions.GoogleAPICallError as e:
            status = int(e.code) if isinstance(e.code, int) else None
            kind = ErrorKind.TIMEOUT if isinstance(e, google_exceptions.DeadlineExceeded) else kind_for_status(
                status, quota_exhausted=self._is_quota_failure(e)
            )
            logger.error(f"Gemini API error: {status} {str(e)[:500]}")
            raise RemoteError(f"Gemini API error: {status}", status=status, kind=kind, original_error=e) from e
        except asyncio.TimeoutError as e:
            logger.error("Gemini API call timed out")
            raise RemoteError("Gemini API timeout", status=None, kind=ErrorKind.TIMEOUT, original_error=e) from e

        return self._decode_response(response)

    @staticmethod
    def _is_quota_failure(error: google_exceptions.GoogleAPICallError) -> bool:
        # RESOURCE_EXHAUSTED covers both throttling and exhausted quota; only
        # the latter carries a google.rpc.QuotaFailure detail
        for detail in getattr(error, "details", None) or []:
            if isinstance(detail, dict):
                if str(detail.get("@type", "")).endswith("QuotaFailure"):
                    return True
            elif type(detail).__name__ == "QuotaFailure":
                return True
        return False

    @staticmethod
    def _decode_response(response) -> str:
        """Return the first candidate's text or fail on any other shape"""
        candidates = getattr(response, "candidates", None)
        if not candidates:
            raise MalformedResponseError("Invalid response structure from Gemini: no candidates")

        content = getattr(candidates[0], "content", None)
        parts = getattr(content, "parts", None)
        if not parts:
            raise MalformedResponseError("Invalid response structure from Gemini: no content parts")

        text = getattr(parts[0], "text", None)
        if not isinstance(text, str) or not text:
            raise MalformedResponseError("Invalid response structure from Gemini: empty text")
        return text


class ChatCompletionClient(CompletionClient):
    """OpenAI-compatible /chat/completions endpoint over httpx"""

    def __init__(
        self,
        api_key: str,
        url: str,
        model: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def for_translation(cls, settings: Settings, transport: httpx.AsyncBaseTransport = None) -> "ChatCompletionClient":
        return cls(
            api_key=settings.TRANSLATION_API_KEY,
            url=settings.TRANSLATION_API_URL,
            model=settings.TRANSLATION_MODEL,
            timeout=settings.REMOTE_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def complete(self, prompt: str, config: GenerationConfig) -> str:
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": config.max_output_tokens,
            "temperature": config.temperature,
        }
        if config.top_p is not None:
            payload["top_p"] = config.top_p

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"API Timeout: {self.url}")
            raise RemoteError("Chat completion timeout", status=None, kind=ErrorKind.TIMEOUT, original_error=e) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            # transport failures, undecodable bodies, redirect loops, bad URL
            logger.error(f"API request error: {self.url}: {type(e).__name__}: {e}")
            raise RemoteError("Chat completion request failed", status=None, original_error=e) from e

        if response.is_error:
            error_body = response.text
            logger.error(f"API error: {response.status_code} {error_body[:500]}")
            kind = kind_for_status(response.status_code, quota_exhausted=self._is_quota_error(response))
            raise RemoteError(f"Chat completion error: {response.status_code}", status=response.status_code, kind=kind)

        try:
            result = response.json()
        except ValueError as e:
            raise MalformedResponseError("Chat completion response is not JSON", original_error=e) from e

        return self._decode_response(result)

    @staticmethod
    def _is_quota_error(response: httpx.Response) -> bool:
        try:
            error = response.json().get("error")
        except (ValueError, AttributeError):
            return False
        if not isinstance(error, dict):
            return False
        return error.get("code") in QUOTA_ERROR_CODES or error.get("type") in QUOTA_ERROR_CODES

    @staticmethod
    def _decode_response(result: Any) -> str:
        """Return choices[0].message.content or fail on any other shape"""
        if not isinstance(result, dict):
            raise MalformedResponseError("Chat completion response is not an object")
        choices = result.get("choices")
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise MalformedResponseError("Chat completion response has no choices")
        message = choices[0].get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content:
            raise MalformedResponseError("Chat completion response has no message content")
        return content
