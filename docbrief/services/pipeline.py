import asyncio
from dataclasses import dataclass
from typing import Optional

from docbrief.core.exceptions import DocBriefError, RequestTimeoutError
from docbrief.models.document import SourceDocument, FinalSummary
from docbrief.services.document_processor import DocumentProcessor
from docbrief.services.summary import SummaryService
from docbrief.services.translation import TranslationService, TRANSLATION_UNAVAILABLE
from docbrief.utils.logger import logger


@dataclass(frozen=True)
class SummaryResult:
    summary: str
    translation: Optional[str] = None
    translation_failed: bool = False


def _consume_result(task: asyncio.Future) -> None:
    # Marks the exception retrieved when the waiter already gave up
    if not task.cancelled():
        task.exception()


class SummarizationPipeline:
    """Upload in, summary (and optional translation) out.

    Extraction failures surface before any remote call. Summarization
    failures propagate. A translation failure after a good summary degrades
    to the summary plus ``TRANSLATION_UNAVAILABLE``.
    """

    def __init__(
        self,
        processor: DocumentProcessor,
        summary_service: SummaryService,
        translation_service: Optional[TranslationService] = None,
        request_timeout: Optional[float] = None,
    ):
        self.processor = processor
        self.summary_service = summary_service
        self.translation_service = translation_service
        self.request_timeout = request_timeout

    async def run(self, document: SourceDocument, target_language: Optional[str] = None) -> SummaryResult:
        logger.info("Starting file processing...")
        extracted = self.processor.process(document)
        summary = await self._summarize_with_deadline(extracted.content)

        if not target_language:
            return SummaryResult(summary=summary.text)

        translation = await self.translate_or_fallback(summary.text, target_language)
        return SummaryResult(
            summary=summary.text,
            translation=translation,
            translation_failed=translation == TRANSLATION_UNAVAILABLE,
        )

    async def translate_or_fallback(self, text: str, target_language: str) -> str:
        if self.translation_service is None:
            logger.warning("Translation requested but no translation service is configured")
            return TRANSLATION_UNAVAILABLE
        try:
            return await self.translation_service.translate(text, target_language)
        except DocBriefError as e:
            logger.warning(f"Translation failed, returning summary only: {e}")
            return TRANSLATION_UNAVAILABLE

    async def _summarize_with_deadline(self, text: str) -> FinalSummary:
        if self.request_timeout is None:
            return await self.summary_service.summarize(text)

        task = asyncio.ensure_future(self.summary_service.summarize(text))
        task.add_done_callback(_consume_result)
        try:
            # shield: the deadline stops the wait, not the in-flight call
            return await asyncio.wait_for(asyncio.shield(task), self.request_timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Summarization exceeded {self.request_timeout}s deadline")
            raise RequestTimeoutError("Summarization timed out", original_error=e) from e
