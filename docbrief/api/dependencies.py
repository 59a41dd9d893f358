from functools import lru_cache

from docbrief.core.config import settings
from docbrief.services.completion_client import GeminiCompletionClient, ChatCompletionClient
from docbrief.services.document_processor import DocumentProcessor
from docbrief.services.pipeline import SummarizationPipeline
from docbrief.services.summary import SummaryService
from docbrief.services.translation import TranslationService

# Dependency injections

@lru_cache()
def get_summary_service() -> SummaryService:
    return SummaryService(client=GeminiCompletionClient(settings), settings=settings)

@lru_cache()
def get_translation_service() -> TranslationService:
    return TranslationService(client=ChatCompletionClient.for_translation(settings), settings=settings)

def get_document_processor() -> DocumentProcessor:
    return DocumentProcessor(
        max_file_size=settings.MAX_FILE_SIZE,
        min_text_length=settings.MIN_TEXT_LENGTH,
    )

def get_summarization_pipeline() -> SummarizationPipeline:
    return SummarizationPipeline(
        processor=get_document_processor(),
        summary_service=get_summary_service(),
        translation_service=get_translation_service(),
        request_timeout=settings.REQUEST_TIMEOUT_SECONDS,
    )
