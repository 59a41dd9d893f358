from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from docbrief.api.dependencies import get_summarization_pipeline
from docbrief.core.config import settings
from docbrief.models.document import SourceDocument
from docbrief.models.summary import SummaryResponse, ErrorResponse
from docbrief.services.error_classifier import classify_error
from docbrief.services.pipeline import SummarizationPipeline
from docbrief.utils.logger import logger
from docbrief.utils.validators import validate_file_size, validate_target_language

router = APIRouter(prefix="/api", tags=["summary"])


@router.post(
    "/summarize",
    response_model=SummaryResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def summarize(
    file: Optional[UploadFile] = File(None),
    target_language: Optional[str] = Form(None),
    pipeline: SummarizationPipeline = Depends(get_summarization_pipeline),
):
    if file is None:
        return JSONResponse(status_code=400, content={"error": "No file provided"})

    language = None
    if target_language and target_language.strip():
        try:
            language = validate_target_language(target_language)
        except ValueError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        # Reject on the declared size before buffering the body
        if file.size is not None:
            validate_file_size(file.size, settings.MAX_FILE_SIZE)

        data = await file.read()
        document = SourceDocument(
            data=data,
            content_type=file.content_type,
            size_bytes=file.size if file.size is not None else len(data),
            filename=file.filename or "upload",
        )
        result = await pipeline.run(document, target_language=language)
        return SummaryResponse(summary=result.summary, translation=result.translation)

    except Exception as e:
        classified = classify_error(e)
        logger.error(f"Summarization error ({classified.kind.value}): {e}")
        return JSONResponse(status_code=classified.http_status, content=classified.to_response())
