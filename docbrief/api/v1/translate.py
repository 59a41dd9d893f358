from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from docbrief.api.dependencies import get_translation_service
from docbrief.models.summary import TranslateRequest, TranslateResponse, ErrorResponse
from docbrief.services.error_classifier import classify_error
from docbrief.services.translation import TranslationService
from docbrief.utils.logger import logger
from docbrief.utils.validators import validate_target_language

router = APIRouter(prefix="/api", tags=["translate"])


@router.post(
    "/translate",
    response_model=TranslateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def translate(
    request: TranslateRequest,
    service: TranslationService = Depends(get_translation_service),
):
    try:
        if not request.text:
            raise ValueError("Text and target language are required")
        language = validate_target_language(request.target_language)
    except ValueError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        translation = await service.translate(request.text, language)
        return TranslateResponse(translation=translation)
    except Exception as e:
        classified = classify_error(e)
        logger.error(f"Translation error ({classified.kind.value}): {e}")
        return JSONResponse(status_code=classified.http_status, content=classified.to_response())
