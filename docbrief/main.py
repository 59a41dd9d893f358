from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import settings first
from docbrief.core.config import settings

# Then import logger - this avoids circular imports
from docbrief.utils.logger import logger

# Then import other modules
from docbrief.api.v1 import summary, translate

# Initialize FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Document summarization with optional translation",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(summary.router)
app.include_router(translate.router)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same {"error"} shape as every other 400"""
    logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    message = "Text and target language are required" if request.url.path == "/api/translate" else "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})

@app.on_event("startup")
async def startup_event():
    """Log configuration on startup"""
    logger.info(f"Starting {settings.APP_NAME} in {settings.APP_ENV} mode")

    if not settings.is_gemini_configured():
        logger.warning("⚠️  GEMINI_API_KEY missing - summarization requests will fail")
    if not settings.is_translation_configured():
        logger.warning("⚠️  TRANSLATION_API_KEY missing - translations will be reported as unavailable")

@app.get("/")
async def root():
    return {
        "message": f"{settings.APP_NAME} is running!",
        "version": "1.0.0",
        "environment": settings.APP_ENV,
        "endpoints": {
            "summarize": "/api/summarize",
            "translate": "/api/translate",
            "docs": "/docs" if settings.DEBUG else "disabled"
        }
    }

@app.get("/health")
async def health_check():
    services_status = {
        "gemini": settings.is_gemini_configured(),
        "translation": settings.is_translation_configured(),
    }

    return {
        "status": "healthy" if all(services_status.values()) else "degraded",
        "message": f"{settings.APP_NAME} is running",
        "environment": settings.APP_ENV,
        "services": services_status
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "docbrief.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
