"""
FastAPI Application Entry Point

Integrates:
  - PDF text extraction endpoint
  - Study endpoints (questions, essays, summaries)
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from api import pdf_router, study_router
from config import Config
from inference import InvocationError
from infra import get_config

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"{Config.APP_NAME} starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    try:
        infra = get_config()
        logger.info(f"AI Provider: {infra.ai_provider}")
        logger.info(f"AI Model override: {infra.ai_model or '-'}")
        if not infra.api_key():
            logger.warning(f"No API key configured for provider '{infra.ai_provider}'")
    except InvocationError as e:
        logger.error(f"AI configuration invalid: {e}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info(f"{Config.APP_NAME} shutting down...")


# Create FastAPI app
app = FastAPI(
    title=Config.APP_NAME,
    description="Turns study material into exam questions, essay prompts and essay grading",
    version=Config.APP_VERSION,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Include routers
app.include_router(pdf_router)
app.include_router(study_router)


# Health check endpoints
@app.get("/health/live")
async def health_live():
    """Live health check (Kubernetes liveness probe)."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness health check: AI configuration loads and has a credential."""
    try:
        infra = get_config()
    except InvocationError as e:
        return JSONResponse(status_code=503, content={"status": "not_ready", "reason": str(e)})

    if not infra.api_key():
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": f"No API key for provider '{infra.ai_provider}'"},
        )
    return {"status": "ready"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": Config.APP_NAME,
        "version": Config.APP_VERSION,
        "status": "running",
        "endpoints": {
            "pdf_extract": "POST /pdf/extract",
            "questions_from_pdf": "POST /questions/from-pdf",
            "questions_from_topic": "POST /questions/from-topic",
            "questions_parse": "POST /questions/parse",
            "questions_adjust_difficulty": "POST /questions/adjust-difficulty",
            "essay_topics": "POST /essays/topics",
            "essay_grade": "POST /essays/grade",
            "study_summarize": "POST /study/summarize",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


@app.get("/config/info")
async def config_info():
    """Get non-sensitive configuration info."""
    try:
        ai = get_config().describe()
    except InvocationError as e:
        ai = {"error": str(e)}
    return {
        "environment": Config.ENVIRONMENT,
        "app_port": Config.APP_PORT,
        "ai": ai,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.APP_PORT,
        reload=Config.ENVIRONMENT == "development",
    )
