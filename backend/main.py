from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
from config import get_settings
from db.database import init_db
from api.routes.reviews import router as reviews_router
from api.routes.composition import router as composition_router
from api.routes.analysis import router as analysis_router
from api.routes.preferences import router as preferences_router
from services.session_store import SessionNotFoundError
from services.workflow import PaperNotFoundError, TransitionError, WorkflowBusyError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("scholarpulse")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting ScholarPulse API...")
    await init_db()
    logger.info("Database initialized.")
    yield
    # Shutdown
    logger.info("Shutting down ScholarPulse API...")


app = FastAPI(
    title="ScholarPulse API",
    description="AI-assisted literature review and academic writing",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(reviews_router)
app.include_router(composition_router)
app.include_router(analysis_router)
app.include_router(preferences_router)


@app.exception_handler(SessionNotFoundError)
@app.exception_handler(PaperNotFoundError)
async def not_found_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=404, content={"detail": str(exc).strip("'\"")})


@app.exception_handler(TransitionError)
@app.exception_handler(WorkflowBusyError)
async def conflict_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def failure_boundary(request: Request, exc: Exception):
    """Last line of defence: log it and offer a reload or a full storage reset."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Module failed to load.",
            "recovery": {
                "reload": "Retry the request or reload the application.",
                "reset": "DELETE /api/v1/preferences clears stored state.",
            },
        },
    )


@app.get("/health")
async def health():
    return {"status": "ok", "service": "scholarpulse"}
