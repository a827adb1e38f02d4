import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from curriculum import CurriculumCatalog
from db import SessionLocal, init_db
from errors import ProblemServiceError
from gemini_client import GeminiClient
from settings import get_settings
from store import ProblemStore

# Routers
from routers.curriculum import router as curriculum_router
from routers.health import router as health_router
from routers.history import router as history_router
from routers.problems import router as problems_router

settings = get_settings()

logger = logging.getLogger("math-practice")
logging.basicConfig(level=settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    app.state.model_client.close()


app = FastAPI(title="Primary Maths Practice API", lifespan=lifespan)

# Allow calls from the Next.js dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_db()
app.state.catalog = CurriculumCatalog(settings.curriculum_path)
app.state.model_client = GeminiClient.from_settings(settings)
app.state.store = ProblemStore(SessionLocal)


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(ProblemServiceError)
async def handle_service_error(request: Request, exc: ProblemServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed (%s): %s", request.method, request.url.path, exc.kind, exc)
    return _failure(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    where = ".".join(str(p) for p in errors[0].get("loc", ())) if errors else "body"
    return _failure(400, f"Invalid request: {where}")


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _failure(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _failure(500, "Internal server error")


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(problems_router)  # /api/math-problem, /api/math-problem/submit
app.include_router(curriculum_router)  # /api/curriculum-topics
app.include_router(history_router)  # /api/problem-history
app.include_router(health_router)  # /health/db, /health/curriculum
