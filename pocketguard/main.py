import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from pocketguard.config import settings
from pocketguard.core.database import init_db, AsyncSessionLocal
from pocketguard.core.errors import AppError
from pocketguard.core.seed import seed_quiz_questions
from pocketguard.api.router import api_router
from pocketguard.services.budget import BudgetService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

tags_metadata = [
    {
        "name": "Auth",
        "description": "Registration, session login and profile settings.",
    },
    {
        "name": "Budgets",
        "description": "Monthly budgets with live per-category spend.",
    },
    {
        "name": "Expenses",
        "description": "Append-only expense ledger. UPI expenses pass through the budget gate.",
    },
    {
        "name": "UPI",
        "description": "Simulated UPI payments and the block switch.",
    },
    {
        "name": "Quiz",
        "description": "Financial-literacy quiz; passing unblocks UPI.",
    },
    {
        "name": "Bank",
        "description": "Mock bank balance debited by UPI payments.",
    },
    {
        "name": "System",
        "description": "Service endpoints.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    async with AsyncSessionLocal() as session:
        await seed_quiz_questions(session)
    logger.info("%s %s started", settings.PROJECT_NAME, settings.VERSION)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
### PocketGuard API

Budgeting for teenagers: monthly category budgets, an expense ledger, and UPI
payments that get blocked on overspend until a money quiz is passed.

    """,
    version=settings.VERSION,
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
)


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
        field = ".".join(loc)
        parts.append(f"{field}: {err['msg']}" if field else err["msg"])
    return "Validation error: " + "; ".join(parts)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"message": _format_validation_error(exc)})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)},
                        headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


app.include_router(api_router, prefix=settings.API_PREFIX)

@app.get("/health", tags=["System"])
def health():
    return {
        "status": "operational",
        "mode": "frozen_time" if settings.MOCK_NOW else "live",
        "system_time": BudgetService.get_system_time()
    }
