import datetime as dt
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session

from app.api import debts
from app.core.config import API_PREFIX, CORS_ORIGINS
from app.core.errors import LedgerError
from app.core.security import ensure_default_user
from app.database import create_db_and_tables, engine
from app.logger_config import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    with Session(engine) as session:
        ensure_default_user(session)
    yield


app = FastAPI(title="Budget Manager API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"{request.method} {request.url.path}")
    return await call_next(request)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    if exc.status_code >= 500:
        logger.exception(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    )
    logger.info(f"{request.method} {request.url.path} -> 400: {message}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": message},
    )


api_router = APIRouter(prefix=API_PREFIX)


@api_router.get("/health")
def health():
    return {
        "status": "OK",
        "message": "Budget Manager API is running",
        "timestamp": dt.datetime.utcnow().isoformat(),
    }


api_router.include_router(debts.router)
app.include_router(api_router)
