"""Read-only HTTP surface over stored mall records."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Generator

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import __version__
from .database import get_session, init_database
from .env import get_db_path
from .logger import get_logger
from .storage import get_mall, list_malls

logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    init_database(get_db_path())
    yield


app = FastAPI(
    title="mallmatch",
    description="Brand matches per mall directory",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_db() -> Generator[Session, None, None]:
    session = get_session(get_db_path())
    try:
        yield session
    finally:
        session.close()


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.get("/malls")
def list_mall_records(db: Session = Depends(get_db)):
    """List every stored mall with its product count."""
    return {"items": list_malls(db)}


@app.get("/malls/{mall_key}")
def get_mall_record(mall_key: str, db: Session = Depends(get_db)):
    """
    Get one mall record by its key (name|city|state).

    Returns 404 when the mall has no stored record.
    """
    record = get_mall(db, mall_key)
    if record is None:
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return record.to_dict()
