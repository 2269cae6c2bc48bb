import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import settings
from database import initialize_database
from library import Library, StoreUnavailableError
from utils.validators import TextValidator

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema creation and demo seeding happen once at startup, not per request
    initialize_database(seed=settings.seed_demo_data)
    logger.info("Database ready, API listening on port %s", settings.api_port)
    yield


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

# --- CORS ---
# Without it the browser blocks requests coming from the UI origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Models ---
class BookOut(BaseModel):
    id: int
    title: str
    author: str
    createdAt: str
    createdBy: str


class BookIn(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    createdBy: Optional[str] = None


class BookCreated(BaseModel):
    id: int


# --- Dependencies ---
def get_library() -> Library:
    """A fresh store handle for each request."""
    return Library()


def _require_fields(payload: BookIn) -> None:
    if not (TextValidator.validate_title(payload.title) and TextValidator.validate_author(payload.author)):
        raise HTTPException(status_code=400, detail="Missing fields")


# --- Error handling ---
@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Datenbank nicht erreichbar"})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())})


# --- Health ---
@app.get("/health")
def health(library: Library = Depends(get_library)):
    """Lightweight health endpoint with a quick database probe."""
    try:
        total = library.count_books()
        db_ok = True
    except StoreUnavailableError:
        total = None
        db_ok = False
    return {"status": "healthy" if db_ok else "degraded", "db": db_ok, "total_books": total}


# --- Books ---
@app.get("/api/books", response_model=List[BookOut])
def list_books(
    q: Optional[str] = Query(None, description="Substring of the title"),
    date_from: Optional[str] = Query(None, alias="dateFrom", description="Earliest creation day (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, alias="dateTo", description="Latest creation day (YYYY-MM-DD)"),
    library: Library = Depends(get_library),
):
    books = library.list_books(q=q, date_from=date_from, date_to=date_to)
    return [b.to_dict() for b in books]


@app.get("/api/books/{book_id}", response_model=BookOut)
def get_book(book_id: int, library: Library = Depends(get_library)):
    book = library.get_book(book_id)
    if not book:
        raise HTTPException(status_code=404, detail="Not found")
    return book.to_dict()


@app.post("/api/books", response_model=BookCreated)
def create_book(payload: BookIn, library: Library = Depends(get_library)):
    _require_fields(payload)
    book_id = library.add_book(payload.title, payload.author, payload.createdBy)
    logger.info("Created book %s", book_id)
    return {"id": book_id}


@app.put("/api/books/{book_id}", status_code=204)
def update_book(book_id: int, payload: BookIn, library: Library = Depends(get_library)):
    _require_fields(payload)
    if not library.update_book(book_id, payload.title, payload.author, payload.createdBy):
        # No existence check is exposed to clients; the update is a silent no-op
        logger.warning("Update for unknown book id %s matched no row", book_id)
    return Response(status_code=204)


@app.delete("/api/books/{book_id}", status_code=204)
def delete_book(book_id: int, library: Library = Depends(get_library)):
    library.remove_book(book_id)
    return Response(status_code=204)
