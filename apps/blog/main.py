"""
Blog Service API

CRUD endpoints for blog posts stored in MongoDB.
Every response uses the envelope {"success": bool, "data"/"count" | "error"}.
"""
import os
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from apps.shared.cors import setup_cors
from apps.shared.database import create_client, get_database
from apps.shared.errors import (
    SERVER_ERROR_MESSAGE,
    StorageError,
    log_and_sanitize_error,
    setup_error_handlers,
)
from apps.shared.swagger_ui import render_swagger_ui_html, resolve_server_url
from apps.blog.models import (
    COLLECTION_NAME,
    BlogStore,
    InvalidBlogId,
    MongoBlogStore,
    UnconfiguredBlogStore,
    parse_blog_id,
)
from apps.blog.schemas import (
    BLOG_EXAMPLE,
    BlogEnvelope,
    BlogListEnvelope,
    BlogResponse,
    DeletedEnvelope,
    ErrorEnvelope,
    validate_blog,
    validate_blog_update,
)

logger = logging.getLogger(__name__)
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

PORT = int(os.getenv("PORT", "5005"))
SWAGGER_SERVER_URL = os.getenv("SWAGGER_SERVER_URL", f"http://localhost:{PORT}")
STATIC_DIR = os.getenv(
    "STATIC_DIR", os.path.join(os.path.dirname(__file__), "..", "..", "public")
)

DOCS_URL = "/api-docs"
OPENAPI_URL = "/api-docs/openapi.json"

BLOG_NOT_FOUND = "Blog not found"

NOT_FOUND_RESPONSE = {404: {"model": ErrorEnvelope, "description": BLOG_NOT_FOUND}}
BAD_REQUEST_RESPONSE = {400: {"model": ErrorEnvelope, "description": "Bad Request (Invalid data provided)"}}
INVALID_ID_RESPONSE = {400: {"model": ErrorEnvelope, "description": "Invalid ID"}}

CREATE_EXAMPLE = {key: BLOG_EXAMPLE[key] for key in ("title", "content", "author")}


def get_blog_store(request: Request) -> BlogStore:
    """Storage handle created at startup, see create_app()."""
    return request.app.state.blog_store


def build_blog_store() -> BlogStore:
    """Connect to MongoDB when MONGO_URI is set; otherwise persistence is disabled."""
    client = create_client()
    if client is None:
        return UnconfiguredBlogStore()
    return MongoBlogStore(get_database(client)[COLLECTION_NAME], client=client)


def _blog_id(blog_id: str):
    try:
        return parse_blog_id(blog_id)
    except InvalidBlogId as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _storage_failure(error: StorageError, context: str) -> HTTPException:
    message, _ = log_and_sanitize_error(error, context)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


# Router setup
router = APIRouter(prefix="/api/blogs", tags=["Blogs"])


@router.get(
    "",
    response_model=BlogListEnvelope,
    summary="Get all blogs",
    responses={500: {"model": ErrorEnvelope, "description": SERVER_ERROR_MESSAGE}},
)
@router.get("/", response_model=BlogListEnvelope, include_in_schema=False)
def list_blogs(store: BlogStore = Depends(get_blog_store)):
    """Successfully retrieved all blogs"""
    try:
        documents = store.find_all()
    except StorageError as e:
        log_and_sanitize_error(e, "Blog listing")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR_MESSAGE
        )

    blogs = [BlogResponse.from_document(document) for document in documents]
    return BlogListEnvelope(count=len(blogs), data=blogs)


@router.get(
    "/{blog_id}",
    response_model=BlogEnvelope,
    summary="Get a single blog by ID",
    responses={**NOT_FOUND_RESPONSE, **INVALID_ID_RESPONSE},
)
def get_blog(blog_id: str, store: BlogStore = Depends(get_blog_store)):
    """Get a single blog by its id."""
    object_id = _blog_id(blog_id)
    try:
        document = store.find_by_id(object_id)
    except StorageError as e:
        raise _storage_failure(e, "Blog lookup")

    if not document:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BLOG_NOT_FOUND)
    return BlogEnvelope(data=BlogResponse.from_document(document))


@router.post(
    "",
    response_model=BlogEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new blog",
    responses=BAD_REQUEST_RESPONSE,
)
@router.post(
    "/",
    response_model=BlogEnvelope,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
def create_blog(
    payload: Optional[dict[str, Any]] = Body(None, examples=[CREATE_EXAMPLE]),
    store: BlogStore = Depends(get_blog_store),
):
    """
    Create a new blog.
    title, content and author are required; createdAt defaults to now.
    """
    validation = validate_blog(payload or {})
    if not validation.is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation.message)

    try:
        document = store.create(validation.record.to_document())
    except StorageError as e:
        raise _storage_failure(e, "Blog creation")

    logger.info(f"Created blog {document['_id']}")
    return BlogEnvelope(data=BlogResponse.from_document(document))


@router.put(
    "/{blog_id}",
    response_model=BlogEnvelope,
    summary="Update a blog",
    responses={**NOT_FOUND_RESPONSE, **BAD_REQUEST_RESPONSE},
)
def update_blog(
    blog_id: str,
    payload: Optional[dict[str, Any]] = Body(None, examples=[{"content": "Updated content"}]),
    store: BlogStore = Depends(get_blog_store),
):
    """
    Update an existing blog.
    Only provided fields change; the updated blog is returned.
    """
    object_id = _blog_id(blog_id)
    validation = validate_blog_update(payload or {})
    if not validation.is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation.message)

    try:
        document = store.update_by_id(object_id, validation.record.to_changes())
    except StorageError as e:
        raise _storage_failure(e, "Blog update")

    if not document:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BLOG_NOT_FOUND)

    logger.info(f"Updated blog {blog_id}")
    return BlogEnvelope(data=BlogResponse.from_document(document))


@router.delete(
    "/{blog_id}",
    response_model=DeletedEnvelope,
    summary="Delete a blog",
    responses={**NOT_FOUND_RESPONSE, **INVALID_ID_RESPONSE},
)
def delete_blog(blog_id: str, store: BlogStore = Depends(get_blog_store)):
    """Delete a blog."""
    object_id = _blog_id(blog_id)
    try:
        document = store.delete_by_id(object_id)
    except StorageError as e:
        raise _storage_failure(e, "Blog deletion")

    if not document:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BLOG_NOT_FOUND)

    logger.info(f"Deleted blog {blog_id}")
    return DeletedEnvelope()


service_router = APIRouter(prefix="/api")


@service_router.get("/health")
def health(store: BlogStore = Depends(get_blog_store)):
    """Health check endpoint - returns service status and database connectivity"""
    database = store.database_status()
    return {
        "status": "ok" if database == "connected" else "degraded",
        "service": "blog",
        "database": database,
    }


def setup_docs(app: FastAPI) -> None:
    """Serve the OpenAPI document and Swagger UI under DOCS_URL."""

    @app.get(OPENAPI_URL, include_in_schema=False)
    def openapi_document(request: Request):
        server_url = resolve_server_url(
            request.headers.get("x-forwarded-proto") or request.url.scheme,
            request.headers.get("x-forwarded-host") or request.headers.get("host"),
            SWAGGER_SERVER_URL,
        )
        return JSONResponse({**app.openapi(), "servers": [{"url": server_url}]})

    @app.get(DOCS_URL, include_in_schema=False)
    @app.get(f"{DOCS_URL}/", include_in_schema=False)
    def swagger_ui():
        return render_swagger_ui_html(openapi_url=OPENAPI_URL, title=app.title)


def create_app(store: Optional[BlogStore] = None, static_dir: Optional[str] = STATIC_DIR) -> FastAPI:
    """
    Build the Blog Service app.

    The storage handle is injected here and shared by all requests through
    app.state; pass one in to run without a live database.
    """
    if store is None:
        store = build_blog_store()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.blog_store.close()

    app = FastAPI(
        title="Blog Service",
        version="1.0.0",
        description="CRUD API for blog posts backed by MongoDB",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.blog_store = store

    # Setup CORS from shared configuration
    setup_cors(app)
    setup_error_handlers(app)

    app.include_router(router)
    app.include_router(service_router)
    setup_docs(app)

    # Static folder last so it never shadows API routes
    if static_dir and os.path.isdir(static_dir):
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning(f"Static directory {static_dir} not found; not serving static files")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
