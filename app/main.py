from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .aws.storage import S3ImageProvider
from .core.config import settings
from .core.errors import ServiceError
from .core.logging_setup import setup_logging
from .routers.images import router as images_router
from .routers.links import router as links_router
from .services.metadata import USER_AGENT, LinkPreviewer

logger = logging.getLogger(__name__)

tags_metadata = [
    {
        "name": "images",
        "description": (
            "Endpoints to upload, list and delete images.\n\n"
            "- Upload via multipart, filed under a folder picked by `type`.\n"
            "- List newest first, optionally by folder.\n"
            "- Delete by file id or by public URL."
        ),
    },
    {
        "name": "links",
        "description": "Link previews (title, description, image) for rich-link rendering.",
    },
]


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=settings.fetch_timeout,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT, "Accept": "text/html,*/*;q=0.8"},
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Serving on %s:%s (%s)", settings.host, settings.port, settings.environment)
    previewer = LinkPreviewer(_http_client())
    app.state.previewer = previewer
    yield
    await previewer.client.aclose()


app = FastAPI(
    title="Image CDN Service",
    description=(
        "How to Use:\n\n"
        "1) Upload an image: POST /upload with the file in the `image` field and an optional `type` (e.g. product).\n"
        "2) List images: GET /images with optional `type` and `limit`.\n"
        "3) Delete: DELETE /delete/{file_id}, or POST /delete with `{\"imageUrl\": ...}`.\n"
        "4) Link preview: POST /fetchUrl with `{\"url\": ...}`."
    ),
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.state.provider = S3ImageProvider()


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.get("/health", tags=["system"])
def health():
    return {"status": "ok", "environment": settings.environment}


app.include_router(images_router)
app.include_router(links_router)


def run() -> None:
    """Start the API under uvicorn, which drains connections on SIGTERM."""
    import uvicorn

    setup_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
