from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from starlette.concurrency import run_in_threadpool
from typing import Optional
import logging
from ..core.config import settings
from ..core.errors import (
    DeleteFailed,
    InvalidInput,
    InvalidResourceUrl,
    ListFailed,
    MissingFile,
    NotFound,
    UploadFailed,
)
from ..core.interfaces import StorageProvider
from ..core.models import DeleteByUrlRequest, DeleteResponse, ListResponse, UploadResponse
from ..services.paths import DEFAULT_CATEGORY, known_folder, resolve, resolve_folder, storage_name
from .deps import get_provider

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


def _parse_limit(raw: Optional[str]) -> int:
    """Positive integer limit, anything else falls back to the default."""
    try:
        value = int(raw) if raw is not None else 0
    except ValueError:
        value = 0
    return value if value > 0 else settings.default_list_limit


@router.post(
    "/upload",
    response_model=UploadResponse,
    summary="Upload an image",
    description=(
        "Multipart form-data upload.\n\n"
        "Fields:\n"
        "- `image` (required): the file.\n"
        "- `type` (optional, query or form): category deciding the folder "
        "(product, brand, doctor, banner, blog, reference-book, disease, category, user). "
        "Anything else goes to /general."
    ),
)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    type_query: Optional[str] = Query(None, alias="type"),
    type_form: Optional[str] = Form(None, alias="type"),
    provider: StorageProvider = Depends(get_provider),
):
    if image is None:
        raise MissingFile("No file provided")
    data = await image.read()
    if not data:
        raise MissingFile("No file provided")

    folder_type = type_query or type_form or DEFAULT_CATEGORY
    folder = resolve_folder(folder_type)
    file_name = storage_name(folder_type, image.filename or "upload")

    try:
        stored = await run_in_threadpool(
            provider.upload, file=data, file_name=file_name, folder=folder
        )
    except Exception as e:
        logger.exception("Upload of %s failed", file_name)
        raise UploadFailed("Upload failed", details=str(e)) from e

    return UploadResponse(
        message="Image uploaded successfully",
        image_url=stored.url,
        file_id=stored.file_id,
        file_path=stored.file_path,
        folder=folder,
        type=folder_type,
    )


@router.get(
    "/images",
    response_model=ListResponse,
    summary="List images",
    description=(
        "Newest first. `type` restricts the listing to that category's folder "
        "(unknown types list every folder); `limit` defaults to 30."
    ),
)
def list_images(
    folder_type: Optional[str] = Query(None, alias="type", description="Category tag, e.g. product"),
    limit: Optional[str] = Query(None, description="Maximum number of images to return"),
    provider: StorageProvider = Depends(get_provider),
):
    folder = known_folder(folder_type)
    try:
        files = provider.list_files(path=folder, sort="DESC_CREATED", limit=_parse_limit(limit))
    except Exception as e:
        logger.exception("Listing images failed")
        raise ListFailed("Failed to fetch images", details=str(e)) from e
    return ListResponse(images=files, folder=folder or "all", count=len(files))


@router.delete(
    "/delete/{file_id:path}",
    response_model=DeleteResponse,
    summary="Delete an image by id",
)
def delete_image(file_id: str, provider: StorageProvider = Depends(get_provider)):
    try:
        result = provider.delete_file(file_id)
    except KeyError:
        raise NotFound("File not found", details=file_id)
    except Exception as e:
        logger.exception("Deleting %s failed", file_id)
        raise DeleteFailed("Delete failed", details=str(e)) from e
    return DeleteResponse(message="Deleted", result=result)


@router.post(
    "/delete",
    response_model=DeleteResponse,
    summary="Delete an image by its public URL",
    description=(
        "Resolves the folder and name from the CDN URL, searches that folder "
        "and deletes the first match."
    ),
)
def delete_image_by_url(
    payload: Optional[DeleteByUrlRequest] = None,
    provider: StorageProvider = Depends(get_provider),
):
    image_url = payload.image_url if payload else None
    if not image_url:
        raise InvalidInput("Image URL is required")

    resolved = resolve(image_url)
    if resolved is None:
        raise InvalidResourceUrl("Invalid image URL")

    try:
        files = provider.list_files(path=resolved.search_path, search_name=resolved.base_name)
        if not files:
            raise NotFound("File not found")
        # Several files may share a base name; the provider's first one wins
        result = provider.delete_file(files[0].file_id)
    except NotFound:
        raise
    except KeyError:
        raise NotFound("File not found")
    except Exception as e:
        logger.exception("Deleting %s failed", image_url)
        raise DeleteFailed("Delete failed", details=str(e)) from e
    return DeleteResponse(message="Deleted", result=result)
