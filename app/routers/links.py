from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from typing import Optional
from ..core.errors import ServiceError
from ..core.models import FetchUrlRequest, FetchUrlResponse
from ..services.metadata import LinkPreviewer
from .deps import get_previewer

router = APIRouter(tags=["links"])


@router.post(
    "/fetchUrl",
    response_model=FetchUrlResponse,
    summary="Link preview",
    description=(
        "Fetches `url` and returns its title, description and image from the "
        "page head (<title>, meta name, og:*, twitter:*). Response shape follows "
        "the Editor.js LinkTool contract."
    ),
)
async def fetch_url(
    payload: Optional[FetchUrlRequest] = None,
    previewer: LinkPreviewer = Depends(get_previewer),
):
    url = payload.url if payload else None
    try:
        meta = await previewer.preview(url or "")
    except ServiceError as e:
        return JSONResponse(status_code=e.status_code, content={"success": 0, **e.to_body()})
    return FetchUrlResponse(meta=meta)
