from fastapi import Request

from ..core.interfaces import StorageProvider
from ..services.metadata import LinkPreviewer


def get_provider(request: Request) -> StorageProvider:
    return request.app.state.provider


def get_previewer(request: Request) -> LinkPreviewer:
    return request.app.state.previewer
