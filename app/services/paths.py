from types import MappingProxyType
from typing import Optional
from urllib.parse import unquote, urlsplit
import time

from ..core.config import settings
from ..core.models import ResolvedPath

"""Folder classification, storage naming and CDN URL resolution.

Everything here is pure string work; nothing talks to the network.
"""

DEFAULT_CATEGORY = "general"

FOLDERS = MappingProxyType(
    {
        "product": "/products",
        "brand": "/brands",
        "doctor": "/doctors",
        "banner": "/banners",
        "blog": "/blogs",
        "reference-book": "/reference-books",
        "disease": "/diseases",
        "category": "/categories",
        "user": "/users",
        DEFAULT_CATEGORY: "/general",
    }
)


def known_folder(category: Optional[str]) -> Optional[str]:
    return FOLDERS.get(category) if category else None


def resolve_folder(category: Optional[str]) -> str:
    """Folder for a category tag; unknown or missing tags land in /general."""
    return known_folder(category) or FOLDERS[DEFAULT_CATEGORY]


def storage_name(category: str, original_filename: str, now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{category}_{now_ms}_{original_filename}"


def base_name(filename: str) -> str:
    """Filename up to its first dot, the key the provider is searched by."""
    return filename.split(".", 1)[0]


def resolve(cdn_url: str, base_url: Optional[str] = None) -> Optional[ResolvedPath]:
    """Recover the folder path and base name of a file from its public URL.

    Returns None when the URL is not served from `base_url` or has no
    filename after it.
    """
    prefix = (base_url if base_url is not None else settings.cdn_base_url).rstrip("/")
    if not cdn_url or not prefix or not cdn_url.startswith(prefix + "/"):
        return None

    path = urlsplit(cdn_url[len(prefix):]).path
    if path.endswith("/"):
        return None
    segments = [unquote(s) for s in path.split("/") if s]
    if not segments:
        return None

    name = base_name(segments[-1])
    if not name:
        return None
    return ResolvedPath(folder_path="/".join(segments[:-1]), base_name=name)
