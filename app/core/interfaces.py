from typing import List, Optional, Protocol

from .models import StoredFile


class StorageProvider(Protocol):
    """What the routers need from an image host.

    Implementations raise on failure; unknown file ids raise KeyError.
    """

    def upload(self, *, file: bytes, file_name: str, folder: str) -> StoredFile:
        ...

    def list_files(
        self,
        *,
        path: Optional[str] = None,
        sort: str = "DESC_CREATED",
        limit: Optional[int] = None,
        search_name: Optional[str] = None,
    ) -> List[StoredFile]:
        ...

    def delete_file(self, file_id: str) -> dict:
        ...
