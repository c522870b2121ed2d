from typing import Optional, List, Dict, Any
import logging
import time
import uuid
from io import BytesIO
from urllib.parse import quote
from boto3.dynamodb.conditions import Key, Attr
from PIL import Image, UnidentifiedImageError
from ..core.config import settings
from ..core.models import StoredFile
from ..services.paths import base_name
from .clients import s3 as s3_client_factory, dynamodb_table as dynamodb_table_factory

"""S3 + DynamoDB image host.

Objects live in S3 under their folder path, one DynamoDB record per file
holds the opaque file id and listing attributes. Public URLs are the CDN
base URL followed by the percent-encoded file path.
"""

logger = logging.getLogger(__name__)

FOLDER_INDEX = "by_folder_created"
SORT_ORDERS = {"DESC_CREATED", "ASC_CREATED"}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _sniff_image(data_bytes: bytes) -> Dict[str, Any]:
    """Format, MIME type and dimensions when the payload is a readable image.

    Fails soft by returning an empty dict; nothing is rejected here.
    """
    try:
        with Image.open(BytesIO(data_bytes)) as img:
            width, height = img.size
            fmt = img.format
    except (UnidentifiedImageError, OSError, ValueError):
        return {}

    info: Dict[str, Any] = {"width": width, "height": height}
    if fmt:
        info["format"] = fmt.lower()
        mime = Image.MIME.get(fmt)
        if mime:
            info["content_type"] = mime
    return info


def _normalize_folder(folder: Optional[str]) -> str:
    return "/" + (folder or "").strip("/")


def _join(folder: str, file_name: str) -> str:
    return f"{folder.rstrip('/')}/{file_name}"


def _public_url(file_path: str) -> str:
    return settings.cdn_base_url.rstrip("/") + quote(file_path)


def _to_file(item: Dict[str, Any]) -> StoredFile:
    # DynamoDB hands numbers back as Decimal
    def _int(key: str) -> Optional[int]:
        value = item.get(key)
        return int(value) if value is not None else None

    return StoredFile(
        file_id=item["file_id"],
        name=item["name"],
        file_path=item["file_path"],
        url=_public_url(item["file_path"]),
        folder=item["folder"],
        size=_int("size") or 0,
        content_type=item.get("content_type") or DEFAULT_CONTENT_TYPE,
        width=_int("width"),
        height=_int("height"),
        format=item.get("format"),
        created_at=_int("created_at") or 0,
    )


class S3ImageProvider:
    """Upload, list and delete images kept in S3 with a DynamoDB index."""

    def upload(self, *, file: bytes, file_name: str, folder: str) -> StoredFile:
        if file is None or not file_name:
            raise ValueError("missing_required_fields")

        folder = _normalize_folder(folder)
        file_path = _join(folder, file_name)
        object_key = file_path.lstrip("/")
        sniffed = _sniff_image(file)
        content_type = sniffed.get("content_type", DEFAULT_CONTENT_TYPE)

        s3 = s3_client_factory()
        table = dynamodb_table_factory()

        s3.put_object(
            Bucket=settings.bucket_name,
            Key=object_key,
            Body=file,
            ContentType=content_type,
        )

        item: Dict[str, Any] = {
            "file_id": uuid.uuid4().hex,
            "name": file_name,
            "base_name": base_name(file_name),
            "folder": folder,
            "file_path": file_path,
            "object_key": object_key,
            "bucket_name": settings.bucket_name,
            "size": len(file),
            "content_type": content_type,
            "created_at": int(time.time() * 1000),
        }
        for key in ("width", "height", "format"):
            if key in sniffed:
                item[key] = sniffed[key]

        table.put_item(Item=item)
        logger.info("Stored %s as %s", file_path, item["file_id"])
        return _to_file(item)

    def list_files(
        self,
        *,
        path: Optional[str] = None,
        sort: str = "DESC_CREATED",
        limit: Optional[int] = None,
        search_name: Optional[str] = None,
    ) -> List[StoredFile]:
        """List files, newest first by default.

        `path` restricts the listing to one folder via the folder index,
        otherwise the whole table is scanned. `search_name` matches the
        stored base name (filename up to its first dot).
        """
        if sort not in SORT_ORDERS:
            raise ValueError("unsupported_sort")
        newest_first = sort == "DESC_CREATED"

        table = dynamodb_table_factory()
        filter_expr = Attr("base_name").eq(search_name) if search_name else None

        items: List[Dict[str, Any]] = []
        exclusive_start_key = None

        if path is not None:
            while True:
                params: Dict[str, Any] = {
                    "IndexName": FOLDER_INDEX,
                    "KeyConditionExpression": Key("folder").eq(_normalize_folder(path)),
                    "ScanIndexForward": not newest_first,
                }
                if filter_expr is not None:
                    params["FilterExpression"] = filter_expr
                if exclusive_start_key is not None:
                    params["ExclusiveStartKey"] = exclusive_start_key

                resp = table.query(**params)
                items.extend(resp.get("Items", []))
                exclusive_start_key = resp.get("LastEvaluatedKey")
                if not exclusive_start_key or (limit and len(items) >= limit):
                    break
        else:
            # Full table scan; ordering happens below
            while True:
                params = {}
                if filter_expr is not None:
                    params["FilterExpression"] = filter_expr
                if exclusive_start_key is not None:
                    params["ExclusiveStartKey"] = exclusive_start_key

                resp = table.scan(**params)
                items.extend(resp.get("Items", []))
                exclusive_start_key = resp.get("LastEvaluatedKey")
                if not exclusive_start_key:
                    break

        files = sorted(
            (_to_file(i) for i in items),
            key=lambda f: (f.created_at, f.file_id),
            reverse=newest_first,
        )
        return files[:limit] if limit else files

    def delete_file(self, file_id: str) -> dict:
        """Delete both the S3 object and the DynamoDB record."""
        table = dynamodb_table_factory()
        s3 = s3_client_factory()

        resp = table.get_item(Key={"file_id": file_id})
        item = resp.get("Item")
        if not item:
            raise KeyError("not_found")

        s3.delete_object(Bucket=item["bucket_name"], Key=item["object_key"])
        table.delete_item(Key={"file_id": file_id})
        logger.info("Deleted %s (%s)", item["file_path"], file_id)
        return {"fileId": file_id, "filePath": item["file_path"]}
