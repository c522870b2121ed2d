import os
from pydantic import BaseModel
from typing import Optional

class Settings(BaseModel):
    """for reading environment-driven configuration.

    Values have sensible defaults for LocalStack-based development.
    """
    aws_access_key_id: str = os.getenv("AWS_ACCESS_KEY_ID", "test")
    aws_secret_access_key: str = os.getenv("AWS_SECRET_ACCESS_KEY", "test")
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    aws_endpoint_url: Optional[str] = os.getenv("AWS_ENDPOINT_URL")
    bucket_name: str = os.getenv("BUCKET_NAME", "images")
    table_name: str = os.getenv("TABLE_NAME", "images")
    # Public prefix the bucket is served from (CloudFront or similar)
    cdn_base_url: str = os.getenv("CDN_BASE_URL", "https://cdn.example.com/images")
    provider_timeout: float = float(os.getenv("PROVIDER_TIMEOUT", "10"))
    fetch_timeout: float = float(os.getenv("FETCH_TIMEOUT", "10"))
    default_list_limit: int = int(os.getenv("DEFAULT_LIST_LIMIT", "30"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    environment: str = os.getenv("ENVIRONMENT", "development")

settings = Settings()
