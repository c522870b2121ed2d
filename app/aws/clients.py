import boto3
from botocore.config import Config
from ..core.config import settings


def _config() -> Config:
    # One attempt with bounded timeouts; callers surface failures as-is
    return Config(
        connect_timeout=settings.provider_timeout,
        read_timeout=settings.provider_timeout,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )


def s3():
    """Create an S3 client using our configured region/endpoint/creds."""
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        config=_config(),
    )

def dynamodb_table():
    """Return a DynamoDB Table handle for the configured table name."""
    return boto3.resource(
        "dynamodb",
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
        config=_config(),
    ).Table(settings.table_name)
