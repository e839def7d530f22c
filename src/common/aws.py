import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Mapping

import boto3

from common.retry import RetryPolicy

logger = logging.getLogger(__name__)


def get_s3_client():
    """Create S3 client."""
    return boto3.client("s3", endpoint_url=os.environ.get("S3_ENDPOINT"))


def build_s3_key(prefix: str, timestamp: datetime, filename: str) -> str:
    """Build a partitioned S3 key path."""
    return (
        f"{prefix}/"
        f"year={timestamp.year:04d}/"
        f"month={timestamp.month:02d}/"
        f"day={timestamp.day:02d}/"
        f"{filename}"
    )


def upload_json_to_s3(
    document: Mapping[str, Any],
    bucket: str,
    key: str,
    policy: RetryPolicy | None = None,
    s3=None,
) -> None:
    """Upload a JSON document to S3, retrying transient failures."""
    body = json.dumps(document, ensure_ascii=False, indent=2, default=str).encode("utf-8")
    s3 = s3 or get_s3_client()
    policy = policy or RetryPolicy()

    def put():
        return s3.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType="application/json",
        )

    policy.call(put, description=f"upload s3://{bucket}/{key}")


def upload_snapshots_to_s3(
    paths: Iterable[Path],
    data_dir: Path,
    prefix: str,
    timestamp: datetime,
    policy: RetryPolicy | None = None,
) -> list[str]:
    """
    Upload written snapshot files to S3.

    Keys keep each file's path relative to the data directory under a
    date-partitioned prefix.

    Args:
        paths: Snapshot files to upload
        data_dir: Data directory the paths live in
        prefix: S3 prefix (e.g., "raw_snapshots", "processed_snapshots")
        timestamp: Run timestamp used for partitioning

    Returns:
        List of uploaded keys
    """
    bucket = os.environ["S3_BUCKET_NAME"]
    s3 = get_s3_client()
    keys = []

    for path in paths:
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            document = json.load(f)
        key = build_s3_key(prefix, timestamp, path.relative_to(data_dir).as_posix())
        upload_json_to_s3(document, bucket, key, policy=policy, s3=s3)
        keys.append(key)

    logger.info("Uploaded %d snapshots to s3://%s/%s", len(keys), bucket, prefix)
    return keys
