"""Optional publication of resolved metadata to S3."""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple, Type

from commitinfo.core import reporter
from commitinfo.core.model import ResolveResult

try:
    import boto3  # type: ignore
    from botocore.exceptions import BotoCoreError, ClientError  # type: ignore

    UPLOAD_ERRORS: Tuple[Type[Exception], ...] = (BotoCoreError, ClientError)
except ImportError:  # pragma: no cover - optional dependency
    boto3 = None
    UPLOAD_ERRORS = ()

_LOG = logging.getLogger(__name__)

DEFAULT_KEY_TEMPLATE = "commitinfo/{commit_hash}.json"


def default_key(result: ResolveResult) -> str:
    return DEFAULT_KEY_TEMPLATE.format(commit_hash=result.info.commit_hash)


def publish_result(bucket: str, key: Optional[str], result: ResolveResult, client: Optional[Any] = None) -> bool:
    """Upload ``result`` as JSON.

    Returns ``False`` when boto3 is unavailable or S3 rejects the upload.
    """

    client = client or _client()
    key = key or default_key(result)
    if not client:
        _LOG.warning("boto3 not available; skipping upload for s3://%s/%s", bucket, key)
        return False
    body = reporter.render_json(result).encode("utf-8")
    try:
        client.put_object(Bucket=bucket, Key=key, Body=body, ContentType="application/json")
    except UPLOAD_ERRORS as exc:
        _LOG.warning("Upload to s3://%s/%s failed: %s", bucket, key, exc)
        return False
    _LOG.info("Published commit info to s3://%s/%s", bucket, key)
    return True


def _client() -> Any:
    if boto3 is None:
        return None
    return boto3.client("s3")
