# catalog_api/infra/storage_s3.py
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Iterable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from catalog_api.config import PRESIGN_EXPIRES_SECONDS, Settings
from catalog_api.errors import UpstreamUnavailable, ValidationFailed
from catalog_api.logging import get_logger

log = get_logger(__name__)

MEDIA_TYPE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def build_s3_client(settings: Settings):
    kwargs = {}
    endpoint = settings.S3_ENDPOINT.strip().rstrip("/")
    if endpoint:
        kwargs["endpoint_url"] = endpoint
    if settings.AWS_ACCESS_KEY and settings.AWS_SECRET_ACCESS_KEY:
        kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY
        kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY

    try:
        return boto3.client(
            "s3",
            region_name=settings.AWS_REGION,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path" if endpoint else "auto"},
            ),
            **kwargs,
        )
    except (BotoCoreError, ValueError) as e:
        raise UpstreamUnavailable("storage", f"could not create S3 client: {e}") from e


def normalize_extension(hint: Optional[str]) -> str:
    """'PNG', '.png' and 'image/png' all become 'png'."""
    h = (hint or "").strip().lower()
    if "/" in h:
        return MEDIA_TYPE_EXTENSIONS.get(h, "")
    return h.lstrip(".")


@dataclass(frozen=True)
class PresignedUpload:
    url: str
    key: str


class UploadUrlIssuer:
    def __init__(self, client, bucket: str, allowed_extensions: Iterable[str]) -> None:
        self._client = client
        self._bucket = (bucket or "").strip()
        self._allowed = frozenset(allowed_extensions)

    @property
    def configured(self) -> bool:
        return bool(self._bucket) and self._client is not None

    def _require_bucket(self) -> str:
        if not self.configured:
            raise UpstreamUnavailable("storage", "S3 storage is not configured")
        return self._bucket

    def resolve_extension(self, hint: Optional[str]) -> str:
        if not (hint or "").strip():
            raise ValidationFailed("provide a file extension", fields=["mime"])
        ext = normalize_extension(hint)
        if ext not in self._allowed:
            allowed = ", ".join(sorted(self._allowed))
            raise ValidationFailed(f"unsupported file type: {hint!r} (use {allowed})", fields=["mime"])
        return ext

    def issue(self, hint: Optional[str]) -> PresignedUpload:
        ext = self.resolve_extension(hint)
        bucket = self._require_bucket()
        key = f"{uuid.uuid4()}.{ext}"

        try:
            url = self._client.generate_presigned_url(
                ClientMethod="put_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=PRESIGN_EXPIRES_SECONDS,
                HttpMethod="PUT",
            )
        except (ClientError, BotoCoreError) as e:
            log.error("presign failed for key={}: {}", key, e)
            raise UpstreamUnavailable("storage", "could not sign upload URL") from e

        log.info("issued upload URL for key={}", key)
        return PresignedUpload(url=url, key=key)

    def exists(self, key: str) -> bool:
        key = (key or "").lstrip("/")
        if not key:
            return False
        bucket = self._require_bucket()
        try:
            self._client.head_object(Bucket=bucket, Key=key)
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in {"404", "NoSuchKey", "NotFound"}:
                return False
            log.error("head_object failed for key={}: {}", key, e)
            raise UpstreamUnavailable("storage", "could not check uploaded object") from e
        except BotoCoreError as e:
            log.error("head_object failed for key={}: {}", key, e)
            raise UpstreamUnavailable("storage", "could not check uploaded object") from e
        return True

    def close(self) -> None:
        if self._client is None:
            return
        close = getattr(self._client, "close", None)
        if close is not None:
            close()
