from __future__ import annotations

from fastapi import APIRouter

from catalog_api.api.deps import Uploads
from catalog_api.infra.storage_s3 import UploadUrlIssuer
from catalog_api.schemas.uploads import PresignIn, PresignOut

router = APIRouter()


@router.post("/get-presigned-url", response_model=PresignOut)
def get_presigned_url(payload: PresignIn, uploads: UploadUrlIssuer = Uploads):
    upload = uploads.issue(payload.mime)
    return PresignOut(url=upload.url, finalName=upload.key)
