# ============================================================================
# FILE: videotube/core/media.py
# Upload of avatar / cover images to the media host (Cloudinary REST API)
# ============================================================================
import hashlib
import os
import time
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

import httpx
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from videotube.config import Settings
import logging

logger = logging.getLogger(__name__)


@dataclass
class UploadResult:
    url: str
    public_id: Optional[str] = None
    resource_type: Optional[str] = None


def _write_bytes(path: str, content: bytes) -> None:
    with open(path, "wb") as out:
        out.write(content)


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as fh:
        return fh.read()


async def save_upload_file(upload: Optional[UploadFile], temp_dir: str) -> Optional[str]:
    """
    Write an incoming multipart file to the temp dir and return its path.
    Returns None when no usable file was sent.
    """
    if upload is None or not upload.filename:
        return None

    _, ext = os.path.splitext(os.path.basename(upload.filename))
    path = os.path.join(temp_dir, f"{uuid.uuid4().hex}{ext.lower()}")

    content = await upload.read()
    await run_in_threadpool(os.makedirs, temp_dir, exist_ok=True)
    await run_in_threadpool(_write_bytes, path, content)
    return path


class MediaUploader:
    """
    Signed uploads to Cloudinary.
    Every failure is logged and reported as None; the local file is always removed.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cloud_name = settings.CLOUDINARY_CLOUD_NAME
        self.api_key = settings.CLOUDINARY_API_KEY
        self.api_secret = settings.CLOUDINARY_API_SECRET
        self.upload_url = settings.CLOUDINARY_UPLOAD_URL.format(cloud_name=self.cloud_name)
        self.timeout = settings.UPLOAD_TIMEOUT_SECONDS
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def sign(self, params: Dict[str, str]) -> str:
        """Cloudinary signature: sha1 of the sorted params followed by the secret"""
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    async def upload(self, local_path: Optional[str]) -> Optional[UploadResult]:
        if not local_path:
            return None

        try:
            if not self.configured:
                logger.warning("Media host credentials not configured, upload skipped")
                return None

            params = {"timestamp": str(int(time.time()))}
            data = {**params, "api_key": self.api_key, "signature": self.sign(params)}

            content = await run_in_threadpool(_read_bytes, local_path)
            files = {"file": (os.path.basename(local_path), content)}

            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.upload_url, data=data, files=files)
                response.raise_for_status()
                body = response.json()

            url = body.get("secure_url") or body.get("url")
            if not url:
                logger.error(f"Media host response had no url for {local_path}")
                return None

            logger.info(f"File uploaded to media host: {body.get('public_id')}")
            return UploadResult(
                url=url,
                public_id=body.get("public_id"),
                resource_type=body.get("resource_type"),
            )
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.error(f"Media upload failed for {local_path}: {e}")
            return None
        finally:
            if os.path.exists(local_path):
                os.remove(local_path)
