"""
Pet photo storage.

Images arrive either as multipart files or as a remote URL. Both paths go
through the same checks and end up as a file under UPLOAD_DIR, served
read-only under `/media/`. Callers get back public URLs to put in
`Pet.photos`.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import secrets
import socket
from dataclasses import dataclass
from pathlib import Path

import httpx
from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from core.errors import InvalidUploadError
from core.settings import env_float, env_int, env_str

# content type -> stored file extension
ALLOWED_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/pjpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
}

DEFAULT_MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5 MiB

MEDIA_ROUTE = "/media"

MAX_REDIRECTS = 3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredImage:
    filename: str
    url: str
    size_bytes: int


def upload_dir() -> Path:
    return Path(env_str("UPLOAD_DIR", "./uploads"))


def public_base_url() -> str:
    return env_str("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")


def max_image_bytes() -> int:
    return env_int("MAX_IMAGE_BYTES", DEFAULT_MAX_IMAGE_BYTES)


def max_images_per_request() -> int:
    return env_int("MAX_IMAGES_PER_REQUEST", 5)


def remote_image_timeout_s() -> float:
    return env_float("REMOTE_IMAGE_TIMEOUT_S", 20.0)


def _normalize_content_type(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def validate_content_type(content_type: str | None) -> str:
    """
    Return the file extension to store under, or raise for non-images.
    """
    normalized = _normalize_content_type(content_type)
    ext = ALLOWED_CONTENT_TYPES.get(normalized)
    if ext is None:
        raise InvalidUploadError("Invalid file type. Please send only images (jpeg, png, gif).")
    return ext


def _safe_stem(original_name: str | None) -> str:
    stem = Path(original_name or "").stem
    cleaned = "".join(ch if ch.isalnum() or ch in "-_" else "-" for ch in stem).strip("-")
    return cleaned[:60] or "image"


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


async def store_image(data: bytes, *, ext: str, original_name: str | None = None) -> StoredImage:
    if not data:
        raise InvalidUploadError("Image is empty.")
    if len(data) > max_image_bytes():
        raise InvalidUploadError(f"Image too large. Max is {max_image_bytes()} bytes.")

    filename = f"{secrets.token_hex(16)}-{_safe_stem(original_name)}{ext}"
    await run_in_threadpool(_write_file, upload_dir() / filename, data)

    url = f"{public_base_url()}{MEDIA_ROUTE}/{filename}"
    logger.info("image_stored filename=%s size_bytes=%s", filename, len(data))
    return StoredImage(filename=filename, url=url, size_bytes=len(data))


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise InvalidUploadError(f"Image too large. Max is {max_bytes} bytes.")

    return bytes(buf)


async def store_uploads(files: list[UploadFile]) -> list[StoredImage]:
    if not files:
        raise InvalidUploadError("No images were sent.")
    if len(files) > max_images_per_request():
        raise InvalidUploadError(f"Too many images. Max is {max_images_per_request()} per request.")

    # Validate every file before writing any of them.
    checked: list[tuple[bytes, str, str | None]] = []
    for file in files:
        ext = validate_content_type(file.content_type)
        data = await read_upload_bytes(file, max_image_bytes())
        checked.append((data, ext, file.filename))

    return [await store_image(data, ext=ext, original_name=name) for (data, ext, name) in checked]


async def resolve_host(host: str, port: int) -> list[str]:
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, port, proto=socket.IPPROTO_TCP)
    return [info[4][0] for info in infos]


def _is_public_address(address: str) -> bool:
    # Drop an IPv6 zone id ("fe80::1%eth0").
    ip = ipaddress.ip_address(address.split("%", 1)[0])
    return ip.is_global and not ip.is_multicast


async def ensure_public_url(url: httpx.URL) -> None:
    """
    Reject URLs that are not http(s) or whose host is, or resolves to, a
    loopback, private, link-local or otherwise non-public address.
    """
    if url.scheme not in ("http", "https"):
        raise InvalidUploadError("Image URL must be http(s).")
    host = url.host
    if not host:
        raise InvalidUploadError("Image URL has no host.")

    try:
        addresses = [str(ipaddress.ip_address(host))]
    except ValueError:
        try:
            addresses = await resolve_host(host, url.port or (443 if url.scheme == "https" else 80))
        except OSError as exc:
            raise InvalidUploadError("Could not resolve image host.") from exc

    if not addresses or not all(_is_public_address(address) for address in addresses):
        logger.warning("remote_image_blocked host=%s", host)
        raise InvalidUploadError("Image URL must point to a public address.")


async def store_from_url(image_url: str) -> StoredImage:
    """
    Fetch a remote image and store a local copy.

    Redirects are followed by hand so every hop goes through
    `ensure_public_url` before it is requested.
    """
    image_url = (image_url or "").strip()
    if not image_url.lower().startswith(("http://", "https://")):
        raise InvalidUploadError("Image URL must be http(s).")
    try:
        url = httpx.URL(image_url)
    except httpx.InvalidURL as exc:
        raise InvalidUploadError("Image URL is invalid.") from exc

    limit = max_image_bytes()
    data: bytes | None = None
    try:
        async with httpx.AsyncClient(timeout=remote_image_timeout_s(), follow_redirects=False) as client:
            for _ in range(MAX_REDIRECTS + 1):
                await ensure_public_url(url)
                async with client.stream("GET", url) as resp:
                    if resp.is_redirect:
                        url = url.join(resp.headers["location"])
                        continue
                    if resp.status_code != 200:
                        raise InvalidUploadError(f"Could not fetch image (status {resp.status_code}).")
                    ext = validate_content_type(resp.headers.get("content-type"))

                    buf = bytearray()
                    async for chunk in resp.aiter_bytes():
                        buf.extend(chunk)
                        if len(buf) > limit:
                            raise InvalidUploadError(f"Image too large. Max is {limit} bytes.")
                    data = bytes(buf)
                    break
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("remote_image_fetch_failed error=%s", type(exc).__name__)
        raise InvalidUploadError("Could not fetch image from URL.") from exc

    if data is None:
        raise InvalidUploadError("Image URL redirected too many times.")

    name = Path(url.path).name
    return await store_image(data, ext=ext, original_name=name)
