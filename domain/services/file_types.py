"""File-type resolution from a MIME hint and the leading bytes of a blob.

Everything here is pure: no I/O, no network. Storage adapters use it to pick
a content type and an object-key extension.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

GENERIC_MIME_TYPE = "application/octet-stream"
GENERIC_EXTENSION = "bin"

MIME_TO_EXTENSION: dict[str, str] = {
    # Images
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
    "image/avif": "avif",
    "image/tiff": "tiff",
    "image/x-icon": "ico",
    # Videos
    "video/mp4": "mp4",
    "video/webm": "webm",
    "video/quicktime": "mov",
    "video/x-msvideo": "avi",
    "video/x-matroska": "mkv",
    # Audio
    "audio/mpeg": "mp3",
    "audio/wav": "wav",
    "audio/ogg": "ogg",
    "audio/mp4": "m4a",
    "audio/aac": "aac",
    # Documents
    "application/pdf": "pdf",
    "text/plain": "txt",
    "text/html": "html",
    "text/csv": "csv",
    "application/json": "json",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/vnd.ms-excel": "xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "xlsx",
    "application/vnd.ms-powerpoint": "ppt",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "pptx",
    # Archives
    "application/zip": "zip",
    "application/x-7z-compressed": "7z",
    "application/x-rar-compressed": "rar",
    "application/x-tar": "tar",
}

# (offset, signature, mime type, extension); checked in order.
MAGIC_SIGNATURES: tuple[tuple[int, bytes, str, str], ...] = (
    (0, b"\x89PNG\r\n\x1a\n", "image/png", "png"),
    (0, b"\xff\xd8\xff", "image/jpeg", "jpg"),
    (0, b"GIF87a", "image/gif", "gif"),
    (0, b"GIF89a", "image/gif", "gif"),
    (0, b"BM", "image/bmp", "bmp"),
    (0, b"\x00\x00\x01\x00", "image/x-icon", "ico"),
    (0, b"II*\x00", "image/tiff", "tiff"),
    (0, b"MM\x00*", "image/tiff", "tiff"),
    (0, b"%PDF-", "application/pdf", "pdf"),
    (0, b"PK\x03\x04", "application/zip", "zip"),
    (0, b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed", "7z"),
    (0, b"Rar!\x1a\x07", "application/x-rar-compressed", "rar"),
    (0, b"\x1f\x8b", "application/gzip", "gz"),
    (257, b"ustar", "application/x-tar", "tar"),
    (0, b"OggS", "audio/ogg", "ogg"),
    (0, b"fLaC", "audio/flac", "flac"),
    (0, b"ID3", "audio/mpeg", "mp3"),
    (0, b"\xff\xfb", "audio/mpeg", "mp3"),
    (0, b"\xff\xf3", "audio/mpeg", "mp3"),
    (0, b"\xff\xf1", "audio/aac", "aac"),
    (0, b"\xff\xf9", "audio/aac", "aac"),
)

# ISO base media "ftyp" brands.
_FTYP_BRANDS: dict[bytes, tuple[str, str]] = {
    b"avif": ("image/avif", "avif"),
    b"avis": ("image/avif", "avif"),
    b"qt  ": ("video/quicktime", "mov"),
    b"M4A ": ("audio/mp4", "m4a"),
    b"M4B ": ("audio/mp4", "m4a"),
}

_RIFF_FORMATS: dict[bytes, tuple[str, str]] = {
    b"WEBP": ("image/webp", "webp"),
    b"WAVE": ("audio/wav", "wav"),
    b"AVI ": ("video/x-msvideo", "avi"),
}

_EBML_MAGIC = b"\x1a\x45\xdf\xa3"
_SAFE_EXTENSION = re.compile(r"^[a-z0-9]{1,10}$")


@dataclass(frozen=True)
class FileType:
    mime_type: str
    extension: str


def sniff_file_type(data: bytes) -> FileType | None:
    """Detect a file type from magic bytes, or ``None`` when unrecognised."""
    head = data[:512]

    if len(head) >= 12 and head[:4] == b"RIFF":
        riff = _RIFF_FORMATS.get(head[8:12])
        if riff:
            return FileType(*riff)

    if len(head) >= 12 and head[4:8] == b"ftyp":
        brand = head[8:12]
        if brand in _FTYP_BRANDS:
            return FileType(*_FTYP_BRANDS[brand])
        return FileType("video/mp4", "mp4")

    if head.startswith(_EBML_MAGIC):
        if b"webm" in head[:64]:
            return FileType("video/webm", "webm")
        return FileType("video/x-matroska", "mkv")

    for offset, signature, mime_type, extension in MAGIC_SIGNATURES:
        if head[offset : offset + len(signature)] == signature:
            return FileType(mime_type, extension)

    return None


def extension_for_mime(mime_type: str) -> str:
    """Map a MIME type to an extension via the static table.

    Unknown types fall back to their subtype when it is a plain token
    (``image/heic`` -> ``heic``), otherwise to ``bin``.
    """
    normalized = mime_type.split(";", 1)[0].strip().lower()
    if normalized in MIME_TO_EXTENSION:
        return MIME_TO_EXTENSION[normalized]
    _, _, subtype = normalized.partition("/")
    if _SAFE_EXTENSION.match(subtype):
        return subtype
    return GENERIC_EXTENSION


def resolve_file_type(mime_hint: str | None, data: bytes) -> FileType:
    """Pick the content type and extension used to store ``data``.

    A MIME hint wins and goes through the static table. Without one the bytes
    are sniffed, and if that finds nothing the generic binary type is used.
    """
    if mime_hint:
        return FileType(mime_hint, extension_for_mime(mime_hint))
    sniffed = sniff_file_type(data)
    if sniffed:
        return sniffed
    return FileType(GENERIC_MIME_TYPE, GENERIC_EXTENSION)
