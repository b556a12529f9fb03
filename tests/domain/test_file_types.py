"""Tests for MIME/extension resolution and content sniffing."""

from __future__ import annotations

import pytest

from domain.services.file_types import (
    FileType,
    extension_for_mime,
    resolve_file_type,
    sniff_file_type,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16
PDF_BYTES = b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n"
WEBP_BYTES = b"RIFF\x24\x00\x00\x00WEBPVP8 " + b"\x00" * 8
MP4_BYTES = b"\x00\x00\x00\x18ftypisom\x00\x00\x02\x00"
MOV_BYTES = b"\x00\x00\x00\x14ftypqt  \x00\x00\x02\x00"
WEBM_BYTES = b"\x1a\x45\xdf\xa3\x9f\x42\x86\x81\x01\x42\x82\x84webm"
TAR_BYTES = b"\x00" * 257 + b"ustar\x0000"


class TestSniffFileType:
    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (PNG_BYTES, FileType("image/png", "png")),
            (JPEG_BYTES, FileType("image/jpeg", "jpg")),
            (b"GIF89a\x01\x00", FileType("image/gif", "gif")),
            (PDF_BYTES, FileType("application/pdf", "pdf")),
            (WEBP_BYTES, FileType("image/webp", "webp")),
            (MP4_BYTES, FileType("video/mp4", "mp4")),
            (MOV_BYTES, FileType("video/quicktime", "mov")),
            (WEBM_BYTES, FileType("video/webm", "webm")),
            (b"PK\x03\x04\x14\x00", FileType("application/zip", "zip")),
            (b"ID3\x04\x00", FileType("audio/mpeg", "mp3")),
            (TAR_BYTES, FileType("application/x-tar", "tar")),
        ],
    )
    def test_known_signatures(self, data: bytes, expected: FileType) -> None:
        assert sniff_file_type(data) == expected

    def test_plain_text_is_unrecognised(self) -> None:
        assert sniff_file_type(b"hello world") is None

    def test_empty_is_unrecognised(self) -> None:
        assert sniff_file_type(b"") is None


class TestExtensionForMime:
    @pytest.mark.parametrize(
        ("mime_type", "extension"),
        [
            ("image/jpeg", "jpg"),
            ("text/plain", "txt"),
            ("video/quicktime", "mov"),
            (
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
                "docx",
            ),
            ("text/plain; charset=utf-8", "txt"),
            ("IMAGE/PNG", "png"),
        ],
    )
    def test_table_lookup(self, mime_type: str, extension: str) -> None:
        assert extension_for_mime(mime_type) == extension

    def test_unknown_type_uses_subtype(self) -> None:
        assert extension_for_mime("image/heic") == "heic"

    def test_unusable_subtype_falls_back_to_bin(self) -> None:
        assert extension_for_mime("application/vnd.foo+bar") == "bin"
        assert extension_for_mime("garbage") == "bin"


class TestResolveFileType:
    def test_hint_wins_over_content(self) -> None:
        assert resolve_file_type("text/plain", PNG_BYTES) == FileType("text/plain", "txt")

    def test_no_hint_sniffs_content(self) -> None:
        assert resolve_file_type(None, PNG_BYTES) == FileType("image/png", "png")

    def test_empty_hint_sniffs_content(self) -> None:
        assert resolve_file_type("", PDF_BYTES).extension == "pdf"

    def test_nothing_detected_is_generic(self) -> None:
        assert resolve_file_type(None, b"just some text") == FileType(
            "application/octet-stream",
            "bin",
        )

    def test_extension_follows_hint_then_bytes(self) -> None:
        assert resolve_file_type("audio/mpeg", b"").extension == "mp3"
        assert resolve_file_type(None, JPEG_BYTES).extension == "jpg"
