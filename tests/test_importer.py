# tests/test_importer.py
import base64

import pytest

from study_assistant.errors import InputError
from study_assistant.importer import is_oversized, load_upload, read_source


def test_load_pdf(tmp_path):
    f = tmp_path / "lecture.pdf"
    f.write_bytes(b"%PDF-1.4 content")
    upload = load_upload(str(f))
    assert upload.name == "lecture.pdf"
    assert upload.mime_type == "application/pdf"
    assert base64.b64decode(upload.data) == b"%PDF-1.4 content"


@pytest.mark.parametrize("name,mime", [
    ("slide.png", "image/png"),
    ("photo.JPG", "image/jpeg"),
    ("scan.jpeg", "image/jpeg"),
])
def test_load_images(tmp_path, name, mime):
    f = tmp_path / name
    f.write_bytes(b"\x89binary")
    assert load_upload(str(f)).mime_type == mime


def test_load_unsupported_type(tmp_path):
    f = tmp_path / "notes.docx"
    f.write_bytes(b"PK")
    with pytest.raises(InputError):
        load_upload(str(f))


def test_load_missing_file(tmp_path):
    with pytest.raises(InputError, match="not found"):
        load_upload(str(tmp_path / "gone.pdf"))


def test_is_oversized():
    assert is_oversized(1024 * 1024 + 1, max_mb=1) is True
    assert is_oversized(1024 * 1024, max_mb=1) is False


def test_read_source_text_file(tmp_path):
    f = tmp_path / "notes.md"
    f.write_text("# Krebs cycle\nCitric acid.")
    text, upload = read_source(str(f))
    assert "Krebs cycle" in text
    assert upload is None


def test_read_source_binary(tmp_path):
    f = tmp_path / "diagram.png"
    f.write_bytes(b"\x89PNG")
    text, upload = read_source(str(f))
    assert text == ""
    assert upload.name == "diagram.png"


def test_read_source_missing_text_file(tmp_path):
    with pytest.raises(InputError):
        read_source(str(tmp_path / "missing.txt"))
