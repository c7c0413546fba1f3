"""Tests for the file operations module."""

import io

import pytest

from nova_pydrive.config import Config
from nova_pydrive.exceptions import ExportFormatError
from nova_pydrive.operations.files import (
    FileOperations,
    export_filename,
    export_format_for,
    media_filename,
)

DOCUMENT = "application/vnd.google-apps.document"
EXPORT_LINKS = {"application/pdf": "https://docs.google.com/export"}


@pytest.fixture
def file_ops(drive_client, token_storage):
    """Create FileOperations instance with a fake client."""
    return FileOperations(drive_client=drive_client, storage=token_storage)


def test_upload_from_path(file_ops, drive_client, temp_test_files):
    result = file_ops.upload_file(str(temp_test_files / "test.txt"), parent_id="p1")

    assert result.success
    call = drive_client.calls_to("create")[0]
    assert call[1][0] == {"name": "test.txt", "parents": ["p1"]}
    assert call[2]["mime_type"] == "text/plain"
    assert drive_client.content[result.resource_id] == b"test content"


def test_upload_from_file_object(file_ops, drive_client):
    result = file_ops.upload_file(io.BytesIO(b"\x00\x01"), name="blob.bin")

    call = drive_client.calls_to("create")[0]
    assert call[1][0] == {"name": "blob.bin"}
    assert call[2]["mime_type"] == "application/octet-stream"
    assert drive_client.content[result.resource_id] == b"\x00\x01"


def test_upload_name_override(file_ops, drive_client, temp_test_files):
    file_ops.upload_file(temp_test_files / "test.txt", name="notes.md")

    assert drive_client.calls_to("create")[0][1][0]["name"] == "notes.md"


def test_upload_failure_is_normalized(file_ops, drive_client, temp_test_files, http_error):
    drive_client.fail("create", http_error(507, "Storage quota exceeded"))

    result = file_ops.upload_file(str(temp_test_files / "test.txt"))

    assert result.resource_id is None
    assert "Storage quota exceeded" in result.error


def test_upload_unreadable_path(file_ops, drive_client, tmp_path):
    result = file_ops.upload_file(str(tmp_path / "missing.txt"))

    assert not result.success
    assert "missing.txt" in result.error
    assert drive_client.calls_to("create") == []


def test_set_starred(file_ops, drive_client):
    drive_client.add_file(id="f1", name="a.txt")

    result = file_ops.set_starred("f1", True)

    assert result.resource_id == "f1"
    assert drive_client.files["f1"]["starred"] is True
    assert drive_client.calls_to("update")[0][1] == ("f1", {"starred": True})


def test_set_starred_failure(file_ops):
    result = file_ops.set_starred("missing", False)

    assert "File not found" in result.error


def test_download_regular_file(file_ops, drive_client, tmp_path):
    drive_client.add_file(id="f1", name="photo.jpg")
    drive_client.content["f1"] = b"jpeg bytes"

    path = file_ops.download_file("f1", dest_dir=f"{tmp_path}/")

    assert path == f"{tmp_path}/photo.jpg"
    assert (tmp_path / "photo.jpg").read_bytes() == b"jpeg bytes"
    assert drive_client.calls_to("export") == []


def test_download_adds_missing_extension(file_ops, drive_client, tmp_path):
    drive_client.add_file(id="f1", name="scan", fileExtension="pdf")

    path = file_ops.download_file("f1", dest_dir=f"{tmp_path}/")

    assert path.endswith("scan.pdf")


def test_download_exports_native_document(file_ops, drive_client, tmp_path):
    drive_client.add_file(id="d1", name="Report", mimeType=DOCUMENT, exportLinks=EXPORT_LINKS)

    path = file_ops.download_file("d1", dest_dir=f"{tmp_path}/")

    word = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    assert path == f"{tmp_path}/Report.docx"
    assert drive_client.calls_to("export")[0][1] == ("d1", word)
    assert (tmp_path / "Report.docx").read_bytes() == f"exported as {word}".encode()


def test_download_export_keeps_existing_extension_by_default(file_ops, drive_client, tmp_path):
    drive_client.add_file(
        id="d1", name="Report.docx", mimeType=DOCUMENT, exportLinks=EXPORT_LINKS
    )

    assert file_ops.download_file("d1", dest_dir=f"{tmp_path}/").endswith("Report.docx.docx")


def test_download_export_dedupes_extension(drive_client, token_storage, tmp_path):
    ops = FileOperations(
        drive_client=drive_client,
        storage=token_storage,
        config=Config(DEDUPE_EXPORT_EXTENSION=True),
    )
    drive_client.add_file(
        id="d1", name="Report.docx", mimeType=DOCUMENT, exportLinks=EXPORT_LINKS
    )

    assert ops.download_file("d1", dest_dir=f"{tmp_path}/") == f"{tmp_path}/Report.docx"


def test_download_fetches_client_once(drive_client, token_storage, tmp_path, mocker):
    """Metadata and content use the client obtained for the call."""
    provider = mocker.Mock()
    provider.get.return_value = drive_client
    ops = FileOperations(storage=token_storage, client_provider=provider)
    drive_client.add_file(id="f1", name="a.txt")

    ops.download_file("f1", dest_dir=f"{tmp_path}/")

    provider.get.assert_called_once()
    assert drive_client.calls_to("get")[0][2] == {"fields": "*", "supportsAllDrives": True}


def test_download_unsupported_export(file_ops, drive_client, tmp_path):
    drive_client.add_file(
        id="f1",
        name="Survey",
        mimeType="application/vnd.google-apps.form",
        exportLinks=EXPORT_LINKS,
    )

    with pytest.raises(ExportFormatError):
        file_ops.download_file("f1", dest_dir=f"{tmp_path}/")
    assert list(tmp_path.iterdir()) == []


def test_download_missing_file_propagates(file_ops, tmp_path):
    with pytest.raises(Exception, match="File not found"):
        file_ops.download_file("missing", dest_dir=f"{tmp_path}/")


def test_download_default_directory(file_ops, drive_client, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    drive_client.add_file(id="f1", name="a.txt")
    drive_client.content["f1"] = b"abc"

    path = file_ops.download_file("f1")

    assert path == "downloads/a.txt"
    assert (tmp_path / "downloads" / "a.txt").read_bytes() == b"abc"


def test_download_dest_dir_is_a_plain_prefix(file_ops, drive_client, tmp_path):
    drive_client.add_file(id="f1", name="a.txt")

    path = file_ops.download_file("f1", dest_dir=f"{tmp_path}/copy-of-")

    assert path == f"{tmp_path}/copy-of-a.txt"


def test_export_format_for_drawing():
    fmt = export_format_for("application/vnd.google-apps.drawing")
    assert fmt.mime_type == "image/png"
    assert fmt.extension == ".png"


@pytest.mark.parametrize(
    "resource,expected",
    [
        ({"name": "a.txt", "fileExtension": "txt"}, "a.txt"),
        ({"name": "README"}, "README"),
        ({"name": "scan", "fileExtension": "pdf"}, "scan.pdf"),
    ],
)
def test_media_filename(resource, expected):
    assert media_filename(resource) == expected


def test_export_filename_dedupe_is_case_insensitive():
    assert export_filename("Sheet.XLSX", ".xlsx", dedupe=True) == "Sheet.XLSX"
    assert export_filename("Sheet.XLSX", ".xlsx") == "Sheet.XLSX.xlsx"
