"""File operations module for nova-pydrive."""

import logging
import mimetypes
import os
from pathlib import Path
from typing import Optional, Tuple

from nova_pydrive.constants import (
    API_MESSAGES,
    DEFAULT_MIME_TYPE,
    EXPORT_FORMATS,
    ErrorPolicy,
    ExportFormat,
)
from nova_pydrive.exceptions import DownloadError, ExportFormatError, UploadError
from nova_pydrive.operations.base import BaseOperations, error_policy
from nova_pydrive.types import FileSource, OperationResult, Resource
from nova_pydrive.utils.progress import create_progress_bar

logger = logging.getLogger(__name__)


def export_format_for(mime_type: str) -> ExportFormat:
    """
    Look up the export format of a native Google document type.

    Raises:
        ExportFormatError: If the MIME type has no known export format
    """
    try:
        return EXPORT_FORMATS[mime_type]
    except KeyError:
        raise ExportFormatError(API_MESSAGES["export_unsupported"].format(mime_type))


def media_filename(resource: Resource) -> str:
    """Resource name, plus the provider's extension when the name has none."""
    name = resource.get("name", "")
    if os.path.splitext(name)[1]:
        return name
    extension = resource.get("fileExtension")
    return f"{name}.{extension}" if extension else name


def export_filename(name: str, extension: str, dedupe: bool = False) -> str:
    """
    Name of an exported document.

    By default the export extension is always appended, so "report.docx"
    exported to Word becomes "report.docx.docx". With ``dedupe`` an existing
    matching extension is kept as-is.
    """
    if dedupe and name.lower().endswith(extension.lower()):
        return name
    return name + extension


class FileOperations(BaseOperations):
    """
    Class for handling Google Drive file operations.

    Provides functionality for:
    - File uploads
    - File downloads, converting native Google documents on the way
    - Starring files
    - Progress tracking

    Inherits from:
        BaseOperations: Core Google Drive operations functionality
    """

    def _read_file_chunks(self, local_path: Path) -> bytes:
        """
        Read a whole file in chunks, showing progress.

        Args:
            local_path (Path): Path to local file

        Returns:
            bytes: Concatenated file chunks
        """
        file_size = local_path.stat().st_size
        chunks = []
        with open(local_path, "rb") as f:
            with create_progress_bar(
                total=file_size,
                desc=f"Reading {local_path.name}",
                unit=self.config.PROGRESS_BAR_UNIT,
                unit_scale=self.config.PROGRESS_BAR_UNIT_SCALE,
            ) as pbar:
                for chunk in iter(lambda: f.read(self.config.CHUNK_SIZE), b""):
                    chunks.append(chunk)
                    pbar.update(len(chunk))
        return b"".join(chunks)

    def _read_source(self, source: FileSource, name: Optional[str]) -> Tuple[str, bytes]:
        try:
            if hasattr(source, "read"):
                content = source.read()
                name = name or Path(getattr(source, "name", "") or "untitled").name
            else:
                path = Path(source)
                content = self._read_file_chunks(path)
                name = name or path.name
        except OSError as e:
            raise UploadError(f"Cannot read {name or source}: {e}") from e
        return name, content

    @error_policy(ErrorPolicy.NORMALIZE)
    def upload_file(
        self,
        drive,
        file: FileSource,
        parent_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> OperationResult:
        """
        Upload a local file to Google Drive.

        The whole content is read into memory and sent as a single
        multipart request.

        Args:
            file (FileSource): Path to a local file, or a binary file object
            parent_id (Optional[str]): Destination folder. Defaults to the Drive root.
            name (Optional[str]): Name on Drive. Defaults to the local file name.

        Returns:
            OperationResult: Id of the uploaded file, or the error message

        Example:
            ```python
            result = ops.upload_file("report.pdf", parent_id=folder_id)
            ```
        """
        name, content = self._read_source(file, name)
        mime_type = mimetypes.guess_type(name)[0] or DEFAULT_MIME_TYPE

        body = {"name": name}
        if parent_id:
            body["parents"] = [parent_id]

        res = drive.create(
            body,
            content=content,
            mime_type=mime_type,
            fields="id",
            supportsAllDrives=True,
        )
        logger.info(f"Uploaded {name} ({len(content)} bytes) as {res['id']}")
        return OperationResult.ok(res["id"])

    @error_policy(ErrorPolicy.NORMALIZE)
    def set_starred(self, drive, file_id: str, starred: bool) -> OperationResult:
        """
        Star or unstar a file.

        Returns:
            OperationResult: Id of the updated file, or the error message
        """
        res = drive.update(file_id, {"starred": starred}, supportsAllDrives=True)
        return OperationResult.ok(res["id"])

    @error_policy(ErrorPolicy.PROPAGATE)
    def download_file(self, drive, file_id: str, dest_dir: Optional[str] = None) -> str:
        """
        Download a file to a local directory.

        Metadata and content are fetched with the same client. Regular
        files are downloaded as-is. Native Google documents (files
        with export links) are exported to the matching office or image
        format and named ``<name><extension>``.

        Args:
            file_id (str): File to download
            dest_dir (Optional[str]): Directory prefix, concatenated with the
                file name as-is. Defaults to ``Config.DOWNLOAD_DIR``.

        Returns:
            str: Path of the written file

        Raises:
            googleapiclient.errors.HttpError: If fetching or exporting fails
            ExportFormatError: If the document type cannot be exported
            DownloadError: If the local file cannot be written

        Note:
            Neither the directory nor the file name is sanitized.
        """
        dest_dir = self.config.DOWNLOAD_DIR if dest_dir is None else dest_dir
        drive_file = drive.get(file_id, fields="*", supportsAllDrives=True)

        if not drive_file.get("exportLinks"):
            filename = media_filename(drive_file)
            content = drive.get_media(drive_file["id"])
        else:
            export_format = export_format_for(drive_file.get("mimeType"))
            content = drive.export(drive_file["id"], export_format.mime_type)
            filename = export_filename(
                drive_file["name"],
                export_format.extension,
                dedupe=self.config.DEDUPE_EXPORT_EXTENSION,
            )

        filepath = dest_dir + filename
        self._write_file(filepath, content)
        logger.info(f"Downloaded {file_id} to {filepath}")
        return filepath

    def _write_file(self, filepath: str, content: bytes) -> None:
        chunk_size = self.config.CHUNK_SIZE
        try:
            Path(filepath).parent.mkdir(parents=True, exist_ok=True)
            with open(filepath, "wb") as f:
                with create_progress_bar(
                    total=len(content),
                    desc=f"Writing {Path(filepath).name}",
                    unit=self.config.PROGRESS_BAR_UNIT,
                    unit_scale=self.config.PROGRESS_BAR_UNIT_SCALE,
                ) as pbar:
                    for offset in range(0, len(content), chunk_size):
                        chunk = content[offset : offset + chunk_size]
                        f.write(chunk)
                        pbar.update(len(chunk))
        except OSError as e:
            logger.error(f"Error writing {filepath}: {e}")
            raise DownloadError(f"Cannot write {filepath}: {e}") from e
