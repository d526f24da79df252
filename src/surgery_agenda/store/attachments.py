"""Attachment paths and a filesystem attachment store."""

from pathlib import Path
from typing import BinaryIO

import arrow
from loguru import logger

from surgery_agenda.exceptions import ResourceNotFoundError, StoreWriteError
from surgery_agenda.settings import Settings
from surgery_agenda.store.interface import AttachmentStore
from surgery_agenda.utils.text import sanitize_filename


def attachment_path(owner_id: str, filename: str, timestamp_ms: int | None = None) -> str:
    """Reference path ``{owner_id}/{epoch_ms}-{sanitized_filename}``.

    Args:
        owner_id: Id of the uploading user
        filename: Original file name
        timestamp_ms: Upload time in epoch milliseconds (defaults to now)
    """
    if timestamp_ms is None:
        timestamp_ms = int(arrow.utcnow().float_timestamp * 1000)
    return f"{owner_id}/{timestamp_ms}-{sanitize_filename(filename)}"


class LocalAttachmentStore(AttachmentStore):
    """Stores attachments as files below ``base_dir``."""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalAttachmentStore":
        """Build the store rooted at ``attachments_dir``."""
        return cls(settings.attachments_dir)

    def upload(self, owner_id: str, filename: str, data: bytes | BinaryIO) -> str:
        path = attachment_path(owner_id, filename)
        target = self.base_dir / path
        content = data if isinstance(data, bytes) else data.read()
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            logger.error(f"Attachment upload failed for {path}: {e}")
            raise StoreWriteError("upload", str(e)) from e
        logger.debug(f"Stored attachment {path} ({len(content)} bytes)")
        return path

    def open(self, path: str) -> bytes:
        """Read back a stored attachment by its reference path."""
        target = self.base_dir / path
        if not target.is_file():
            raise ResourceNotFoundError("Attachment", path)
        return target.read_bytes()
