"""Tests for attachment paths and the local attachment store."""

import io

import pytest

from surgery_agenda.exceptions import ResourceNotFoundError, StoreWriteError
from surgery_agenda.store import LocalAttachmentStore, attachment_path


def test_attachment_path_convention():
    path = attachment_path("d1", "laudo pré-op.pdf", timestamp_ms=1700000000000)
    assert path == "d1/1700000000000-laudo_pre-op.pdf"


def test_attachment_path_defaults_to_now():
    owner, rest = attachment_path("d1", "x.pdf").split("/")
    timestamp, name = rest.split("-", 1)
    assert owner == "d1"
    assert timestamp.isdigit()
    assert name == "x.pdf"


def test_upload_bytes_and_stream(tmp_path):
    store = LocalAttachmentStore(tmp_path)

    first = store.upload("d1", "a.txt", b"hello")
    second = store.upload("d1", "b.txt", io.BytesIO(b"world"))

    assert store.open(first) == b"hello"
    assert store.open(second) == b"world"
    assert (tmp_path / first).is_file()


def test_upload_failure_raises_store_error(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory")
    store = LocalAttachmentStore(blocker)

    with pytest.raises(StoreWriteError):
        store.upload("d1", "a.txt", b"data")


def test_open_missing_attachment(tmp_path):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        LocalAttachmentStore(tmp_path).open("d1/1-missing.pdf")
    assert exc_info.value.identifier == "d1/1-missing.pdf"


def test_from_settings(utc_settings, tmp_path):
    store = LocalAttachmentStore.from_settings(utc_settings.model_copy(update={"attachments_dir": str(tmp_path / "files")}))

    path = store.upload("d1", "a.txt", b"data")

    assert store.base_dir == tmp_path / "files"
    assert (tmp_path / "files" / path).read_bytes() == b"data"
