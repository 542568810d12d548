from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from saferviewer.drive import DriveFile, DriveFolder, TransferTask
from saferviewer.errors import TransferError
from saferviewer.transfer import get_or_create_folder, upload


def http_error(status=500):
    return HttpError(MagicMock(status=status, reason="boom"), b'{"error": "boom"}')


class FakeStorage:
    def __init__(self, existing=None, create_fails=False):
        self.existing = existing or {}
        self.create_fails = create_fails
        self.calls = []

    def find_folder(self, name):
        self.calls.append(("find_folder", name))
        folder_id = self.existing.get(name)
        return DriveFolder(self, folder_id, name) if folder_id else None

    def create_folder(self, name, description=""):
        self.calls.append(("create_folder", name, description))
        if self.create_fails:
            raise http_error()
        return DriveFolder(self, "new-folder-id", name)

    def upload_resumable(self, task, parent_id="", progress=None):
        self.calls.append(("upload_resumable", task.display_title, parent_id))
        if progress is not None:
            progress(512, 1024)
            progress(1024, 1024)
        return DriveFile(id="file-id", name=task.display_title, web_link="https://drive.google.com/file/d/file-id/view")


@pytest.fixture
def report(tmp_path):
    path = tmp_path / "report.pdf"
    path.write_bytes(b"%PDF-1.4")
    return path


def test_task_defaults_title_and_mime(report):
    task = TransferTask.from_path(str(report), None, "SaferViewer")
    assert task.display_title == "report.pdf"
    assert task.mime_type == "application/pdf"
    assert task.destination_folder_name == "SaferViewer"


def test_task_title_override(report):
    assert TransferTask.from_path(str(report), "Q3 numbers").display_title == "Q3 numbers"


@pytest.mark.parametrize("name", ["data.xyz", "README"])
def test_task_unknown_extension_is_octet_stream(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"\x00\x01")
    assert TransferTask.from_path(str(path)).mime_type == "application/octet-stream"


def test_task_rejects_missing_file(tmp_path):
    with pytest.raises(TransferError):
        TransferTask.from_path(str(tmp_path / "gone.txt"))


def test_existing_folder_is_never_created():
    storage = FakeStorage(existing={"SaferViewer": "abc123"})
    folder = get_or_create_folder(storage, "SaferViewer", "cache")
    assert folder.id == "abc123"
    assert storage.calls == [("find_folder", "SaferViewer")]


def test_missing_folder_is_created_once_and_used_as_parent(report):
    storage = FakeStorage()
    task = TransferTask.from_path(str(report), None, "SaferViewer")

    result = upload(storage, task, "SaferViewer Cache directory")

    assert storage.calls == [
        ("find_folder", "SaferViewer"),
        ("create_folder", "SaferViewer", "SaferViewer Cache directory"),
        ("upload_resumable", "report.pdf", "new-folder-id"),
    ]
    assert result.web_link == "https://drive.google.com/file/d/file-id/view"


def test_folder_create_failure_uploads_to_root(report):
    storage = FakeStorage(create_fails=True)
    task = TransferTask.from_path(str(report), None, "SaferViewer")

    upload(storage, task)

    assert storage.calls[-1] == ("upload_resumable", "report.pdf", "")


def test_folder_lookup_failure_propagates():
    storage = MagicMock()
    storage.find_folder.side_effect = http_error()
    with pytest.raises(HttpError):
        get_or_create_folder(storage, "SaferViewer")
    storage.create_folder.assert_not_called()


def test_empty_folder_name_means_root():
    storage = FakeStorage()
    assert get_or_create_folder(storage, "") is None
    assert storage.calls == []


def test_progress_reports_rate(report):
    storage = FakeStorage(existing={"SaferViewer": "abc123"})
    task = TransferTask.from_path(str(report), None, "SaferViewer")
    seen = []

    def rate_factory():
        def rate(num_bytes):
            seen.append(num_bytes)
            return f"{num_bytes} B/s"

        return rate

    upload(storage, task, rate_factory=rate_factory)
    assert seen == [512, 1024]
