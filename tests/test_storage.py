"""
Tests for the report file storage backends.
"""

import pytest

from app.core.storage import LocalStorage, StorageError, get_content_type


class TestLocalStorage:

    def test_save_and_download(self, tmp_path):
        storage = LocalStorage(str(tmp_path))

        path = storage.save_file(b"Name,Score\n", "scores.csv")

        assert path.endswith("_scores.csv")
        assert storage.file_exists(path)
        assert storage.download_file(path).read() == b"Name,Score\n"

    def test_delete(self, tmp_path):
        storage = LocalStorage(str(tmp_path))
        path = storage.save_file(b"{}", "report.json")

        assert storage.delete_file(path) is True
        assert storage.delete_file(path) is False
        assert not storage.file_exists(path)

    def test_download_missing_file(self, tmp_path):
        storage = LocalStorage(str(tmp_path))

        with pytest.raises(StorageError):
            storage.download_file(str(tmp_path / "missing.csv"))


@pytest.mark.parametrize("filename,content_type", [
    ("report.csv", "text/csv"),
    ("report.JSON", "application/json"),
    ("report.bin", "application/octet-stream"),
])
def test_get_content_type(filename, content_type):
    assert get_content_type(filename) == content_type
