"""Tests for the upload progress registry."""

import threading

import pytest

from app.exceptions import UploadNotFoundError
from app.services.upload_registry import UploadRegistry


class TestLifecycle:

    def test_register_starts_uploading_at_zero(self):
        registry = UploadRegistry()
        upload_id = registry.register()
        status = registry.get(upload_id)
        assert status.status == "uploading"
        assert status.progress == 0
        assert status.file_id is None

    def test_update_is_monotonic_and_capped_below_100(self):
        registry = UploadRegistry()
        upload_id = registry.register()
        registry.update(upload_id, 40)
        registry.update(upload_id, 20)
        assert registry.get(upload_id).progress == 40
        registry.update(upload_id, 150)
        assert registry.get(upload_id).progress == 99

    def test_complete_sets_file_id(self):
        registry = UploadRegistry()
        upload_id = registry.register()
        registry.complete(upload_id, "file-abc")
        status = registry.get(upload_id)
        assert status.status == "completed"
        assert status.progress == 100
        assert status.file_id == "file-abc"

    def test_update_after_complete_is_ignored(self):
        registry = UploadRegistry()
        upload_id = registry.register()
        registry.complete(upload_id, "file-abc")
        registry.update(upload_id, 10)
        assert registry.get(upload_id).progress == 100

    def test_fail_records_error(self):
        registry = UploadRegistry()
        upload_id = registry.register()
        registry.fail(upload_id, "disk full")
        status = registry.get(upload_id)
        assert status.status == "failed"
        assert status.error == "disk full"

    def test_release_removes_entry(self):
        registry = UploadRegistry()
        upload_id = registry.register()
        registry.release(upload_id)
        with pytest.raises(UploadNotFoundError):
            registry.get(upload_id)

    def test_unknown_id_raises(self):
        with pytest.raises(UploadNotFoundError):
            UploadRegistry().get("missing")


class TestEviction:

    def test_finished_entries_expire_after_ttl(self):
        registry = UploadRegistry(ttl=10)
        upload_id = registry.register()
        registry.complete(upload_id, "file-1", now=100.0)
        assert registry.get(upload_id, now=105.0).status == "completed"
        with pytest.raises(UploadNotFoundError):
            registry.get(upload_id, now=111.0)

    def test_in_progress_entries_never_expire(self):
        registry = UploadRegistry(ttl=10)
        upload_id = registry.register()
        assert registry.get(upload_id, now=1e12).status == "uploading"


class TestConcurrency:

    def test_parallel_registrations_are_all_kept(self):
        registry = UploadRegistry()
        ids = []
        lock = threading.Lock()

        def worker():
            for _ in range(50):
                upload_id = registry.register()
                registry.update(upload_id, 50)
                with lock:
                    ids.append(upload_id)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(set(ids)) == 400
        assert len(registry) == 400
