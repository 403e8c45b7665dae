from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from codepad.errors import PersistenceError
from codepad.executor import SimulatedExecutor
from codepad.languages import Language
from codepad.session import DEGRADED_MESSAGE, EditorSession
from codepad.storage import (
    GCSStorageBackend,
    LocalStorageBackend,
    MemoryStorageBackend,
    build_storage,
)


def test_local_backend_round_trip(tmp_path):
    backend = LocalStorageBackend(tmp_path / "store")
    assert backend.read_string("code-python") is None
    backend.write_string("code-python", "print('ü')")
    backend.write_string("code-python", "print(2)")
    assert backend.read_string("code-python") == "print(2)"
    assert LocalStorageBackend(tmp_path / "store").read_string("code-python") == "print(2)"


def test_local_backend_write_failure_raises_persistence_error(tmp_path):
    base = tmp_path / "store"
    backend = LocalStorageBackend(base)
    base.rmdir()
    base.write_text("not a directory")
    with pytest.raises(PersistenceError) as excinfo:
        backend.write_string("editor-theme", "light")
    assert excinfo.value.key == "editor-theme"
    assert backend.read_string("editor-theme") is None


@pytest.mark.parametrize("key", ["../escape", "", ".hidden", "a/b"])
def test_invalid_keys_are_rejected(tmp_path, key):
    backend = LocalStorageBackend(tmp_path)
    with pytest.raises(ValueError):
        backend.write_string(key, "x")


def test_memory_backend_unavailable():
    backend = MemoryStorageBackend({"editor-theme": "dark"})
    backend.available = False
    with pytest.raises(PersistenceError):
        backend.write_string("editor-theme", "light")
    assert backend.read_string("editor-theme") == "dark"


def test_build_storage_selects_backend(tmp_path):
    memory = build_storage(SimpleNamespace(storage_backend="memory"))
    assert isinstance(memory, MemoryStorageBackend)
    local = build_storage(
        SimpleNamespace(storage_backend="local", storage_path=str(tmp_path / "s"))
    )
    assert isinstance(local, LocalStorageBackend)
    assert (tmp_path / "s").is_dir()


def test_local_backend_corrupt_file_reads_as_missing(tmp_path):
    (tmp_path / "code-python.txt").write_bytes(b"\xff\xfe print")
    backend = LocalStorageBackend(tmp_path)
    assert backend.read_string("code-python") is None

    session = EditorSession(backend, SimulatedExecutor(0, 0), language=Language.PYTHON)
    assert session.text == Language.PYTHON.template


def test_local_backend_unreadable_path_reads_as_missing(tmp_path):
    (tmp_path / "code-java.txt").mkdir()
    assert LocalStorageBackend(tmp_path).read_string("code-java") is None


def test_local_backend_unencodable_text_raises_persistence_error(tmp_path):
    backend = LocalStorageBackend(tmp_path)
    with pytest.raises(PersistenceError) as excinfo:
        backend.write_string("code-python", "x = '\ud800'")
    assert excinfo.value.key == "code-python"
    assert list(tmp_path.iterdir()) == []


def test_unencodable_text_degrades_session(tmp_path):
    backend = LocalStorageBackend(tmp_path)

    async def scenario():
        session = EditorSession(backend, SimulatedExecutor(0, 0), language=Language.PYTHON)
        session.edit("x = '\ud800'")
        session.documents.flush()
        session.switch_language("java")
        session.switch_language("python")
        return session

    session = asyncio.run(scenario())
    assert session.documents.degraded
    assert session.text == "x = '\ud800'"
    warnings = [n.message for n in session.notices.drain() if n.level == "warning"]
    assert warnings == [DEGRADED_MESSAGE]
    assert list(tmp_path.iterdir()) == []


class _Blob:
    def __init__(self, name, error):
        self.name = name
        self.error = error

    def exists(self):
        raise self.error

    def upload_from_string(self, value, content_type=None):
        raise self.error


class _Bucket:
    name = "editor-bucket"

    def __init__(self, error):
        self.error = error

    def blob(self, name):
        return _Blob(name, self.error)


def _gcs_backend(error) -> GCSStorageBackend:
    backend = GCSStorageBackend.__new__(GCSStorageBackend)
    backend.bucket = _Bucket(error)
    backend.prefix = "codepad/"
    return backend


def test_gcs_backend_read_error_reads_as_missing():
    backend = _gcs_backend(ConnectionError("gcs unreachable"))
    assert backend.read_string("editor-theme") is None


def test_gcs_backend_write_error_raises_persistence_error():
    backend = _gcs_backend(ConnectionError("gcs unreachable"))
    with pytest.raises(PersistenceError) as excinfo:
        backend.write_string("code-cpp", "int main() {}")
    assert "gcs unreachable" in excinfo.value.reason
