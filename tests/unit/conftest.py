"""
Unit test fixtures and configuration.

Fixtures specific to unit tests (fast, isolated tests).
"""

import io
import tarfile
from unittest.mock import MagicMock

import pytest
import requests

# ============================================================================
# Archive builders
# ============================================================================

def make_tar_gz(members):
    """
    Build a .tar.gz in memory.

    ``members`` is a list of (name, content) pairs; content is bytes for a
    regular file, None for a directory, or a TarInfo for full control.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in members:
            if isinstance(content, tarfile.TarInfo):
                tar.addfile(content)
            elif content is None:
                info = tarfile.TarInfo(name)
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info = tarfile.TarInfo(name)
                info.size = len(content)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


@pytest.fixture
def tar_gz():
    return make_tar_gz


@pytest.fixture
def foo_archive():
    """A PDF set 'Foo' with a top-level directory, a.dat and sub/b.dat."""
    return make_tar_gz([
        ("Foo", None),
        ("Foo/a.dat", b"alpha\n"),
        ("Foo/sub", None),
        ("Foo/sub/b.dat", b"beta\n"),
    ])


# ============================================================================
# HTTP mocks
# ============================================================================

def make_response(body=b"", status=200, headers=None, chunk_size=7, error=None):
    """
    Fake streamed requests.Response.

    ``error`` is raised from iter_content after the first chunk, mimicking a
    connection that drops mid-transfer.
    """
    response = MagicMock()
    response.status_code = status
    response.headers = dict(headers or {})

    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    else:
        response.raise_for_status.return_value = None

    def iter_content(chunk_size=chunk_size):
        chunks = [body[i:i + 7] for i in range(0, len(body), 7)]
        for index, chunk in enumerate(chunks):
            if error is not None and index == 1:
                raise error
            yield chunk

    response.iter_content.side_effect = iter_content
    return response


@pytest.fixture
def fake_response():
    return make_response


@pytest.fixture
def mock_session():
    """A requests.Session stand-in; set ``get.return_value`` / ``side_effect`` per test."""
    return MagicMock(spec=requests.Session)


# ============================================================================
# Common Mock Fixtures
# ============================================================================

@pytest.fixture
def mock_logger():
    """Create a mock logger for unit tests."""
    return MagicMock()


@pytest.fixture
def project_root(tmp_path):
    """A project tree with src/*.cc and include/LHAPDF/LHAPDF.h."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "include" / "LHAPDF").mkdir(parents=True)
    for name in ("PDF.cc", "Config.cc", "Paths.cc"):
        (root / "src" / name).write_text(f"// {name}\n")
    (root / "src" / "notes.txt").write_text("not a source\n")
    (root / "include" / "LHAPDF" / "LHAPDF.h").write_text("#pragma once\n")
    return root
