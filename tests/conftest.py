import json
import os

import pytest

# Fixed, well-separated mtimes so invalidation tests do not depend on the
# filesystem's timestamp resolution.
BASE_MTIME = 1_700_000_000


@pytest.fixture
def box_dir(tmp_path):
    d = tmp_path / "boxes"
    d.mkdir()
    return d


@pytest.fixture
def write_box(box_dir):
    """
    Write one ``*.metadata.json`` description file and return its path.
    """

    def _write(name, version, description=None, providers=None, filename=None, mtime=BASE_MTIME):
        data = {"name": name, "version": version}
        if description is not None:
            data["description"] = description
        if providers is None:
            providers = [{"name": "virtualbox", "file": f"{name}-{version}.box"}]
        data["providers"] = providers

        path = box_dir / (filename or f"{name}-{version}.metadata.json")
        path.write_text(json.dumps(data), encoding="utf-8")
        os.utime(path, (mtime, mtime))
        return path

    return _write


@pytest.fixture
def touch():
    """Advance a file's mtime by ``seconds``."""

    def _touch(path, seconds=60):
        mtime = path.stat().st_mtime + seconds
        os.utime(path, (mtime, mtime))

    return _touch
