"""Shared fixtures: a small web root plus a secret file outside it."""

from pathlib import Path

import pytest


@pytest.fixture
def web_root(tmp_path: Path) -> Path:
    """Directory tree served by mounts in the tests.

    tmp_path/
        secret.txt            <- outside the root
        www/
            index.html
            test.txt
            empty/
            docs/index.htm
    """
    (tmp_path / "secret.txt").write_text("TOP SECRET\n")

    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_text("Index of files.\n")
    (root / "test.txt").write_text("This is a test.\n")
    (root / "empty").mkdir()

    docs = root / "docs"
    docs.mkdir()
    (docs / "index.htm").write_text("<h1>Docs</h1>")

    return root
