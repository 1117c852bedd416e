"""Root test configuration: isolate each test from the caller's cwd and MDFRONT_* env vars"""

import os

import pytest


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run every test from an empty directory with no MDFRONT_* overrides set."""
    for name in list(os.environ):
        if name.startswith("MDFRONT_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    yield
