import os

import pytest


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep host KEYWORD_AGENT_* variables and any local .env out of tests."""
    for name in list(os.environ):
        if name.startswith("KEYWORD_AGENT_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
