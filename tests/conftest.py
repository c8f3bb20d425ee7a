# tests/conftest.py
import threading

import pytest

from promptsync.config.loader import reset_config_cache
from promptsync.core.session import PromptSession


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keeps config and logs out of the real user directory."""
    home = tmp_path / "promptsync_home"
    monkeypatch.setenv("PROMPTSYNC_HOME", str(home))
    monkeypatch.delenv("PROMPTSYNC_MATCH_MODE", raising=False)
    monkeypatch.delenv("PROMPTSYNC_LOG_LEVEL", raising=False)
    reset_config_cache()
    yield home
    reset_config_cache()


@pytest.fixture
def changed():
    """An Event plus a callback that sets it, for waiting on the watcher thread."""
    event = threading.Event()
    return event, event.set


@pytest.fixture
def session(changed):
    _, on_change = changed
    s = PromptSession(on_change=on_change)
    s.start()
    yield s
    s.stop()


@pytest.fixture
def project_dir(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    (root / "a.py").write_text("print(1)", encoding="utf-8")
    (root / "b.py").write_text("print(2)", encoding="utf-8")
    return root
