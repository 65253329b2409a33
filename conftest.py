"""
Shared pytest fixtures for ClearUp
"""
import threading
from pathlib import Path

import pytest

from clearup.events import EventRecorder


def make_file(path: Path, size: int) -> Path:
    """Create a (sparse) file of exactly ``size`` bytes"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'wb') as f:
        f.truncate(size)
    return path


class ControlSink(EventRecorder):
    """Recorder that calls ``action`` from inside the first progress event"""

    def __init__(self, action=None):
        super().__init__()
        self.action = action
        self.triggered = threading.Event()
        self.done = threading.Event()

    def on_progress(self, session_id, snapshot):
        super().on_progress(session_id, snapshot)
        if self.action is not None and not self.triggered.is_set():
            self.triggered.set()
            self.action()

    def on_done(self, session_id, summary):
        super().on_done(session_id, summary)
        self.done.set()


@pytest.fixture
def wide_tree(tmp_path):
    """
    Many directories with a mix of big (2048 bytes) and small (10 bytes) files.

    Returns (root, expected set of big file paths) for a 1024 byte threshold.
    """
    root = tmp_path / "wide"
    expected = set()
    for d in range(6):
        for sub in ('', 'inner', 'inner/deeper'):
            folder = root / f"dir{d}" / sub if sub else root / f"dir{d}"
            for i in range(8):
                size = 2048 if i % 2 == 0 else 10
                path = make_file(folder / f"file{i}.bin", size)
                if size >= 1024:
                    expected.add(str(path))
    return root, expected


@pytest.fixture
def scenario_tree(tmp_path):
    """a.bin (2 GiB), b.txt (10 KiB) and node_modules/c.bin (3 GiB)"""
    root = tmp_path / "scenario"
    make_file(root / "a.bin", 2 * 1024 ** 3)
    make_file(root / "b.txt", 10 * 1024)
    make_file(root / "node_modules" / "c.bin", 3 * 1024 ** 3)
    return root
