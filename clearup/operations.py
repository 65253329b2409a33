"""
File operations on scan results

Only paths the current scan has reported as matches may be deleted, trashed
or moved. Every batch is processed path by path; one failure never stops
the rest.
"""
import errno
import os
import shutil
import stat
from typing import Callable, List, Optional

import click
from send2trash import send2trash

from .models import InvalidInput, IOFailure, OperationDenied, OperationResult
from .scanner import ScanEngine, ScanSession
from .utils import is_root_path


NOT_ALLOWED = 'Not allowed'
FORBIDDEN_PATH = 'Forbidden path'
NOT_A_FILE = 'Not a file'


def _is_regular_file(path: str) -> bool:
    try:
        return stat.S_ISREG(os.lstat(path).st_mode)
    except OSError:
        return False


def _check_paths(paths) -> List[str]:
    if not isinstance(paths, (list, tuple)) or len(paths) == 0:
        raise InvalidInput("No paths")
    return list(paths)


def safe_rename(src: str, dest: str):
    """
    Rename src to dest, copying across volumes when a rename is impossible.

    The source is only unlinked after the copy has completed and its size
    matches, so a failure leaves the original in place.
    """
    if os.path.lexists(dest):
        raise IOFailure(f"File exists: {dest}")
    os.makedirs(os.path.dirname(dest) or '.', exist_ok=True)
    try:
        os.rename(src, dest)
        return
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise

    try:
        shutil.copy2(src, dest)
        if os.path.getsize(dest) != os.path.getsize(src):
            raise IOFailure(f"Incomplete copy: {dest}")
    except (OSError, IOFailure):
        if os.path.exists(dest):
            os.unlink(dest)
        raise
    os.unlink(src)


class OperationGate:
    """Authorizes and performs destructive operations against the current scan"""

    def __init__(self, engine: ScanEngine, verbose: bool = False):
        self.engine = engine
        self.verbose = verbose

    def authorize(self, paths, session: Optional[ScanSession] = None) -> List[OperationResult]:
        paths = _check_paths(paths)
        session = session or self.engine.current_session
        return [
            OperationResult(path=p, ok=True) if session is not None and session.is_allowed(p)
            else OperationResult(path=p, ok=False, error=NOT_ALLOWED)
            for p in paths
        ]

    def require(self, path: str, session: Optional[ScanSession] = None) -> ScanSession:
        """Raise OperationDenied unless path may be operated on right now"""
        session = session or self.engine.current_session
        if session is None or not session.is_allowed(path):
            raise OperationDenied(NOT_ALLOWED)
        if is_root_path(path):
            raise OperationDenied(FORBIDDEN_PATH)
        if not _is_regular_file(path):
            raise OperationDenied(NOT_A_FILE)
        return session

    def delete(self, paths) -> List[OperationResult]:
        return self._run(_check_paths(paths), 'delete', os.unlink)

    def trash(self, paths) -> List[OperationResult]:
        return self._run(_check_paths(paths), 'trash', send2trash)

    def move(self, paths, destination: str) -> List[OperationResult]:
        paths = _check_paths(paths)
        if not destination or not isinstance(destination, str):
            raise InvalidInput("Invalid destination")
        if os.path.exists(destination) and not os.path.isdir(destination):
            raise InvalidInput("Destination not directory")

        def _move(p: str) -> str:
            dest = os.path.join(destination, os.path.basename(p))
            safe_rename(p, dest)
            return dest

        return self._run(paths, 'move', _move)

    def reveal(self, path: str) -> bool:
        """Show the file in the platform file manager"""
        self._check_existing(path)
        click.launch(path, locate=True)
        return True

    def open_path(self, path: str) -> bool:
        """Open the file with its default application"""
        self._check_existing(path)
        click.launch(path)
        return True

    def _check_existing(self, path: str):
        if not path or not isinstance(path, str):
            raise InvalidInput("No path")
        if not os.path.exists(path):
            raise InvalidInput(f"Path not found: {path}")

    def _run(self, paths: List[str], action: str, func: Callable) -> List[OperationResult]:
        results = []
        for p in paths:
            try:
                session = self.require(p)
            except OperationDenied as e:
                results.append(OperationResult(path=p, ok=False, error=str(e)))
                continue
            try:
                moved_to = func(p)
            except Exception as e:
                message = str(e)
                results.append(OperationResult(path=p, ok=False, error=message))
                if self.verbose:
                    print(f"⚠️  {action} failed for {p}: {message}")
                continue
            session.revoke(p)
            results.append(OperationResult(path=p, ok=True, to=moved_to))
            if self.verbose:
                print(f"🧹 {action}: {p}")
        return results
