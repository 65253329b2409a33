"""
Core scanning functionality for ClearUp
"""
import os
import threading
import time
import uuid
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from functools import partial
from typing import Deque, FrozenSet, List, Optional, Set

from .classifier import should_ignore_subtree
from .enumerator import DirectoryEnumerator
from .events import EventSink
from .models import (DirEntryInfo, EntryKind, InvalidInput, MatchRecord,
                     ProgressSnapshot, ScanState, ScanSummary)


class ScanSession:
    """
    State of one scan invocation.

    Everything mutable is guarded by ``lock``; worker threads of the session
    are the only writers, apart from ``revoke`` which the operation gate uses
    once a file has been removed.
    """

    def __init__(self, session_id: str, root: str, threshold_bytes: int,
                 sink: EventSink, max_workers: int):
        self.session_id = session_id
        self.root = root
        self.threshold_bytes = threshold_bytes
        self.sink = sink
        self.max_workers = max_workers
        self.start_time = time.time()

        self.running = True
        self.paused = False
        self.stop_requested = False
        self.cancelled = False
        self.finished = False
        self.summary: Optional[ScanSummary] = None

        self.allowed_paths: Set[str] = set()
        self.processed_files = 0
        self.pending_files = 0
        self.matches = 0

        self.queue: Deque[str] = deque()
        self.in_flight = 0
        self.match_buffer: List[MatchRecord] = []
        self.last_flush: Optional[float] = None

        self.lock = threading.RLock()
        self.resumed = threading.Condition(self.lock)
        self.done_event = threading.Event()
        self.executor = ThreadPoolExecutor(max_workers=max_workers,
                                           thread_name_prefix=f"clearup-{session_id[-8:]}")

    @property
    def state(self) -> ScanState:
        with self.lock:
            if self.finished:
                return ScanState.DONE
            if self.paused:
                return ScanState.PAUSED
            return ScanState.RUNNING

    def progress(self) -> ProgressSnapshot:
        with self.lock:
            return ProgressSnapshot.from_counts(self.processed_files, self.pending_files)

    def is_allowed(self, path: str) -> bool:
        with self.lock:
            return path in self.allowed_paths

    def allowed_snapshot(self) -> FrozenSet[str]:
        with self.lock:
            return frozenset(self.allowed_paths)

    def revoke(self, path: str):
        """Drop a path from the allow-list after it was deleted or moved"""
        with self.lock:
            self.allowed_paths.discard(path)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the session is done; False on timeout"""
        return self.done_event.wait(timeout)


class ScanEngine:
    """Finds files at or above a size threshold with a bounded pool of directory workers"""

    def __init__(self, sink: Optional[EventSink] = None, max_workers: int = 8,
                 batch_interval: float = 0.1, verbose: bool = False):
        if max_workers < 1:
            raise InvalidInput("max_workers must be at least 1")
        self.sink = sink or EventSink()
        self.max_workers = max_workers
        self.batch_interval = batch_interval
        self.verbose = verbose
        self.enumerator = DirectoryEnumerator(verbose=verbose)
        self._lock = threading.Lock()
        self._session: Optional[ScanSession] = None

    @property
    def current_session(self) -> Optional[ScanSession]:
        with self._lock:
            return self._session

    @property
    def state(self) -> ScanState:
        session = self.current_session
        return ScanState.IDLE if session is None else session.state

    def start(self, root_dir, threshold_bytes: int, sink: Optional[EventSink] = None,
              max_workers: Optional[int] = None) -> str:
        """Start a new scan and return its id; the traversal runs on worker threads"""
        if not root_dir or not isinstance(root_dir, (str, os.PathLike)):
            raise InvalidInput("Invalid rootDir")
        if isinstance(threshold_bytes, bool) or not isinstance(threshold_bytes, int) \
                or threshold_bytes <= 0:
            raise InvalidInput("Threshold must be a positive number of bytes")
        max_workers = max_workers or self.max_workers
        if max_workers < 1:
            raise InvalidInput("max_workers must be at least 1")
        root = os.path.abspath(os.fspath(root_dir))
        if not os.path.exists(root):
            raise InvalidInput("Directory not found")
        if not os.path.isdir(root):
            raise InvalidInput("Not a directory")

        session = ScanSession(self._generate_scan_id(), root, threshold_bytes,
                              sink or self.sink, max_workers)
        previous = self.current_session
        if previous is not None:
            self._retire(previous)
        with self._lock:
            displaced, self._session = self._session, session
        # a concurrent start may have installed a session in between
        if displaced is not None and displaced is not previous:
            self._retire(displaced)

        if self.verbose:
            print(f"🔍 Scanning path: {root} (threshold {threshold_bytes} bytes)")
        if not should_ignore_subtree(root):
            session.queue.append(root)
        self._pump(session)
        return session.session_id

    def stop(self):
        """Cancel the current scan cooperatively; queued directories are dropped"""
        session = self.current_session
        if session is not None:
            self._retire(session)

    def pause(self):
        session = self.current_session
        if session is None:
            return
        with session.lock:
            if session.finished or not session.running or session.paused:
                return
            session.paused = True
            self._flush(session, force=True)
        if self.verbose:
            print(f"⏸️  Paused scan: {session.session_id}")

    def resume(self):
        session = self.current_session
        if session is None:
            return
        with session.lock:
            if session.finished or not session.paused:
                return
            session.paused = False
            session.resumed.notify_all()
        if self.verbose:
            print(f"▶️  Resumed scan: {session.session_id}")
        self._pump(session)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current session is done"""
        session = self.current_session
        return True if session is None else session.wait(timeout)

    def _retire(self, session: ScanSession):
        with session.lock:
            if session.finished:
                return
            session.running = False
            session.stop_requested = True
            session.resumed.notify_all()
        if self.verbose:
            print(f"⏹️  Stopping scan: {session.session_id}")
        self._pump(session)

    def _pump(self, session: ScanSession):
        """Hand queued directories to free workers; finish once nothing is left"""
        claimed = []
        with session.lock:
            if session.finished:
                return
            if not session.running and session.queue:
                session.queue.clear()
                session.cancelled = True
            while (session.running and not session.paused and session.queue
                   and session.in_flight < session.max_workers):
                claimed.append(session.queue.popleft())
                session.in_flight += 1
            if session.in_flight == 0 and not session.queue:
                self._finish(session)
                return

        for dir_path in claimed:
            future = session.executor.submit(self._process_directory, session, dir_path)
            future.add_done_callback(partial(self._task_done, session))

    def _task_done(self, session: ScanSession, future):
        error = future.exception()
        if error is not None:
            print(f"⚠️  Error scanning directory: {error}")
        with session.lock:
            session.in_flight -= 1
            if not session.finished:
                self._flush(session, force=False)
        self._pump(session)

    def _checkpoint(self, session: ScanSession) -> bool:
        """Block while paused; False once the session has been stopped"""
        with session.lock:
            while session.paused and session.running:
                session.resumed.wait()
            if not session.running:
                session.cancelled = True
                return False
            return True

    def _process_directory(self, session: ScanSession, dir_path: str):
        entries = self.enumerator.enumerate(dir_path)
        try:
            while self._checkpoint(session):
                entry = next(entries, None)
                if entry is None:
                    break
                if entry.kind is EntryKind.DIRECTORY:
                    if not should_ignore_subtree(entry.path):
                        self._enqueue(session, entry.path)
                elif entry.kind is EntryKind.FILE and self._checkpoint(session):
                    self._process_file(session, entry)
        finally:
            entries.close()

    def _enqueue(self, session: ScanSession, dir_path: str):
        with session.lock:
            if not session.running:
                return
            session.queue.append(dir_path)
            self._flush(session, force=False)
        self._pump(session)

    def _process_file(self, session: ScanSession, entry: DirEntryInfo):
        with session.lock:
            session.pending_files += 1

        file_stat = self.enumerator.stat(entry)

        with session.lock:
            # a file that vanished or stopped being a regular file counts as processed
            if file_stat is not None and file_stat.size_bytes >= session.threshold_bytes:
                session.allowed_paths.add(entry.path)
                session.matches += 1
                session.match_buffer.append(MatchRecord(
                    name=entry.name,
                    path=entry.path,
                    size_bytes=file_stat.size_bytes,
                    modified_at_millis=file_stat.modified_at_millis,
                ))
                if self.verbose:
                    print(f"✅ Found: {entry.path} ({file_stat.size_bytes} bytes)")
            session.processed_files += 1
            session.pending_files -= 1
            self._flush(session, force=False)
            self._emit(session, 'on_progress', ProgressSnapshot.from_counts(
                session.processed_files, session.pending_files))

    def _flush(self, session: ScanSession, force: bool):
        if not session.match_buffer:
            return
        now = time.monotonic()
        if force or session.last_flush is None or now - session.last_flush >= self.batch_interval:
            batch = list(session.match_buffer)
            session.match_buffer.clear()
            session.last_flush = now
            self._emit(session, 'on_match_batch', batch)

    def _finish(self, session: ScanSession):
        # caller holds session.lock
        session.finished = True
        if session.stop_requested:
            session.cancelled = True
        session.running = False
        session.paused = False
        self._flush(session, force=True)
        session.summary = ScanSummary(
            processed=session.processed_files,
            matches=session.matches,
            cancelled=session.cancelled,
        )
        self._emit(session, 'on_done', session.summary)
        session.done_event.set()
        session.executor.shutdown(wait=False)
        if self.verbose:
            state = 'cancelled' if session.cancelled else 'complete'
            print(f"🎯 Scan {state}: {session.matches} of {session.processed_files} files matched")

    def _emit(self, session: ScanSession, callback: str, payload):
        try:
            getattr(session.sink, callback)(session.session_id, payload)
        except Exception as e:
            print(f"Error in event sink ({callback}): {e}")

    def _generate_scan_id(self) -> str:
        """Generate unique scan ID"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        random_suffix = uuid.uuid4().hex[:8]
        return f"scan_{timestamp}_{random_suffix}"
