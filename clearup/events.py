"""
Event sinks for ClearUp scans

A scan reports to one sink: zero or more match batches and progress
snapshots, then exactly one done event.
"""
import threading
from typing import Any, Callable, Dict, List, Optional

from colorama import Fore, Style
from tqdm import tqdm

from .models import MatchRecord, ProgressSnapshot, ScanSummary
from .utils import format_file_size


class EventSink:
    """Receives scan events; override the callbacks you need"""

    def on_match_batch(self, session_id: str, batch: List[MatchRecord]):
        pass

    def on_progress(self, session_id: str, snapshot: ProgressSnapshot):
        pass

    def on_done(self, session_id: str, summary: ScanSummary):
        pass


class CallbackSink(EventSink):
    """Forwards events to plain functions"""

    def __init__(self, on_match_batch: Callable = None, on_progress: Callable = None,
                 on_done: Callable = None):
        self._match_batch = on_match_batch
        self._progress = on_progress
        self._done = on_done

    def on_match_batch(self, session_id, batch):
        if self._match_batch:
            self._match_batch(session_id, batch)

    def on_progress(self, session_id, snapshot):
        if self._progress:
            self._progress(session_id, snapshot)

    def on_done(self, session_id, summary):
        if self._done:
            self._done(session_id, summary)


class EventRecorder(EventSink):
    """
    Keeps an ordered log of a session's events for polling consumers.

    Consecutive progress snapshots collapse into one entry: a new snapshot
    replaces the previous one under a fresh sequence number, so the log
    grows with match batches, not with files scanned.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._seq = 0
        self.events: List[Dict[str, Any]] = []
        self.matches: List[MatchRecord] = []
        self.progress: Optional[ProgressSnapshot] = None
        self.summary: Optional[ScanSummary] = None

    def _record(self, session_id: str, event_type: str, data: Any):
        self._seq += 1
        if event_type == 'progress' and self.events and self.events[-1]['type'] == 'progress':
            self.events.pop()
        self.events.append({
            'seq': self._seq,
            'type': event_type,
            'session_id': session_id,
            'data': data,
        })

    def on_match_batch(self, session_id, batch):
        with self._lock:
            self._record(session_id, 'matchBatch', [m.to_dict() for m in batch])
            self.matches.extend(batch)

    def on_progress(self, session_id, snapshot):
        with self._lock:
            self._record(session_id, 'progress', snapshot.to_dict())
            self.progress = snapshot

    def on_done(self, session_id, summary):
        with self._lock:
            self._record(session_id, 'done', summary.to_dict())
            self.summary = summary

    def events_since(self, seq: int = 0) -> List[Dict[str, Any]]:
        """Logged events with a sequence number above seq, oldest first"""
        with self._lock:
            start = len(self.events)
            while start > 0 and self.events[start - 1]['seq'] > seq:
                start -= 1
            return self.events[start:]

    def event_types(self) -> List[str]:
        with self._lock:
            return [e['type'] for e in self.events]

    def snapshot_matches(self) -> List[MatchRecord]:
        with self._lock:
            return list(self.matches)


class ConsoleSink(EventSink):
    """Terminal output for the CLI: a tqdm bar plus a coloured line per match"""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.matches: List[MatchRecord] = []
        self.summary: Optional[ScanSummary] = None
        self._bar = tqdm(desc="Scanning files", unit="file")

    def on_match_batch(self, session_id, batch):
        self.matches.extend(batch)
        for match in batch:
            self._bar.write(f"{Fore.GREEN}✅ {format_file_size(match.size_bytes):>10}  "
                            f"{match.path}{Style.RESET_ALL}")

    def on_progress(self, session_id, snapshot):
        delta = snapshot.processed - self._bar.n
        if delta > 0:
            self._bar.update(delta)

    def on_done(self, session_id, summary):
        self.summary = summary
        self._bar.close()
