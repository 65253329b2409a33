"""
Data models and errors for ClearUp
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ClearUpError(Exception):
    """Base class for ClearUp errors"""


class InvalidInput(ClearUpError, ValueError):
    """Bad root, threshold or argument shape; nothing was started"""


class OperationDenied(ClearUpError):
    """Path is not eligible for a destructive operation"""


class IOFailure(ClearUpError):
    """Underlying filesystem call failed during an operation"""


class EntryKind(Enum):
    DIRECTORY = 'directory'
    FILE = 'file'
    SYMLINK = 'symlink'
    OTHER = 'other'
    ERROR = 'error'


class ScanState(Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    PAUSED = 'paused'
    DONE = 'done'


@dataclass(frozen=True)
class DirEntryInfo:
    """One entry of a directory listing"""
    name: str
    path: str
    kind: EntryKind


@dataclass(frozen=True)
class FileStat:
    size_bytes: int
    modified_at_millis: float


@dataclass(frozen=True)
class MatchRecord:
    """A file at or above the size threshold, as seen at scan time"""
    name: str
    path: str
    size_bytes: int
    modified_at_millis: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'path': self.path,
            'size': self.size_bytes,
            'mtimeMs': self.modified_at_millis,
        }


@dataclass(frozen=True)
class ProgressSnapshot:
    processed: int
    pending: int
    percent: float

    @classmethod
    def from_counts(cls, processed: int, pending: int) -> 'ProgressSnapshot':
        total = processed + pending
        percent = processed / total if total else 0.0
        return cls(processed=processed, pending=pending, percent=percent)

    def to_dict(self) -> Dict[str, Any]:
        return {'processed': self.processed, 'pending': self.pending, 'percent': self.percent}


@dataclass(frozen=True)
class ScanSummary:
    """Terminal event payload"""
    processed: int
    matches: int
    cancelled: bool

    def to_dict(self) -> Dict[str, Any]:
        return {'processed': self.processed, 'matches': self.matches, 'cancelled': self.cancelled}


@dataclass
class OperationResult:
    """Outcome of an operation on a single path"""
    path: str
    ok: bool
    error: Optional[str] = None
    to: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'path': self.path, 'ok': self.ok}
        if self.error is not None:
            result['error'] = self.error
        if self.to is not None:
            result['to'] = self.to
        return result
