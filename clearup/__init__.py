"""
ClearUp - find large files under a directory tree and clean them up.
"""
from .classifier import Advice, CleanLevel, classify_cleanliness, file_type, should_ignore_subtree
from .config import Config
from .enumerator import DirectoryEnumerator
from .events import CallbackSink, EventRecorder, EventSink
from .models import (ClearUpError, InvalidInput, IOFailure, MatchRecord, OperationDenied,
                     OperationResult, ProgressSnapshot, ScanState, ScanSummary)
from .operations import OperationGate
from .scan_manager import ScanManager
from .scanner import ScanEngine, ScanSession

__version__ = '1.0.0'
