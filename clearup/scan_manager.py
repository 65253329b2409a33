"""
Scan Manager for ClearUp
Single entry point for consumers: scan control, live status and file operations
"""

import os
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .classifier import classify_cleanliness, file_type
from .config import Config
from .events import EventRecorder
from .models import ClearUpError, InvalidInput, ScanState
from .operations import OperationGate
from .reporter import ReportGenerator
from .scanner import ScanEngine
from .utils import format_date, format_file_size, parse_size


class ScanManager:
    """Owns the scan engine and the operation gate; one active scan at a time"""

    def __init__(self, max_workers: int = 8, batch_interval: float = 0.1, verbose: bool = False):
        self.engine = ScanEngine(max_workers=max_workers, batch_interval=batch_interval,
                                 verbose=verbose)
        self.gate = OperationGate(self.engine, verbose=verbose)
        self.config: Optional[Config] = None
        self.recorder = EventRecorder()
        self.session_lock = threading.RLock()
        self._status_callbacks: List[Callable] = []

    def add_status_callback(self, callback: Callable[[Dict[str, Any]], None]):
        """Add callback function to receive status updates"""
        self._status_callbacks.append(callback)

    def _notify_status(self, update: Dict[str, Any]):
        """Notify all registered callbacks about status changes"""
        for callback in self._status_callbacks:
            try:
                callback(update)
            except Exception as e:
                print(f"Error in status callback: {e}")

    def is_scan_running(self) -> bool:
        """Check if a scan is currently running or paused"""
        return self.engine.state in (ScanState.RUNNING, ScanState.PAUSED)

    def start_scan(self, config_dict: dict) -> Dict[str, Any]:
        """Start a new scan; a scan already in progress is cancelled first"""
        with self.session_lock:
            try:
                config = Config.from_dict(config_dict)
                threshold = config.threshold_bytes
                if isinstance(threshold, str):
                    config.threshold_bytes = parse_size(threshold)
                elif isinstance(threshold, float) and threshold.is_integer():
                    config.threshold_bytes = int(threshold)
                recorder = EventRecorder()
                scan_id = self.engine.start(config.scan_path, config.threshold_bytes,
                                            sink=recorder, max_workers=config.max_workers)
            except (TypeError, ClearUpError) as e:
                return {'success': False, 'error': str(e)}

            self.config = config
            self.recorder = recorder

        print(f"Started new scan: {scan_id}")
        print(f"Scanning: {config.scan_path}")
        self._notify_status({'type': 'scan_control', 'action': 'started', 'scan_id': scan_id})
        return {
            'success': True,
            'scan_id': scan_id,
            'status': 'started',
            'message': 'Scan started successfully'
        }

    def _control(self, action: str, func: Callable[[], None]) -> Dict[str, Any]:
        session = self.engine.current_session
        if session is None:
            # stop/pause/resume without a scan are harmless no-ops
            return {'success': True, 'status': 'idle'}
        func()
        print(f"Scan {action}: {session.session_id}")
        self._notify_status({'type': 'scan_control', 'action': action, 'scan_id': session.session_id})
        return {
            'success': True,
            'status': session.state.value,
            'scan_id': session.session_id,
        }

    def stop_scan(self) -> Dict[str, Any]:
        """Stop the currently running scan"""
        return self._control('stopping', self.engine.stop)

    def pause_scan(self) -> Dict[str, Any]:
        return self._control('paused', self.engine.pause)

    def resume_scan(self) -> Dict[str, Any]:
        return self._control('resumed', self.engine.resume)

    def get_current_status(self) -> Dict[str, Any]:
        """Get current scan status with real-time info"""
        session = self.engine.current_session
        if session is None:
            return {
                'status': 'idle',
                'is_running': False,
                'message': 'No scan running'
            }

        progress = session.progress()
        status = {
            'status': session.state.value,
            'is_running': session.state in (ScanState.RUNNING, ScanState.PAUSED),
            'scan_id': session.session_id,
            'scan_path': session.root,
            'drive': Path(session.root).name,
            'threshold_bytes': session.threshold_bytes,
            'progress': progress.to_dict(),
            'files_scanned': session.processed_files,
            'files_found': session.matches,
            'elapsed_time': time.time() - session.start_time,
            'stop_requested': session.stop_requested,
        }
        if session.summary is not None:
            status['summary'] = session.summary.to_dict()
        return status

    def get_events(self, since: int = 0) -> Dict[str, Any]:
        events = self.recorder.events_since(since)
        return {
            'events': events,
            'next': events[-1]['seq'] if events else since,
        }

    def get_results(self) -> Dict[str, Any]:
        """Matches of the current scan that are still eligible for operations"""
        session = self.engine.current_session
        allowed = session.allowed_snapshot() if session else frozenset()
        results = []
        for match in self.recorder.snapshot_matches():
            if match.path not in allowed:
                continue
            item = match.to_dict()
            item.update({
                'size_readable': format_file_size(match.size_bytes),
                'modified': format_date(match.modified_at_millis),
                'type': file_type(match.name),
                'advice': classify_cleanliness(match.path).to_dict(),
            })
            results.append(item)
        return {
            'scan_id': session.session_id if session else None,
            'results': results,
            'total_found': len(results),
        }

    def _operation(self, func: Callable, *args) -> Dict[str, Any]:
        try:
            results = func(*args)
        except InvalidInput as e:
            return {'success': False, 'error': str(e)}
        self._notify_status({'type': 'file_operation', 'results': len(results)})
        return {'success': True, 'results': [r.to_dict() for r in results]}

    def authorize_files(self, paths) -> Dict[str, Any]:
        return self._operation(self.gate.authorize, paths)

    def delete_files(self, paths) -> Dict[str, Any]:
        return self._operation(self.gate.delete, paths)

    def trash_files(self, paths) -> Dict[str, Any]:
        return self._operation(self.gate.trash, paths)

    def move_files(self, paths, destination: str) -> Dict[str, Any]:
        return self._operation(self.gate.move, paths, destination)

    def reveal_file(self, path: str) -> Dict[str, Any]:
        try:
            self.gate.reveal(path)
        except InvalidInput as e:
            return {'success': False, 'error': str(e)}
        return {'success': True}

    def open_file(self, path: str) -> Dict[str, Any]:
        try:
            self.gate.open_path(path)
        except InvalidInput as e:
            return {'success': False, 'error': str(e)}
        return {'success': True}

    def generate_report(self, report_format: Optional[str] = None,
                        output_dir: Optional[str] = None) -> Dict[str, Any]:
        """Write a report of the current results"""
        session = self.engine.current_session
        if session is None or self.config is None:
            return {'success': False, 'error': 'No scan has been performed yet'}

        config = Config(
            scan_path=session.root,
            threshold_bytes=session.threshold_bytes,
            output_dir=output_dir or self.config.output_dir,
            report_format=report_format or self.config.report_format,
        )
        allowed = session.allowed_snapshot()
        matches = [m for m in self.recorder.snapshot_matches() if m.path in allowed]
        try:
            os.makedirs(config.output_dir, exist_ok=True)
            report_path = ReportGenerator(config).generate_report(matches)
        except (OSError, ValueError) as e:
            return {'success': False, 'error': str(e)}
        return {'success': True, 'report_path': report_path, 'total_items': len(matches)}
