#!/usr/bin/env python3
"""
ClearUp Web Interface
JSON API for the ClearUp large file finder.
"""

import os
import time
from datetime import datetime

import psutil
from flask import Flask, jsonify, request
from flask_cors import CORS

from .scan_manager import ScanManager
from .utils import format_file_size

# Initialize Flask app
app = Flask(__name__)
CORS(app)

# Global scan manager (one active scan per process)
scan_manager = ScanManager()

# Cache for system info to reduce expensive operations
_system_info_cache = {
    'data': None,
    'timestamp': 0,
    'ttl': 10  # Cache for 10 seconds
}

# Pseudo and runtime mounts that are never useful scan roots
SKIPPED_MOUNTS = ('/proc', '/sys', '/dev', '/run')


def _payload() -> dict:
    return request.get_json(silent=True) or {}


def _respond(result: dict):
    if result.get('success') is False:
        return jsonify({'error': result['error']}), 400
    return jsonify(result)


@app.route('/api/system-info')
def system_info():
    """Mounted volumes that can be picked as a scan root"""
    global _system_info_cache

    current_time = time.time()
    if (_system_info_cache['data'] and
            current_time - _system_info_cache['timestamp'] < _system_info_cache['ttl']):
        return jsonify(_system_info_cache['data'])

    mounts = []
    seen_mountpoints = set()
    try:
        partitions = psutil.disk_partitions()
    except OSError as e:
        print(f"Error getting partitions: {e}")
        partitions = []

    for partition in partitions[:50]:
        mount_point = partition.mountpoint
        if (mount_point in seen_mountpoints or
                any(mount_point == m or mount_point.startswith(m + '/') for m in SKIPPED_MOUNTS)):
            continue
        if not os.path.isdir(mount_point):
            continue
        try:
            usage = psutil.disk_usage(mount_point)
        except (PermissionError, OSError):
            continue
        seen_mountpoints.add(mount_point)
        mounts.append({
            'device': partition.device,
            'mountpoint': mount_point,
            'fstype': partition.fstype,
            'total': format_file_size(usage.total),
            'used': format_file_size(usage.used),
            'free': format_file_size(usage.free),
            'percent': usage.percent
        })

    result = {
        'mounts': mounts,
        'home': os.path.expanduser('~'),
        'current_time': datetime.now().isoformat()
    }
    _system_info_cache['data'] = result
    _system_info_cache['timestamp'] = current_time
    return jsonify(result)


@app.route('/api/scan/start', methods=['POST'])
def start_scan():
    """Start a new scan; any scan in progress is superseded"""
    data = _payload()
    config_dict = {
        'scan_path': data.get('rootDir', data.get('scan_path')),
        'threshold_bytes': data.get('thresholdBytes', data.get('threshold_bytes')),
        'max_workers': data.get('threads'),
        'report_format': data.get('report_format'),
        'output_dir': data.get('output_dir'),
    }
    return _respond(scan_manager.start_scan(config_dict))


@app.route('/api/scan/stop', methods=['POST'])
def stop_scan():
    return _respond(scan_manager.stop_scan())


@app.route('/api/scan/pause', methods=['POST'])
def pause_scan():
    return _respond(scan_manager.pause_scan())


@app.route('/api/scan/resume', methods=['POST'])
def resume_scan():
    return _respond(scan_manager.resume_scan())


@app.route('/api/scan/status')
def scan_status_api():
    """Get current scan status with real-time info"""
    return jsonify(scan_manager.get_current_status())


@app.route('/api/scan/events')
def scan_events():
    """Events of the current scan after sequence number ``since``"""
    since = request.args.get('since', 0, type=int)
    return jsonify(scan_manager.get_events(max(since, 0)))


@app.route('/api/results')
def get_results():
    return jsonify(scan_manager.get_results())


@app.route('/api/files/authorize', methods=['POST'])
def authorize_files():
    return _respond(scan_manager.authorize_files(_payload().get('paths')))


@app.route('/api/files/delete', methods=['POST'])
def delete_files():
    return _respond(scan_manager.delete_files(_payload().get('paths')))


@app.route('/api/files/trash', methods=['POST'])
def trash_files():
    return _respond(scan_manager.trash_files(_payload().get('paths')))


@app.route('/api/files/move', methods=['POST'])
def move_files():
    data = _payload()
    return _respond(scan_manager.move_files(data.get('paths'), data.get('destination')))


@app.route('/api/files/reveal', methods=['POST'])
def reveal_file():
    return _respond(scan_manager.reveal_file(_payload().get('path')))


@app.route('/api/files/open', methods=['POST'])
def open_file():
    return _respond(scan_manager.open_file(_payload().get('path')))


@app.route('/api/report', methods=['POST'])
def generate_report():
    data = _payload()
    result = scan_manager.generate_report(data.get('format'), data.get('output_dir'))
    if result.get('success') is False and result['error'] == 'No scan has been performed yet':
        return jsonify({'error': result['error']}), 404
    return _respond(result)

