"""
Configuration management for ClearUp
"""
from dataclasses import dataclass, fields
from typing import Any, Dict


GIB = 1024 * 1024 * 1024


@dataclass
class Config:
    """Configuration settings for a ClearUp scan"""
    scan_path: str
    threshold_bytes: int = GIB
    max_workers: int = 8
    batch_interval: float = 0.1  # seconds between match batch flushes
    output_dir: str = 'reports'
    report_format: str = 'html'
    verbose: bool = False

    # Directory names never descended into, wherever they appear
    ignored_dir_names = {'node_modules', '.git'}

    # Operating system roots never descended into, per sys.platform prefix
    platform_roots = {
        'darwin': ['/System', '/Library', '/Applications'],
        'win32': ['C:\\Windows', 'C:\\Program Files', 'C:\\Program Files (x86)'],
        'linux': ['/proc', '/sys', '/dev', '/run'],
    }

    # Extensions in Downloads that are usually installers or archives
    disposable_download_extensions = ('.dmg', '.pkg', '.iso', '.zip', '.rar', '.7z')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Build a config from a request payload, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})
