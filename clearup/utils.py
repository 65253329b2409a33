"""
Utility functions for ClearUp
"""
import os
import re
from datetime import datetime

from .models import InvalidInput


SIZE_UNITS = ['B', 'KB', 'MB', 'GB', 'TB']

_SIZE_RE = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([KMGT]?B?)?\s*$', re.IGNORECASE)


def format_file_size(size_bytes: int, use_decimal: bool = False) -> str:
    """
    Format file size in human readable format.

    Args:
        size_bytes: Size in bytes
        use_decimal: If True, use decimal units (1000-based) like macOS.
                     If False, use binary units (1024-based), which is what
                     thresholds are expressed in.
    """
    divisor = 1000.0 if use_decimal else 1024.0
    size = float(size_bytes)
    for i, unit in enumerate(SIZE_UNITS):
        if size < divisor or i == len(SIZE_UNITS) - 1:
            if i == 0:
                return f"{int(size)} {unit}"
            return f"{size:.2f} {unit}"
        size /= divisor
    return f"{size:.2f} {SIZE_UNITS[-1]}"


def parse_size(text) -> int:
    """Parse '1GB', '500 mb', '2.5G' or a bare byte count into bytes (1024-based)"""
    if isinstance(text, bool):
        raise InvalidInput(f"Invalid size: {text!r}")
    if isinstance(text, int):
        return text
    match = _SIZE_RE.match(str(text))
    if not match:
        raise InvalidInput(f"Invalid size: {text!r}")
    value = float(match.group(1))
    unit = (match.group(2) or 'B').upper()
    if not unit.endswith('B'):
        unit += 'B'
    return int(value * 1024 ** SIZE_UNITS.index(unit))


def format_date(millis: float) -> str:
    """Format a millisecond timestamp as local 'YYYY-MM-DD HH:MM:SS'"""
    return datetime.fromtimestamp(millis / 1000.0).strftime("%Y-%m-%d %H:%M:%S")


def is_root_path(path: str) -> bool:
    """True for a filesystem root such as '/' or 'C:\\'"""
    if not path:
        return False
    drive, rest = os.path.splitdrive(path)
    return rest in (os.sep, '/') or (bool(drive) and rest == '')


def sanitize_path(path: str) -> str:
    """Sanitize path for display (replace the home directory with ~)"""
    home_path = os.path.expanduser("~")
    if path.startswith(home_path):
        return path.replace(home_path, "~", 1)
    return path
