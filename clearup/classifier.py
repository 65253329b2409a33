"""
Path classification for ClearUp

Decides which directories the scanner never descends into and how risky a
matched file is to remove. Everything here is a pure function of the path
string (and the host platform for the ignore rules).
"""
import sys
from dataclasses import dataclass
from enum import Enum
from typing import List

from .config import Config


class CleanLevel(Enum):
    """Cleanliness tiers, ordered from most to least disposable"""
    SAFE = ('safe', 'Suggested cleanup', 1)
    CAUTION = ('caution', 'Clean with caution', 2)
    DANGER = ('danger', 'System file', 3)
    UNKNOWN = ('unknown', 'Other file', 4)

    def __init__(self, level_id: str, label: str, priority: int):
        self.level_id = level_id
        self.label = label
        self.priority = priority


@dataclass(frozen=True)
class Advice:
    level: CleanLevel
    rationale: str

    def to_dict(self) -> dict:
        return {
            'id': self.level.level_id,
            'label': self.level.label,
            'priority': self.level.priority,
            'rationale': self.rationale,
        }


FILE_TYPES = {
    'video': ['mp4', 'mkv', 'avi', 'mov', 'wmv', 'flv', 'webm', 'm4v', 'mpg', 'mpeg'],
    'audio': ['mp3', 'wav', 'flac', 'm4a', 'aac', 'ogg', 'wma'],
    'image': ['jpg', 'jpeg', 'png', 'gif', 'bmp', 'webp', 'svg', 'tiff', 'heic'],
    'document': ['pdf', 'doc', 'docx', 'xls', 'xlsx', 'ppt', 'pptx', 'txt', 'md', 'rtf',
                 'csv', 'pages', 'numbers', 'key'],
    'archive': ['zip', 'rar', '7z', 'tar', 'gz', 'bz2', 'iso', 'dmg', 'pkg'],
    'executable': ['exe', 'app', 'msi', 'bat', 'sh', 'apk'],
}


def _segments(path: str) -> List[str]:
    return [s for s in path.replace('\\', '/').split('/') if s]


def _under(path: str, root: str, case_sensitive: bool = True) -> bool:
    """True if path is root itself or lies below it, compared segment-wise"""
    path_segs = _segments(path)
    root_segs = _segments(root)
    if not case_sensitive:
        path_segs = [s.lower() for s in path_segs]
        root_segs = [s.lower() for s in root_segs]
    return path_segs[:len(root_segs)] == root_segs


def should_ignore_subtree(path: str, platform: str = None) -> bool:
    """Return True if traversal must not descend into path"""
    platform = platform or sys.platform
    if Config.ignored_dir_names.intersection(_segments(path)):
        return True

    for prefix, roots in Config.platform_roots.items():
        if not platform.startswith(prefix):
            continue
        case_sensitive = prefix != 'win32'
        if any(_under(path, root, case_sensitive) for root in roots):
            return True
    return False


def classify_cleanliness(path: str) -> Advice:
    """Map a file path to a cleanliness tier; first matching rule wins"""
    if not path:
        return Advice(CleanLevel.UNKNOWN, 'No path')
    p = path.replace('\\', '/').lower()

    if p.startswith(('/system', '/bin', '/sbin', '/usr', '/var', '/private')):
        return Advice(CleanLevel.DANGER, 'Operating system location')

    if p == '/library' or p.startswith('/library/'):
        if '/caches/' in p or '/logs/' in p:
            return Advice(CleanLevel.CAUTION, 'System-wide cache or log')
        return Advice(CleanLevel.DANGER, 'System library')

    if any(s in p for s in ('/node_modules/', '/target/debug/', '/build/outputs/', '/deriveddata/')):
        return Advice(CleanLevel.SAFE, 'Developer build artifact, regenerated on build')

    if any(s in p for s in ('/library/caches/', '/library/logs/', '/library/saved application state/')):
        return Advice(CleanLevel.SAFE, 'User cache or log')

    if '/.trash/' in p:
        return Advice(CleanLevel.SAFE, 'Already in the trash')

    if '/downloads/' in p:
        if p.endswith(Config.disposable_download_extensions):
            return Advice(CleanLevel.SAFE, 'Installer or archive in Downloads')
        return Advice(CleanLevel.CAUTION, 'Downloaded file')

    if p.startswith('/applications') or '/applications/' in p:
        return Advice(CleanLevel.CAUTION, 'Installed application')

    if any(s in p for s in ('/documents/', '/desktop/', '/pictures/', '/music/', '/movies/')):
        return Advice(CleanLevel.CAUTION, 'User data')

    if '/library/application support/' in p:
        return Advice(CleanLevel.CAUTION, 'Application data')

    return Advice(CleanLevel.UNKNOWN, 'No rule matched')


def file_type(name: str) -> str:
    """Coarse file family from the extension"""
    if '.' not in name:
        return 'other'
    ext = name.rsplit('.', 1)[-1].lower()
    for kind, extensions in FILE_TYPES.items():
        if ext in extensions:
            return kind
    return 'other'
