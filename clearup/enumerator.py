"""
Directory enumeration for ClearUp
"""
import os
import stat
from typing import Iterator, Optional

from .models import DirEntryInfo, EntryKind, FileStat


class DirectoryEnumerator:
    """Lists the immediate entries of one directory"""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def enumerate(self, dir_path: str) -> Iterator[DirEntryInfo]:
        """
        Yield the entries of dir_path lazily, in listing order.

        An unreadable or vanished directory ends the sequence early and
        silently; the rest of the scan is unaffected.
        """
        try:
            listing = os.scandir(dir_path)
        except OSError as e:
            if self.verbose:
                print(f"⚠️  Skipping {dir_path}: {e}")
            return

        with listing:
            while True:
                try:
                    entry = next(listing)
                except StopIteration:
                    return
                except OSError as e:
                    if self.verbose:
                        print(f"⚠️  Stopped reading {dir_path}: {e}")
                    return
                yield DirEntryInfo(name=entry.name, path=entry.path, kind=self._kind(entry))

    def stat(self, entry: DirEntryInfo) -> Optional[FileStat]:
        """Size and mtime of a regular file, or None if it is gone or no longer a file"""
        try:
            st = os.stat(entry.path, follow_symlinks=False)
        except OSError as e:
            if self.verbose:
                print(f"⚠️  Could not stat {entry.path}: {e}")
            return None
        if not stat.S_ISREG(st.st_mode):
            return None
        return FileStat(size_bytes=st.st_size, modified_at_millis=st.st_mtime_ns / 1_000_000)

    @staticmethod
    def _kind(entry: os.DirEntry) -> EntryKind:
        try:
            if entry.is_symlink():
                return EntryKind.SYMLINK
            if entry.is_dir(follow_symlinks=False):
                return EntryKind.DIRECTORY
            if entry.is_file(follow_symlinks=False):
                return EntryKind.FILE
        except OSError:
            return EntryKind.ERROR
        return EntryKind.OTHER
