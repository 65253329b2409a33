"""
Tests for path classification
"""
import pytest

from clearup.classifier import CleanLevel, classify_cleanliness, file_type, should_ignore_subtree


@pytest.mark.parametrize('path, platform, expected', [
    ('/home/me/project/node_modules', 'linux', True),
    ('/home/me/project/node_modules/pkg/lib', 'linux', True),
    ('/home/me/repo/.git', 'darwin', True),
    ('/home/me/node_modules_backup', 'linux', False),
    ('/home/me/.github', 'linux', False),
    ('/System/Library/Fonts', 'darwin', True),
    ('/Library', 'darwin', True),
    ('/Applications/Xcode.app', 'darwin', True),
    ('/Users/me/Library', 'darwin', False),
    ('/Librarybooks', 'darwin', False),
    ('/System', 'linux', False),
    ('C:\\Windows\\System32', 'win32', True),
    ('c:\\program files\\Vendor', 'win32', True),
    ('C:\\Program Files (x86)', 'win32', True),
    ('C:\\Users\\me\\Videos', 'win32', False),
    ('/proc/1/fd', 'linux', True),
    ('/home/me/proc', 'linux', False),
])
def test_should_ignore_subtree(path, platform, expected):
    assert should_ignore_subtree(path, platform=platform) is expected


@pytest.mark.parametrize('path, level', [
    ('/System/Library/Kernels/kernel', CleanLevel.DANGER),
    ('/usr/local/lib/big.a', CleanLevel.DANGER),
    ('/private/var/vm/sleepimage', CleanLevel.DANGER),
    ('/Library/Caches/com.apple.thing/blob', CleanLevel.CAUTION),
    ('/Library/Frameworks/Big.framework/Big', CleanLevel.DANGER),
    ('/Users/me/dev/app/node_modules/electron/dist/Electron', CleanLevel.SAFE),
    ('/Users/me/Library/Developer/Xcode/DerivedData/App/Build.o', CleanLevel.SAFE),
    ('/Users/me/Library/Caches/Spotify/Data/cache.bin', CleanLevel.SAFE),
    ('/Users/me/.Trash/old.mov', CleanLevel.SAFE),
    ('/Users/me/Downloads/Installer.dmg', CleanLevel.SAFE),
    ('/Users/me/Downloads/contract.pdf', CleanLevel.CAUTION),
    ('/Users/me/Applications/Tool.app/Contents/MacOS/Tool', CleanLevel.CAUTION),
    ('/Users/me/Movies/holiday.mp4', CleanLevel.CAUTION),
    ('/Users/me/Library/Application Support/Steam/game.pak', CleanLevel.CAUTION),
    ('/data/backups/disk.img', CleanLevel.UNKNOWN),
    ('', CleanLevel.UNKNOWN),
])
def test_classify_cleanliness(path, level):
    advice = classify_cleanliness(path)
    assert advice.level is level
    assert advice.rationale


def test_rules_apply_in_priority_order():
    # downloads rule wins over the user documents rule
    assert classify_cleanliness('/Users/me/Documents/Downloads/a.zip').level is CleanLevel.SAFE
    # developer artifacts win over user documents
    assert classify_cleanliness('/Users/me/Documents/app/node_modules/x.node').level is CleanLevel.SAFE


def test_windows_paths_are_normalised():
    advice = classify_cleanliness('C:\\Users\\me\\Downloads\\setup.zip')
    assert advice.level is CleanLevel.SAFE


def test_levels_are_ordered():
    priorities = [level.priority for level in CleanLevel]
    assert priorities == sorted(priorities)
    assert classify_cleanliness('/bin/sh').to_dict()['id'] == 'danger'


@pytest.mark.parametrize('name, kind', [
    ('movie.MKV', 'video'),
    ('song.flac', 'audio'),
    ('backup.tar', 'archive'),
    ('report.docx', 'document'),
    ('setup.exe', 'executable'),
    ('photo.heic', 'image'),
    ('Makefile', 'other'),
    ('disk.img', 'other'),
])
def test_file_type(name, kind):
    assert file_type(name) == kind
