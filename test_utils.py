"""
Tests for config, models and helpers
"""
import os

import pytest

from clearup.config import Config, GIB
from clearup.models import InvalidInput, OperationResult, ProgressSnapshot
from clearup.utils import format_file_size, is_root_path, parse_size


@pytest.mark.parametrize('text, expected', [
    ('1GB', GIB),
    ('1 gb', GIB),
    ('500MB', 500 * 1024 ** 2),
    ('2.5G', int(2.5 * GIB)),
    ('10KB', 10 * 1024),
    ('4096', 4096),
    (4096, 4096),
    ('1TB', 1024 ** 4),
])
def test_parse_size(text, expected):
    assert parse_size(text) == expected


@pytest.mark.parametrize('text', ['', 'big', '1XB', '-5MB', True])
def test_parse_size_rejects_garbage(text):
    with pytest.raises(InvalidInput):
        parse_size(text)


def test_format_file_size():
    assert format_file_size(512) == "512 B"
    assert format_file_size(2 * GIB) == "2.00 GB"
    assert format_file_size(1536) == "1.50 KB"
    assert format_file_size(5 * 1024 ** 5) == "5120.00 TB"


def test_is_root_path():
    assert is_root_path(os.sep)
    assert not is_root_path(os.path.join(os.sep, "tmp"))
    assert not is_root_path("")


def test_progress_snapshot_percent():
    assert ProgressSnapshot.from_counts(0, 0).percent == 0.0
    assert ProgressSnapshot.from_counts(3, 1).percent == 0.75
    assert ProgressSnapshot.from_counts(5, 0).to_dict() == {'processed': 5, 'pending': 0, 'percent': 1.0}


def test_operation_result_omits_empty_fields():
    assert OperationResult(path='/a', ok=True).to_dict() == {'path': '/a', 'ok': True}
    assert OperationResult(path='/a', ok=False, error='Not allowed').to_dict() == {
        'path': '/a', 'ok': False, 'error': 'Not allowed'}


def test_config_from_dict_ignores_unknown_and_none():
    config = Config.from_dict({'scan_path': '/data', 'max_workers': None, 'colour': 'blue'})
    assert config.scan_path == '/data'
    assert config.max_workers == 8
    assert config.threshold_bytes == GIB
