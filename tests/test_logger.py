"""
Test logging setup
"""
import logging
import os
import time
from unittest.mock import MagicMock

import pytest

from artfs.core.logger import ArtFSLogger, get_logger, log_dmx_frame


@pytest.fixture
def artfs_logger():
    instance = ArtFSLogger()
    yield instance
    instance.setup_logging()  # back to console only


class TestArtFSLogger:

    def test_singleton(self):
        assert ArtFSLogger() is ArtFSLogger()

    def test_console_only_by_default(self, artfs_logger):
        artfs_logger.setup_logging()
        assert artfs_logger.file_handler is None
        assert artfs_logger.get_console_log_level() == logging.WARNING

    def test_log_file_written(self, artfs_logger, tmp_path):
        artfs_logger.setup_logging(log_dir=tmp_path / 'logs', console_level=logging.ERROR)
        get_logger('artfs.test').debug("hello from the test")
        artfs_logger.file_handler.flush()

        content = artfs_logger.log_file.read_text(encoding='utf-8')
        assert 'ArtFS ArtNet bridge started' in content
        assert 'hello from the test' in content

    def test_old_logs_pruned(self, artfs_logger, tmp_path):
        for i in range(5):
            old = tmp_path / f'artfs_2020010{i}_000000.log'
            old.write_text('old')
            os.utime(old, (time.time() - 1000 + i, time.time() - 1000 + i))

        artfs_logger.setup_logging(log_dir=tmp_path, max_log_files=2)

        # Two newest old files survive the cleanup, plus the new log file
        remaining = sorted(p.name for p in tmp_path.glob('artfs_*.log'))
        assert len(remaining) == 3
        assert 'artfs_20200104_000000.log' in remaining
        assert 'artfs_20200100_000000.log' not in remaining

    def test_set_console_level(self, artfs_logger):
        artfs_logger.set_console_log_level(logging.DEBUG)
        assert artfs_logger.get_console_log_level() == logging.DEBUG

    def test_debug_modules(self, artfs_logger):
        target = logging.getLogger('artfs.bridge.dispatch')
        previous = target.level
        try:
            artfs_logger.apply_debug_modules(['artfs.bridge.*'])
            assert target.level == logging.DEBUG
        finally:
            target.setLevel(previous)


def test_log_dmx_frame_throttled():
    logger = MagicMock()
    for count in range(1, 242):
        log_dmx_frame(logger, 0, [1, 2, 3], count)
    assert logger.debug.call_count == 3  # frames 1, 121, 241


def test_log_dmx_frame_every_frame():
    logger = MagicMock()
    for count in range(1, 4):
        log_dmx_frame(logger, 0, [1, 2, 3], count, every=1)
    assert logger.debug.call_count == 3
