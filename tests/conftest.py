"""Pytest configuration and shared fixtures for klaw-io tests."""

from __future__ import annotations

import io

import pytest

from tests.helpers import SpyHandle


@pytest.fixture
def spy():
    """A spy handle holding a few lines of text."""
    return SpyHandle(b'alpha\nbeta\ngamma\n')


@pytest.fixture
def failing_spy():
    """A spy handle whose every operation raises."""
    return SpyHandle(fail_with=OSError('device gone'))


@pytest.fixture
def sample_file(tmp_path):
    """A file with known contents."""
    path = tmp_path / 'sample.txt'
    path.write_bytes(b'first line\nsecond line\r\nthird')
    return path


@pytest.fixture
def reader():
    """A buffered reader over in-memory bytes."""
    return io.BufferedReader(io.BytesIO(b'key=value;next=item;last'), buffer_size=8)
