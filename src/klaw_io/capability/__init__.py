"""Handle capabilities and target-type construction."""

from klaw_io.capability.builtin import open_addr, open_path
from klaw_io.capability.core import Capability, capability
from klaw_io.capability.protocols import (
    BufRead,
    ErrWrite,
    Flush,
    FromAddr,
    FromPath,
    LineRead,
    Read,
    Seek,
    Write,
)

__all__ = [
    'BufRead',
    'Capability',
    'ErrWrite',
    'Flush',
    'FromAddr',
    'FromPath',
    'LineRead',
    'Read',
    'Seek',
    'Write',
    'capability',
    'open_addr',
    'open_path',
]
