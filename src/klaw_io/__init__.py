"""klaw-io: Result-style chaining of I/O operations on a single handle.

Flat imports (preferred):
    from klaw_io import Good, Bad, IOChain, wrap, from_path, stdio
    from klaw_io import Ok, Err, collect

Submodule imports (for organization):
    from klaw_io.chain import Good, Bad
    from klaw_io.capability import open_path, Read, BufRead
    from klaw_io.decorators import safe
"""

# Capabilities
from klaw_io.capability import (
    BufRead,
    Capability,
    ErrWrite,
    Flush,
    FromAddr,
    FromPath,
    LineRead,
    Read,
    Seek,
    Write,
    capability,
    open_addr,
    open_path,
)

# Chains
from klaw_io.chain import Bad, Good, IOChain

# Configuration
from klaw_io._config import IOConfig, get_config, init

# Logging
from klaw_io._logging import configure_logging, get_logger

# Constructors
from klaw_io.construct import from_addr, from_path, wrap, wrap_func
from klaw_io.decorators import safe
from klaw_io.errors import ConsumedChainError, KlawIOError, MissingCapabilityError
from klaw_io.result import Err, Ok, Result, collect
from klaw_io.stdio import Stdio, stdio

__all__ = [
    'Bad',
    'BufRead',
    'Capability',
    'ConsumedChainError',
    'Err',
    'ErrWrite',
    'Flush',
    'FromAddr',
    'FromPath',
    'Good',
    'IOChain',
    'IOConfig',
    'KlawIOError',
    'LineRead',
    'MissingCapabilityError',
    'Ok',
    'Read',
    'Result',
    'Seek',
    'Stdio',
    'Write',
    'capability',
    'collect',
    'configure_logging',
    'from_addr',
    'from_path',
    'get_config',
    'get_logger',
    'init',
    'open_addr',
    'open_path',
    'safe',
    'stdio',
    'wrap',
    'wrap_func',
]
