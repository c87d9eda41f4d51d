"""Cross-cutting utilities (lowest dependency layer).

This package provides shared primitives for:
    - YAML loading (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (wiper, configs, etc.).

Convenience imports:
    from wipe_control.utils import fs
    from wipe_control.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import logging_config

from .logging_config import get_logger, push_context, setup_logging

__all__ = [
    'fs',
    'logging_config',
    'setup_logging',
    'get_logger',
    'push_context',
]
