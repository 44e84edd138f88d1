"""
schemagen - template driven code generation.

Turns a data model into source files through named templates, a template
function environment and ordered emission into output files.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .logging_config import get_logger, setup_logging
from .templates import (
    RunContext,
    Template,
    TemplateSet,
    TemplateRegistry,
    get_registry,
    load_context,
    process,
    write,
    write_raw,
    errors,
)
from . import languages

__all__ = [
    "get_logger",
    "setup_logging",
    "RunContext",
    "Template",
    "TemplateSet",
    "TemplateRegistry",
    "get_registry",
    "load_context",
    "process",
    "write",
    "write_raw",
    "errors",
    "languages",
]
