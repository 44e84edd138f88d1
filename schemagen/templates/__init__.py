"""
Template processing engine.

Template sets register under a name, emit rendered templates while walking
a data model, and have the results merged into output files.
"""

from .context import (
    Flag,
    RunContext,
    ConfigError,
    apply_flag_defaults,
    load_context,
)
from .errors import (
    TemplateError,
    UnknownTemplateError,
    FuncsError,
    TemplateLoadError,
    TemplateExecError,
    PostFailedError,
    RunCancelledError,
)
from .funcs import base_funcs, build_funcs, add_custom_funcs
from .process import process, write, write_files, write_raw, errors
from .registry import (
    TemplateRegistry,
    RegistryError,
    get_registry,
    register,
    types,
    for_command,
    flags,
)
from .report import print_report
from .run import TemplateRun
from .model import (
    Template,
    EmittedTemplate,
    FlagSet,
    TemplateSet,
    RESOURCE_SUFFIX,
    FUNCS_RESOURCE,
)

__all__ = [
    # Configuration
    "Flag",
    "RunContext",
    "ConfigError",
    "apply_flag_defaults",
    "load_context",
    # Errors
    "TemplateError",
    "UnknownTemplateError",
    "FuncsError",
    "TemplateLoadError",
    "TemplateExecError",
    "PostFailedError",
    "RunCancelledError",
    # Funcs
    "base_funcs",
    "build_funcs",
    "add_custom_funcs",
    # Processing
    "process",
    "write",
    "write_files",
    "write_raw",
    "errors",
    "print_report",
    "TemplateRun",
    # Registry
    "TemplateRegistry",
    "RegistryError",
    "get_registry",
    "register",
    "types",
    "for_command",
    "flags",
    # Types
    "Template",
    "EmittedTemplate",
    "FlagSet",
    "TemplateSet",
    "RESOURCE_SUFFIX",
    "FUNCS_RESOURCE",
]
