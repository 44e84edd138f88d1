"""
Core data types for template processing.

Template descriptors, emitted fragments/file buffers and the template set
(generation target) declaration.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from .context import Flag, RunContext

if TYPE_CHECKING:
    from .run import TemplateRun

# Suffix appended to every template resource name
RESOURCE_SUFFIX = ".tpl"

# Name of the optional extension script in a template tree
FUNCS_RESOURCE = "funcs.py" + RESOURCE_SUFFIX


@dataclass(frozen=True)
class Template:
    """Identifies a template resource and the data it is rendered with."""

    set: str = ""
    template: str = ""
    type: str = ""
    name: str = ""
    data: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def file(self) -> str:
        """Return the template path relative to the template tree."""
        if self.set:
            return f"{self.set}/{self.template}"
        return self.template

    def sort_key(self):
        return (self.template, self.type, self.name)


@dataclass
class EmittedTemplate:
    """A rendered template, or the accumulated content of one output file."""

    template: Optional[Template] = None
    buf: bytes = b""
    file: str = ""
    errors: List[Exception] = field(default_factory=list)


@dataclass(frozen=True)
class FlagSet:
    """A flag tagged with the name of the template set declaring it."""

    type: str
    name: str
    flag: Flag


@dataclass
class TemplateSet:
    """Declaration of a generation target.

    The set itself is never mutated while processing; all per-run state is
    kept on :class:`~schemagen.templates.run.TemplateRun`.
    """

    # Directory holding the built-in templates
    files: Path
    # Names of the commands the set is available for (None means all)
    commands: Optional[List[str]] = None
    # Extension added to output files and template names
    file_ext: str = ""
    # Additional options
    flags: List[Flag] = field(default_factory=list)
    # Order in which to process templates
    order: List[str] = field(default_factory=list)
    # Header template placed at the top of new files
    header_template: Optional[Callable[[RunContext], Template]] = None
    # Templates emitted once per run
    package_templates: Optional[Callable[[RunContext], List[Template]]] = None
    # Template funcs replacing the base funcs
    funcs: Optional[Callable[[RunContext], Dict[str, Callable]]] = None
    # Determines the output file name for a template (without extension)
    file_name: Callable[[RunContext, Template], str] = lambda ctx, tpl: tpl.name
    # Injects additional context values prior to processing
    build_context: Optional[Callable[[RunContext], RunContext]] = None
    # Walks the data model, emitting templates through the run
    process: Optional[Callable[[RunContext, bool, "TemplateRun", Any], None]] = None
    # Post processing of generated file content
    post: Optional[Callable[[RunContext, bytes], bytes]] = None
