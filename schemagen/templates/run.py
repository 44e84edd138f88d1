"""
Per-run template state and rendering.

A :class:`TemplateRun` is created fresh for every call to
:func:`~schemagen.templates.process.process`. It owns the funcs built for
the run, the emitted templates and the generated file buffers, so the
long-lived template set is never mutated.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
)
from jinja2 import Template as JinjaTemplate

from ..logging_config import get_logger
from .context import RunContext
from .errors import (
    RunCancelledError,
    TemplateError,
    TemplateExecError,
    TemplateLoadError,
)
from .model import RESOURCE_SUFFIX, EmittedTemplate, Template, TemplateSet

logger = get_logger(__name__)


@dataclass
class TemplateRun:
    """Working state of one generation run against a template set."""

    ctx: RunContext
    template_set: TemplateSet
    funcs: Dict[str, Callable] = field(default_factory=dict)
    emitted: List[EmittedTemplate] = field(default_factory=list)
    files: Dict[str, EmittedTemplate] = field(default_factory=dict)
    _env: Environment = field(default=None, init=False, repr=False)

    def _environment(self) -> Environment:
        """Get the Jinja2 environment for the run's template source."""
        if self._env is None:
            src = self.ctx.src if self.ctx.src is not None else self.template_set.files
            self._env = Environment(
                loader=FileSystemLoader(str(src)),
                undefined=StrictUndefined,
                autoescape=False,
                keep_trailing_newline=True,
                auto_reload=False,
            )
            self._env.globals.update(self.funcs)
            self._env.filters.update(self.funcs)
        return self._env

    def set_funcs(self, funcs: Dict[str, Callable]):
        """Replace the run's funcs, discarding templates parsed with the old ones."""
        self.funcs = funcs
        self._env = None

    def load(self, tpl: Template) -> JinjaTemplate:
        """
        Load and parse a template.

        Raises:
            TemplateLoadError: If the template is missing, unreadable or invalid
        """
        if self.ctx.cancelled:
            raise RunCancelledError(f"cancelled before loading template {tpl.file}")

        name = tpl.file + self.template_set.file_ext + RESOURCE_SUFFIX
        logger.debug("Loading template %s", name)

        try:
            return self._environment().get_template(name)
        except TemplateNotFound as e:
            raise TemplateLoadError(f"unable to open template {name}: {e}") from e
        except TemplateSyntaxError as e:
            raise TemplateLoadError(f"unable to parse template {name}: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateLoadError(f"unable to read template {name}: {e}") from e

    def exec(self, tpl: Template) -> bytes:
        """
        Load and execute a template with the descriptor as context.

        Raises:
            TemplateExecError: If rendering fails
        """
        t = self.load(tpl)
        context = {
            "set": tpl.set,
            "template": tpl.template,
            "type": tpl.type,
            "name": tpl.name,
            "data": tpl.data,
            "extra": tpl.extra,
            "tpl": tpl,
            "ctx": self.ctx,
        }
        try:
            return t.render(**context).encode("utf-8")
        except TemplateError:
            raise
        except Exception as e:
            raise TemplateExecError(f"unable to exec template {tpl.file}: {e}") from e

    def emit(self, tpl: Template):
        """Execute a template and add its content to the emitted templates."""
        buf = self.exec(tpl)
        self.emitted.append(EmittedTemplate(template=tpl, buf=buf))

    def load_file(self, file: str, do_append: bool) -> bytes:
        """
        Get the initial content for an output file.

        Existing content is kept when appending; otherwise the file starts
        with the rendered header template, if any.

        Raises:
            TemplateError: If the output path is a directory
        """
        path = Path(self.ctx.out) / file
        exists = os.path.lexists(path)

        if exists and path.is_dir():
            raise TemplateError(f"{path} is a directory: cannot emit template")

        if not exists or not do_append:
            if self.template_set.header_template is None:
                return b""
            return self.exec(self.template_set.header_template(self.ctx))

        logger.debug("Appending to existing file %s", path)
        try:
            return path.read_bytes()
        except OSError as e:
            raise TemplateError(f"unable to read {path}: {e}") from e
