"""
Template processing and output.

Drives a template set's generation logic, merges the emitted templates into
per-file buffers in a deterministic order, and writes the results.
"""

import shutil
from pathlib import Path
from typing import Any, List, Optional

from ..logging_config import get_logger
from .context import RunContext, apply_flag_defaults
from .errors import FuncsError, PostFailedError, RunCancelledError, TemplateError
from .funcs import build_funcs
from .io import atomic_write_bytes
from .registry import TemplateRegistry, get_registry
from .run import TemplateRun
from .model import EmittedTemplate

logger = get_logger(__name__)


def sort_emitted(emitted: List[EmittedTemplate]):
    """Sort emitted templates by template name, type and name."""
    emitted.sort(key=lambda e: e.template.sort_key())


def remove_matching(v: List[str], s: List[str]) -> List[str]:
    """Build a new list from v containing the strings not contained in s."""
    return [z for z in v if z not in s]


def process(
    ctx: RunContext,
    do_append: bool,
    single: str,
    v: Any,
    registry: Optional[TemplateRegistry] = None,
) -> TemplateRun:
    """
    Process emitted templates for the template set named by the context.

    Args:
        ctx: Run context; ``template_type`` selects the template set
        do_append: Append to existing files instead of replacing them
        single: Write everything to this single file name when non-empty
        v: Data model passed to the template set's generation logic
        registry: Registry to resolve the template set from (defaults to
            the global registry)

    Returns:
        The run holding the generated file buffers

    Raises:
        UnknownTemplateError: If the template set is not registered
        FuncsError: If the template funcs cannot be built
        TemplateError: If any template fails to load or render
    """
    if registry is None:
        registry = get_registry()
    typ = ctx.template_type
    template_set = registry.get(typ)

    logger.info("Processing template set %r", typ)

    # build context
    ctx = apply_flag_defaults(ctx, template_set.flags)
    if template_set.build_context is not None:
        ctx = template_set.build_context(ctx)

    run = TemplateRun(ctx=ctx, template_set=template_set)

    # build funcs
    try:
        run.set_funcs(build_funcs(ctx, template_set))
    except RunCancelledError:
        raise
    except FuncsError as e:
        raise FuncsError(f"unable to build template funcs: {e}") from e

    if template_set.process is not None:
        template_set.process(ctx, do_append, run, v)

    sort_emitted(run.emitted)
    order = list(template_set.order)

    # add package templates
    if not do_append and template_set.package_templates is not None:
        additional = []
        for tpl in template_set.package_templates(ctx):
            run.emit(tpl)
            additional.append(tpl.template)
        order = additional + remove_matching(order, additional)

    file_ext = ctx.suffix or template_set.file_ext

    run.files = {}
    for n in order:
        for emitted in run.emitted:
            if emitted.template.template != n:
                continue

            # determine filename
            if single:
                emitted.file = single
            else:
                emitted.file = template_set.file_name(ctx, emitted.template) + file_ext

            # load
            file = run.files.get(emitted.file)
            if file is None:
                file = EmittedTemplate(
                    buf=run.load_file(emitted.file, do_append),
                    file=emitted.file,
                )
                run.files[emitted.file] = file

            file.buf += emitted.buf

    logger.info(
        "Emitted %d template(s) into %d file(s)", len(run.emitted), len(run.files)
    )
    return run


def write(ctx: RunContext, run: TemplateRun):
    """
    Perform post processing of the run's files and write them to disk.

    A failing post hook is recorded on that file only; its unprocessed
    content is still written.
    """
    post = run.template_set.post
    if post is not None:
        for name in sorted(run.files):
            file = run.files[name]
            try:
                buf = post(ctx, file.buf)
                if not isinstance(buf, (bytes, bytearray)):
                    raise TypeError(
                        f"post hook returned {type(buf).__name__}, expected bytes"
                    )
            except Exception as e:
                logger.error("Post processing failed for %s: %s", name, e)
                file.errors.append(PostFailedError(name, e))
            else:
                file.buf = bytes(buf)
    write_files(ctx, run)


def write_files(ctx: RunContext, run: TemplateRun):
    """
    Write the run's files to the output directory.

    A file that cannot be written is recorded on that file only; the
    remaining files are still written.
    """
    out = Path(ctx.out)
    for name in sorted(run.files):
        if ctx.cancelled:
            raise RunCancelledError(f"cancelled before writing {name}")
        file = run.files[name]
        try:
            atomic_write_bytes(out / name, file.buf)
        except Exception as e:
            logger.error("Unable to write %s: %s", name, e)
            file.errors.append(e)
        else:
            logger.debug("Wrote %s (%d bytes)", out / name, len(file.buf))


def write_raw(ctx: RunContext, registry: Optional[TemplateRegistry] = None):
    """
    Write the raw templates of the context's template set.

    Copies the set's built-in template tree verbatim to the output
    directory, keeping its directory structure.
    """
    if registry is None:
        registry = get_registry()
    template_set = registry.get(ctx.template_type)

    src = Path(template_set.files)
    out = Path(ctx.out)
    if not src.is_dir():
        raise TemplateError(f"template directory {src} does not exist")

    out.mkdir(parents=True, exist_ok=True)
    for path in sorted(src.rglob("*")):
        if ctx.cancelled:
            raise RunCancelledError(f"cancelled before writing {path.name}")
        target = out / path.relative_to(src)
        if path.is_dir():
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(path, target)

    logger.info("Wrote raw templates for %r to %s", ctx.template_type, out)


def errors(run: TemplateRun) -> List[Exception]:
    """Get the errors collected while writing, in file name order."""
    result = []
    for name in sorted(run.files):
        result.extend(run.files[name].errors)
    return result
