"""
JSON template set.

Dumps the data model handed to the run as a single JSON document.
"""

import dataclasses
import json
from pathlib import Path
from typing import Any

from ...templates import Flag, RunContext, Template, TemplateRun, TemplateSet, register

TEMPLATE_DIR = Path(__file__).parent / "templates"

FILENAME_KEY = "json_filename"

FLAGS = [
    Flag(
        context_key=FILENAME_KEY,
        type="string",
        desc="output file name (without extension)",
        default="schema",
    ),
]


def _to_plain(v: Any) -> Any:
    if dataclasses.is_dataclass(v) and not isinstance(v, type):
        return dataclasses.asdict(v)
    return v


def file_name(ctx: RunContext, tpl: Template) -> str:
    return ctx.value(FILENAME_KEY, "schema")


def process(ctx: RunContext, do_append: bool, run: TemplateRun, v: Any):
    run.emit(Template(template="json", type="model", name="model", data=_to_plain(v)))


def post(ctx: RunContext, buf: bytes) -> bytes:
    """Validate and re-indent the generated document."""
    data = json.loads(buf)
    return (json.dumps(data, indent=2) + "\n").encode("utf-8")


TEMPLATE_SET = TemplateSet(
    files=TEMPLATE_DIR,
    commands=["schema"],
    file_ext=".json",
    flags=FLAGS,
    order=["json"],
    file_name=file_name,
    process=process,
    post=post,
)

register("json", TEMPLATE_SET)

__all__ = ["TEMPLATE_SET", "FILENAME_KEY"]
