"""
Python template set.

Generates Python dataclasses from a database schema, one module per table
or a single ``models.py`` when ``python_single_file`` is set.
"""

from pathlib import Path
from typing import Any, List

from ...templates import Flag, RunContext, Template, TemplateRun, TemplateSet, register
from ...templates.naming import snake_case
from .types import Field, Schema, Table

TEMPLATE_DIR = Path(__file__).parent / "templates"

SINGLE_FILE_KEY = "python_single_file"
SCHEMA_KEY = "python_schema"

FLAGS = [
    Flag(
        context_key=SINGLE_FILE_KEY,
        type="bool",
        desc="write all models to models.py",
        default=False,
    ),
    Flag(
        context_key=SCHEMA_KEY,
        type="string",
        desc="schema name written to db.py",
        default="public",
    ),
]


def _is_true(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def build_context(ctx: RunContext) -> RunContext:
    """Normalize flag values given as strings."""
    return ctx.with_values(**{SINGLE_FILE_KEY: _is_true(ctx.value(SINGLE_FILE_KEY))})


def header_template(ctx: RunContext) -> Template:
    return Template(template="header", type="header", name="header")


def package_templates(ctx: RunContext) -> List[Template]:
    return [Template(template="db", type="schema", name=ctx.value(SCHEMA_KEY, "public"))]


def file_name(ctx: RunContext, tpl: Template) -> str:
    """Determine the module a template is written to."""
    if ctx.value(SINGLE_FILE_KEY):
        return "models"
    if tpl.template == "db":
        return "db"
    return snake_case(tpl.name)


def process(ctx: RunContext, do_append: bool, run: TemplateRun, v: Any):
    """Emit one table template per table of the schema."""
    schema = v if isinstance(v, Schema) else Schema.from_dict(v)
    for table in schema.tables:
        run.emit(
            Template(
                template="table",
                type=table.type,
                name=table.name,
                data=table,
            )
        )


def format_code(ctx: RunContext, buf: bytes) -> bytes:
    """Strip trailing whitespace and collapse runs of blank lines."""
    lines = buf.decode("utf-8").split("\n")
    formatted_lines = []
    blank_count = 0

    for line in lines:
        stripped = line.rstrip()
        if not stripped:
            blank_count += 1
            if blank_count <= 2:  # Allow max 2 consecutive blank lines
                formatted_lines.append("")
        else:
            blank_count = 0
            formatted_lines.append(stripped)

    return ("\n".join(formatted_lines).strip("\n") + "\n").encode("utf-8")


TEMPLATE_SET = TemplateSet(
    files=TEMPLATE_DIR,
    commands=["schema"],
    file_ext=".py",
    flags=FLAGS,
    order=["db", "table"],
    header_template=header_template,
    package_templates=package_templates,
    file_name=file_name,
    build_context=build_context,
    process=process,
    post=format_code,
)

register("python", TEMPLATE_SET)

__all__ = [
    "Field",
    "Table",
    "Schema",
    "TEMPLATE_SET",
    "SINGLE_FILE_KEY",
    "SCHEMA_KEY",
]
