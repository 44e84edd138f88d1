"""
Shared test fixtures.
"""

import pytest

from schemagen.templates import RunContext, Template, TemplateRegistry, TemplateSet

# === Demo template set ===

DEMO_TEMPLATES = {
    "header.txt.tpl": "-- generated --\n",
    "table.txt.tpl": "TABLE {{ name }}\n",
    "footer.txt.tpl": "-- end --\n",
    "package.txt.tpl": "PACKAGE {{ name }}\n",
}


def demo_header(ctx):
    return Template(template="header", type="header", name="header")


def demo_process(ctx, do_append, run, v):
    """Emit a table template per name, then the footer."""
    for name in v.get("tables", []):
        run.emit(Template(template="table", type="table", name=name, data={"name": name}))
    if v.get("footer", True):
        run.emit(Template(template="footer", type="footer", name="footer"))


# === Fixtures ===


@pytest.fixture
def template_dir(tmp_path):
    """Directory holding the demo templates."""
    d = tmp_path / "templates"
    d.mkdir()
    for name, content in DEMO_TEMPLATES.items():
        (d / name).write_text(content, encoding="utf-8")
    return d


@pytest.fixture
def out_dir(tmp_path):
    """Empty output directory."""
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def demo_set(template_dir):
    """Template set writing everything to demo.txt."""
    return TemplateSet(
        files=template_dir,
        file_ext=".txt",
        order=["header", "table", "footer"],
        header_template=demo_header,
        file_name=lambda ctx, tpl: "demo",
        process=demo_process,
    )


@pytest.fixture
def registry(demo_set):
    """Registry with the demo template set registered."""
    registry = TemplateRegistry()
    registry.register("demo", demo_set)
    return registry


@pytest.fixture
def ctx(out_dir):
    """Run context targeting the demo template set."""
    return RunContext(template_type="demo", out=out_dir)
