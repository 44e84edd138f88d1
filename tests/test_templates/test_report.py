"""Tests for the run report."""

import dataclasses

from rich.console import Console

from schemagen.templates import print_report, process, write


def record_console():
    return Console(record=True, width=120, color_system=None)


class TestPrintReport:
    """Tests for print_report."""

    def test_clean_run(self, ctx, registry):
        """Test a run without errors lists its files."""
        run = process(ctx, False, "", {"tables": ["posts"]}, registry=registry)
        write(ctx, run)
        console = record_console()

        count = print_report(run, console=console)

        text = console.export_text()
        assert count == 0
        assert "demo.txt" in text
        assert "Errors" not in text

    def test_reports_file_errors(self, ctx, registry, demo_set):
        """Test post failures are counted and listed."""

        def post(ctx, buf):
            raise ValueError("bad output")

        registry.register("demo", dataclasses.replace(demo_set, post=post))
        run = process(ctx, False, "", {"tables": ["posts"]}, registry=registry)
        write(ctx, run)
        console = record_console()

        count = print_report(run, console=console)

        text = console.export_text()
        assert count == 1
        assert "Errors" in text
        assert "post failed demo.txt: bad output" in text
