"""
Exceptions raised by the template engine.

Configuration and rendering errors abort a run. Per-file errors
(:class:`PostFailedError` and write failures) are collected on the file
buffer instead and reported after the run.
"""


class TemplateError(Exception):
    """Base exception for template processing errors."""

    pass


class UnknownTemplateError(TemplateError):
    """Raised when no template set is registered under the requested name."""

    def __init__(self, typ: str):
        self.type = typ
        super().__init__(f"unknown template {typ!r}")


class FuncsError(TemplateError):
    """Raised when the template function environment cannot be built."""

    pass


class TemplateLoadError(TemplateError):
    """Raised when a template cannot be opened, read or parsed."""

    pass


class TemplateExecError(TemplateError):
    """Raised when a template fails while rendering."""

    pass


class RunCancelledError(TemplateError):
    """Raised when a run observes its cancel event."""

    pass


class PostFailedError(TemplateError):
    """Post processing failed for a generated file."""

    def __init__(self, file: str, err: Exception):
        self.file = file
        self.err = err
        super().__init__(f"post failed {file}: {err}")
        self.__cause__ = err
