"""
Built-in template sets.

Importing this package registers every built-in template set with the
global registry.
"""

from . import json, python

__all__ = ["json", "python"]
