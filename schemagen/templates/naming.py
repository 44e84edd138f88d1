"""
Naming utilities used by template funcs.

Case conversions and keyword escaping for identifiers written into
generated code.
"""

import re
from enum import Enum
from typing import Optional, Set


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName
    KEBAB_CASE = "kebab"  # user-name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


def snake_case(name: str) -> str:
    """Convert to snake_case."""
    name = re.sub(r"[-\s.]+", "_", str(name))

    # Split acronyms from following words (HTTPServer -> HTTP_Server)
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)

    name = name.lower()
    name = re.sub(r"_+", "_", name)

    return name.strip("_")


def camel_case(name: str) -> str:
    """Convert to camelCase."""
    parts = snake_case(name).split("_")
    if not parts or not parts[0]:
        return ""
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


def pascal_case(name: str) -> str:
    """Convert to PascalCase."""
    return "".join(part.capitalize() for part in snake_case(name).split("_") if part)


def kebab_case(name: str) -> str:
    """Convert to kebab-case."""
    return snake_case(name).replace("_", "-")


def screaming_snake(name: str) -> str:
    """Convert to SCREAMING_SNAKE_CASE."""
    return snake_case(name).upper()


_CONVERTERS = {
    NamingCase.SNAKE_CASE: snake_case,
    NamingCase.CAMEL_CASE: camel_case,
    NamingCase.PASCAL_CASE: pascal_case,
    NamingCase.KEBAB_CASE: kebab_case,
    NamingCase.SCREAMING_SNAKE: screaming_snake,
}


def convert_case(name: str, target_case: NamingCase) -> str:
    """Convert name to target case style."""
    return _CONVERTERS[NamingCase(target_case)](name)


class NameSanitizer:
    """Makes names safe for use as identifiers in a target language."""

    def __init__(
        self,
        reserved_words: Optional[Set[str]] = None,
        builtin_types: Optional[Set[str]] = None,
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin names that might conflict
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()

    def sanitize_name(
        self,
        name: str,
        target_case: NamingCase = NamingCase.SNAKE_CASE,
        suffix_on_conflict: str = "_",
    ) -> str:
        """
        Sanitize a name for safe use in target language.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix to add for reserved names

        Returns:
            Sanitized name
        """
        # Remove invalid characters
        cleaned = re.sub(r"[^a-zA-Z0-9_-]", "_", str(name)).strip("_-")
        if not cleaned:
            cleaned = "field"

        converted = convert_case(cleaned, target_case)
        if converted and converted[0].isdigit():
            converted = f"_{converted}"

        if converted in self.reserved_words or converted in self.builtin_types:
            converted = f"{converted}{suffix_on_conflict}"

        return converted


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Python."""
    python_reserved = {
        "and", "as", "assert", "async", "await", "break", "class", "continue",
        "def", "del", "elif", "else", "except", "finally", "for", "from",
        "global", "if", "import", "in", "is", "lambda", "nonlocal", "not",
        "or", "pass", "raise", "return", "try", "while", "with", "yield",
        "True", "False", "None",
    }

    python_builtins = {
        "bool", "bytes", "dict", "float", "id", "int", "list", "object",
        "set", "str", "tuple", "type",
    }

    return NameSanitizer(python_reserved, python_builtins)
