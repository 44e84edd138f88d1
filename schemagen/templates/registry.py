"""
Template set registry.

Maps generation target names to their template set declarations and
answers capability queries over the registered sets.
"""

from typing import Dict, List, Optional

from ..logging_config import get_logger
from .errors import UnknownTemplateError
from .model import FlagSet, TemplateSet

logger = get_logger(__name__)

# Command that every template set supports
DUMP_COMMAND = "dump"


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class TemplateRegistry:
    """Registry for managing available template sets."""

    def __init__(self):
        """Initialize empty registry."""
        self._sets: Dict[str, TemplateSet] = {}

    def register(self, typ: str, template_set: TemplateSet):
        """
        Register a template set.

        A later registration under the same name replaces the earlier one.

        Args:
            typ: Template set name (e.g., 'json', 'python')
            template_set: Template set declaration

        Raises:
            RegistryError: If the name or the set is invalid
        """
        if not typ:
            raise RegistryError("Template set name must not be empty")
        if not isinstance(template_set, TemplateSet):
            raise RegistryError(
                f"Template set {typ!r} must be a TemplateSet, got {type(template_set).__name__}"
            )

        if typ in self._sets and self._sets[typ] is not template_set:
            logger.warning("Template set %r registered again, replacing", typ)

        self._sets[typ] = template_set
        logger.debug("Registered template set %r", typ)

    def unregister(self, typ: str):
        """Remove a template set if registered."""
        self._sets.pop(typ, None)

    def get(self, typ: str) -> TemplateSet:
        """
        Get the template set registered under a name.

        Raises:
            UnknownTemplateError: If no set is registered
        """
        try:
            return self._sets[typ]
        except KeyError:
            raise UnknownTemplateError(typ) from None

    def types(self) -> List[str]:
        """Get sorted list of registered template set names."""
        return sorted(self._sets)

    def for_command(self, typ: str, name: str) -> bool:
        """
        Check if a template set is available for a command.

        Args:
            typ: Template set name
            name: Command name

        Returns:
            True if available
        """
        if name == DUMP_COMMAND:
            return True
        template_set = self._sets.get(typ)
        if template_set is not None and template_set.commands is not None:
            return name in template_set.commands
        return True

    def flags(self, name: str) -> List[FlagSet]:
        """
        Get the additional options of all template sets for a command.

        These should be added to the run context of any call to a template
        set func.

        Args:
            name: Command name

        Returns:
            Flags tagged with their template set name
        """
        flags = []
        for typ in self.types():
            template_set = self._sets[typ]
            if template_set.commands is not None and name not in template_set.commands:
                continue
            for flag in template_set.flags:
                flags.append(FlagSet(type=typ, name=flag.context_key, flag=flag))
        return flags

    def __contains__(self, typ: str) -> bool:
        return typ in self._sets

    def __len__(self) -> int:
        return len(self._sets)


# Global registry instance - created once
_global_registry: Optional[TemplateRegistry] = None


def get_registry() -> TemplateRegistry:
    """Get the global template set registry, initializing if needed."""
    global _global_registry
    if _global_registry is None:
        _global_registry = TemplateRegistry()
    return _global_registry


# Public API functions using the global registry


def register(typ: str, template_set: TemplateSet):
    """Register a template set in the global registry."""
    get_registry().register(typ, template_set)


def types() -> List[str]:
    """List registered template set names from the global registry."""
    return get_registry().types()


def for_command(typ: str, name: str) -> bool:
    """Check if a template set in the global registry supports a command."""
    return get_registry().for_command(typ, name)


def flags(name: str) -> List[FlagSet]:
    """Get the flags of the global registry's template sets for a command."""
    return get_registry().flags(name)
