"""
Template function environment.

Builds the name to callable table available to every template of a run:
the base helpers (or a template set's own funcs) plus the functions
returned by the template set's optional ``funcs.py.tpl`` extension script.
"""

import builtins
import inspect
import json
import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Dict, List

from jinja2 import Undefined

from ..logging_config import get_logger
from . import naming
from .context import RunContext
from .errors import FuncsError, RunCancelledError
from .model import FUNCS_RESOURCE, Template, TemplateSet

logger = get_logger(__name__)

# Modules extension scripts may not import. The import machinery is listed
# so denied modules cannot be reached through importlib or builtins.
DENIED_MODULES = frozenset(
    {
        "ctypes",
        "_ctypes",
        "cffi",
        "mmap",
        "_posixsubprocess",
        "importlib",
        "_imp",
        "builtins",
        "sys",
    }
)

# Entry point an extension script must define
INIT_FUNC = "Init"


# String helpers


def _trim_prefix(s: str, prefix: str) -> str:
    return str(s).removeprefix(prefix)


def _trim_suffix(s: str, suffix: str) -> str:
    return str(s).removesuffix(suffix)


def _quote(*values: Any) -> str:
    return " ".join(json.dumps(str(v)) for v in values if v is not None)


def _squote(*values: Any) -> str:
    return " ".join(f"'{v}'" for v in values if v is not None)


def _indent(s: str, spaces: int = 4) -> str:
    """Indent every line of s."""
    pad = " " * spaces
    return "\n".join(pad + line for line in str(s).split("\n"))


def _nindent(s: str, spaces: int = 4) -> str:
    return "\n" + _indent(s, spaces)


def _comment(s: str, style: str = "//") -> str:
    """Add comment markers to each line."""
    lines = str(s).split("\n")
    return "\n".join(f"{style} {line}" if line.strip() else style for line in lines)


# Sequence helpers


def _split(s: str, sep: str | None = None) -> List[str]:
    return str(s).split(sep)


def _rest(items: Any) -> list:
    return list(items[1:]) if items else []


def _initial(items: Any) -> list:
    return list(items[:-1]) if items else []


def _uniq(items: Any) -> list:
    result = []
    for item in items or []:
        if item not in result:
            result.append(item)
    return result


def _sort_alpha(items: Any) -> List[str]:
    return sorted(str(item) for item in items or [])


def _compact(items: Any) -> list:
    return [item for item in items or [] if not _empty(item)]


def _append(items: Any, *values: Any) -> list:
    return list(items or []) + list(values)


def _prepend(items: Any, *values: Any) -> list:
    return list(values) + list(items or [])


def _has(items: Any, value: Any) -> bool:
    return value in (items or [])


def _keys(*mappings: Mapping) -> list:
    result = []
    for m in mappings:
        result.extend(m.keys())
    return result


def _values(m: Mapping) -> list:
    return list(m.values())


def _pick(m: Mapping, *keys: str) -> dict:
    return {k: m[k] for k in keys if k in m}


def _omit(m: Mapping, *keys: str) -> dict:
    return {k: v for k, v in m.items() if k not in keys}


# Arithmetic helpers


def _add(*values: Any) -> Any:
    return sum(values)


def _sub(a: Any, b: Any) -> Any:
    return a - b


def _mul(*values: Any) -> Any:
    return math.prod(values)


def _div(a: Any, b: Any) -> Any:
    if isinstance(a, int) and isinstance(b, int):
        return a // b
    return a / b


def _mod(a: Any, b: Any) -> Any:
    return a % b


def _add1(a: Any) -> Any:
    return a + 1


# Formatting and logic helpers


def _printf(fmt: str, *args: Any) -> str:
    """printf style formatting."""
    return fmt % args if args else fmt


def _to_json(value: Any) -> str:
    return json.dumps(value, default=str, sort_keys=True)


def _to_pretty_json(value: Any, indent: int = 2) -> str:
    return json.dumps(value, default=str, sort_keys=True, indent=indent)


def _empty(value: Any) -> bool:
    if isinstance(value, Undefined) or value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set)):
        return len(value) == 0
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    return False


def _coalesce(*values: Any) -> Any:
    for value in values:
        if not _empty(value):
            return value
    return None


def _ternary(condition: Any, true_value: Any, false_value: Any) -> Any:
    return true_value if condition else false_value


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def base_funcs() -> Dict[str, Callable]:
    """
    Get the base template funcs.

    The same helpers are available to every template set that does not
    declare its own funcs. Names already provided by Jinja2 as filters or
    globals (``first``, ``join``, ``default``, ``dict``, ...) are left to
    Jinja2.

    Returns:
        Fresh mapping of func name to callable
    """
    return {
        # strings
        "snake_case": naming.snake_case,
        "camel_case": naming.camel_case,
        "pascal_case": naming.pascal_case,
        "kebab_case": naming.kebab_case,
        "screaming_snake": naming.screaming_snake,
        "trim_prefix": _trim_prefix,
        "trim_suffix": _trim_suffix,
        "repeat": lambda s, count: str(s) * count,
        "quote": _quote,
        "squote": _squote,
        "nindent": _nindent,
        "comment": _comment,
        "contains": lambda s, sub: sub in str(s),
        "has_prefix": lambda s, prefix: str(s).startswith(prefix),
        "has_suffix": lambda s, suffix: str(s).endswith(suffix),
        # sequences
        "split": _split,
        "rest": _rest,
        "initial": _initial,
        "uniq": _uniq,
        "sort_alpha": _sort_alpha,
        "compact": _compact,
        "append": _append,
        "prepend": _prepend,
        "has": _has,
        "keys": _keys,
        "values": _values,
        "pick": _pick,
        "omit": _omit,
        # arithmetic
        "add": _add,
        "sub": _sub,
        "mul": _mul,
        "div": _div,
        "mod": _mod,
        "add1": _add1,
        "ceil": math.ceil,
        "floor": math.floor,
        # formatting
        "printf": _printf,
        "to_json": _to_json,
        "to_pretty_json": _to_pretty_json,
        "empty": _empty,
        "coalesce": _coalesce,
        "ternary": _ternary,
        "plural": _plural,
    }


def symbols(ctx: RunContext) -> Dict[str, Any]:
    """
    Get the names made available to extension scripts.

    Includes the base funcs, the naming helpers and core types, plus any
    symbols supplied on the run context.
    """
    names: Dict[str, Any] = dict(base_funcs())
    names.update(
        {
            "Template": Template,
            "RunContext": RunContext,
            "NamingCase": naming.NamingCase,
            "convert_case": naming.convert_case,
            "NameSanitizer": naming.NameSanitizer,
            "create_python_sanitizer": naming.create_python_sanitizer,
            "base_funcs": base_funcs,
        }
    )
    names.update(ctx.symbols or {})
    return names


def _guarded_import(name, globals=None, locals=None, fromlist=(), level=0):
    """Import hook refusing low-level modules inside extension scripts."""
    if level == 0 and name.partition(".")[0] in DENIED_MODULES:
        raise ImportError(f"import of {name!r} is not allowed in {FUNCS_RESOURCE}")
    return builtins.__import__(name, globals, locals, fromlist, level)


def _check_init_shape(init: Any):
    """Ensure Init takes the run context as its only positional parameter."""
    if not callable(init):
        raise FuncsError(
            f"funcs.{INIT_FUNC} must be callable, has: {type(init).__name__}"
        )
    try:
        params = list(inspect.signature(init).parameters.values())
    except (TypeError, ValueError):
        params = None

    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    if params is None or len(params) != 1 or params[0].kind not in positional:
        raise FuncsError(
            f"funcs.{INIT_FUNC} must have signature `{INIT_FUNC}(ctx) -> (funcs, error)`, "
            f"has: `{INIT_FUNC}{_describe_signature(init)}`"
        )


def _describe_signature(func: Callable) -> str:
    try:
        return str(inspect.signature(func))
    except (TypeError, ValueError):
        return "(?)"


def add_custom_funcs(
    ctx: RunContext, template_set: TemplateSet, funcs: Dict[str, Callable]
) -> Dict[str, Callable]:
    """
    Add funcs from the template tree's ``funcs.py.tpl`` to the template funcs.

    The script is executed as a module whose globals hold the names from
    :func:`symbols`. It must define ``Init(ctx)`` returning either a mapping
    of func names to callables, or a ``(mapping, error)`` tuple. A missing
    script is not an error.

    Args:
        ctx: Run context
        template_set: Template set whose tree holds the script
        funcs: Funcs to update in place

    Returns:
        The updated funcs

    Raises:
        FuncsError: If the script cannot be read, evaluated or initialized
    """
    src = Path(ctx.src) if ctx.src is not None else Path(template_set.files)
    path = src / FUNCS_RESOURCE

    if ctx.cancelled:
        raise RunCancelledError(f"cancelled before loading {FUNCS_RESOURCE}")

    try:
        source = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return funcs
    except OSError as e:
        raise FuncsError(f"unable to read {FUNCS_RESOURCE}: {e}") from e

    logger.debug("Evaluating custom funcs from %s", path)

    script_builtins = dict(vars(builtins))
    script_builtins["__import__"] = _guarded_import

    namespace: Dict[str, Any] = dict(symbols(ctx))
    namespace.update(
        {
            "__name__": "funcs",
            "__file__": str(path),
            "__builtins__": script_builtins,
        }
    )

    try:
        code = compile(source, str(path), "exec")
        exec(code, namespace)
    except Exception as e:
        raise FuncsError(f"unable to eval {FUNCS_RESOURCE}: {e}") from e

    if INIT_FUNC not in namespace:
        raise FuncsError(f"unable to eval funcs.{INIT_FUNC}: not defined")

    init = namespace[INIT_FUNC]
    _check_init_shape(init)

    try:
        result = init(ctx)
    except Exception as e:
        raise FuncsError(f"funcs.{INIT_FUNC} error: {e}") from e

    if isinstance(result, tuple):
        if len(result) != 2:
            raise FuncsError(
                f"funcs.{INIT_FUNC} must return (funcs, error), returned {len(result)} values"
            )
        custom, err = result
        if err is not None:
            if isinstance(err, BaseException):
                raise FuncsError(f"funcs.{INIT_FUNC} error: {err}") from err
            raise FuncsError(f"funcs.{INIT_FUNC} error: {err}")
    else:
        custom = result

    if custom is None:
        custom = {}
    if not isinstance(custom, Mapping):
        raise FuncsError(
            f"funcs.{INIT_FUNC} must return a mapping of funcs, returned: {type(custom).__name__}"
        )

    for name, func in custom.items():
        if not isinstance(name, str) or not callable(func):
            raise FuncsError(f"funcs.{INIT_FUNC} returned invalid func {name!r}")
        funcs[name] = func

    logger.debug("Added %d custom funcs: %s", len(custom), ", ".join(sorted(custom)))
    return funcs


def build_funcs(ctx: RunContext, template_set: TemplateSet) -> Dict[str, Callable]:
    """
    Build the template funcs for a run.

    Args:
        ctx: Run context
        template_set: Template set being processed

    Returns:
        Mapping of func name to callable
    """
    if template_set.funcs is None:
        funcs = base_funcs()
    else:
        funcs = dict(template_set.funcs(ctx))
    return add_custom_funcs(ctx, template_set, funcs)
