"""Tests for the base template funcs."""

import pytest
from jinja2 import Environment, StrictUndefined
from jinja2.defaults import DEFAULT_FILTERS, DEFAULT_NAMESPACE

from schemagen.templates import base_funcs


@pytest.fixture
def funcs():
    return base_funcs()


@pytest.fixture
def render(funcs):
    """Render a template string with the base funcs installed."""
    env = Environment(undefined=StrictUndefined, keep_trailing_newline=True)
    env.globals.update(funcs)
    env.filters.update(funcs)

    def _render(source, **context):
        return env.from_string(source).render(**context)

    return _render


class TestStringFuncs:
    """Tests for string helpers."""

    def test_casing(self, funcs):
        """Test case conversion helpers."""
        assert funcs["snake_case"]("UserAccount") == "user_account"
        assert funcs["camel_case"]("user_account") == "userAccount"
        assert funcs["pascal_case"]("user-account") == "UserAccount"
        assert funcs["kebab_case"]("UserAccount") == "user-account"
        assert funcs["screaming_snake"]("userAccount") == "USER_ACCOUNT"

    def test_trimming(self, funcs):
        """Test prefix and suffix trimming."""
        assert funcs["trim_prefix"]("tbl_users", "tbl_") == "users"
        assert funcs["trim_suffix"]("users_id", "_id") == "users"

    def test_quoting(self, funcs):
        """Test quoting helpers."""
        assert funcs["quote"]('say "hi"') == '"say \\"hi\\""'
        assert funcs["squote"]("a", "b") == "'a' 'b'"

    def test_indent_and_comment(self, funcs):
        """Test line based helpers."""
        assert funcs["nindent"]("a", 2) == "\n  a"
        assert funcs["comment"]("first\n\nsecond") == "// first\n//\n// second"
        assert funcs["comment"]("x", "--") == "-- x"


class TestSequenceFuncs:
    """Tests for sequence and mapping helpers."""

    def test_list_helpers(self, funcs):
        """Test list manipulation."""
        items = ["b", "a", "b", ""]
        assert funcs["uniq"](items) == ["b", "a", ""]
        assert funcs["compact"](items) == ["b", "a", "b"]
        assert funcs["sort_alpha"](items) == ["", "a", "b", "b"]
        assert funcs["rest"](["a", "b", "c"]) == ["b", "c"]
        assert funcs["initial"](["a", "b", "c"]) == ["a", "b"]
        assert funcs["append"](["a"], "b") == ["a", "b"]
        assert funcs["prepend"](["a"], "b") == ["b", "a"]

    def test_mapping_helpers(self, funcs):
        """Test mapping helpers."""
        m = {"a": 1, "b": 2}
        assert funcs["keys"](m) == ["a", "b"]
        assert funcs["values"](m) == [1, 2]
        assert funcs["pick"](m, "a") == {"a": 1}
        assert funcs["omit"](m, "a") == {"b": 2}


class TestArithmeticFuncs:
    """Tests for arithmetic helpers."""

    def test_arithmetic(self, funcs):
        assert funcs["add"](1, 2, 3) == 6
        assert funcs["sub"](5, 2) == 3
        assert funcs["mul"](2, 3, 4) == 24
        assert funcs["div"](7, 2) == 3
        assert funcs["div"](7.0, 2) == 3.5
        assert funcs["mod"](7, 2) == 1
        assert funcs["add1"](1) == 2


class TestFormattingFuncs:
    """Tests for formatting and logic helpers."""

    def test_printf(self, funcs):
        assert funcs["printf"]("%s-%03d", "id", 7) == "id-007"

    def test_json(self, funcs):
        assert funcs["to_json"]({"b": 1, "a": [1]}) == '{"a": [1], "b": 1}'
        assert funcs["to_pretty_json"]({"a": 1}) == '{\n  "a": 1\n}'

    def test_defaults(self, funcs):
        assert funcs["coalesce"](None, "", "z") == "z"
        assert funcs["empty"]([]) is True
        assert funcs["ternary"](False, "a", "b") == "b"
        assert funcs["plural"](1, "row", "rows") == "row"
        assert funcs["plural"](2, "row", "rows") == "rows"

    def test_fresh_table_each_call(self):
        """Test callers cannot modify the shared base funcs."""
        funcs = base_funcs()
        funcs["snake_case"] = None

        assert base_funcs()["snake_case"] is not None


class TestTemplateUsage:
    """Tests for funcs called from templates."""

    def test_as_globals_and_filters(self, render):
        """Test funcs are usable both as calls and as filters."""
        assert render("{{ pascal_case(name) }}", name="user_id") == "UserId"
        assert render("{{ name | snake_case }}", name="UserId") == "user_id"
        assert render("{{ items | join(', ') }}", items=["a", "b"]) == "a, b"

    def test_default_with_undefined(self, render):
        """Test default accepts undefined values under strict rendering."""
        assert render("{{ missing | default('none') }}") == "none"


class TestJinjaBuiltins:
    """Tests that Jinja2's own filters and globals keep their behavior."""

    def test_no_overlap_with_jinja(self, funcs):
        """Test base funcs never replace a Jinja2 filter or global."""
        assert not set(funcs) & set(DEFAULT_FILTERS)
        assert not set(funcs) & set(DEFAULT_NAMESPACE)

    def test_first_on_filtered_sequence(self, render):
        cols = [{"n": "body", "pk": False}, {"n": "id", "pk": True}, {"n": "uid", "pk": True}]

        source = "{{ cols | selectattr('pk') | map(attribute='n') | first }}"
        assert render(source, cols=cols) == "id"

    def test_list_splits_strings(self, render):
        assert render("{{ 'ab' | list }}") == "['a', 'b']"

    def test_default_keeps_falsy_values(self, render):
        assert render("{{ 0 | default(5) }}") == "0"
        assert render("{{ '' | default('x', true) }}") == "x"

    def test_attribute_aggregates(self, render):
        rows = [{"a": 3}, {"a": 7}]

        assert render("{{ (rows | max(attribute='a')).a }}", rows=rows) == "7"
        assert render("{{ ' xx ' | trim }}|{{ '--x--' | trim('-') }}") == "xx|x"
