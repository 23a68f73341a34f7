"""Tests for static signature reflection."""

import pytest

from phpdocgen.errors import ReflectionError
from phpdocgen.models import PhpExpression
from phpdocgen.reflection import ClosureRef, SignatureReflector, render_default_value


@pytest.fixture
def reflector():
    return SignatureReflector()


class TestLoading:
    def test_namespaced_functions(self, parse, reflector):
        source = parse(
            """
            <?php

            namespace arrays;

            function chunk(array $array, $size = 1) {}
            function _helper() {}
            """
        )
        assert reflector.load(source) == ["arrays\\chunk", "arrays\\_helper"]

        function = reflector.reflect("arrays\\chunk")
        assert function.name == "chunk"
        assert function.namespace == "arrays"
        assert [p.name for p in function.parameters] == ["array", "size"]

    def test_lookup_is_case_insensitive(self, parse, reflector):
        reflector.load(parse("<?php\nnamespace Arrays;\nfunction Chunk($a) {}\n"))
        assert reflector.reflect("\\arrays\\chunk").name == "Chunk"
        assert "ARRAYS\\CHUNK" in reflector

    def test_braced_and_global_functions(self, parse, reflector):
        reflector.load(parse("<?php\nfunction globalFn() {}\n"))
        reflector.load(parse("<?php\nnamespace strings {\n    function pad($s) {}\n}\n"))
        assert reflector.reflect("globalFn").namespace is None
        assert reflector.reflect("strings\\pad").namespace == "strings"

    def test_unknown_function(self, reflector):
        with pytest.raises(ReflectionError, match=r"Function nope\\missing\(\) does not exist"):
            reflector.reflect("nope\\missing")

    def test_closure(self, parse, reflector):
        source = parse("<?php\nreturn function ($input, $encoding = 'UTF-8') {};\n")
        (statement,) = source.top_level()
        closure = statement.named_children[0]
        function = reflector.reflect(ClosureRef(source, closure))
        assert function.namespace is None
        assert [p.name for p in function.parameters] == ["input", "encoding"]
        assert function.parameters[1].default_value == "UTF-8"


class TestParameters:
    @pytest.fixture
    def parameters(self, parse, reflector):
        reflector.load(
            parse(
                r"""
                <?php

                namespace sample;

                function defaults(
                    $required,
                    $nothing = null,
                    $flag = true,
                    $off = FALSE,
                    $single = 'it\'s',
                    $double = "a\tb",
                    $list = [1, 2],
                    $map = array('k' => 1),
                    $int = 42,
                    $negative = -1,
                    $hex = 0x1F,
                    $float = 1.5,
                    $constant = PHP_INT_MAX,
                    ...$rest
                ) {}
                """
            )
        )
        return {p.name: p for p in reflector.reflect("sample\\defaults").parameters}

    def test_required(self, parameters):
        required = parameters["required"]
        assert not required.is_optional
        assert not required.has_default

    def test_literal_defaults(self, parameters):
        assert parameters["nothing"].has_default
        assert parameters["nothing"].default_value is None
        assert parameters["flag"].default_value is True
        assert parameters["off"].default_value is False
        assert parameters["single"].default_value == "it's"
        assert parameters["double"].default_value == "a\tb"
        assert parameters["list"].default_value == [1, 2]
        assert parameters["map"].default_value == {"k": 1}
        assert parameters["int"].default_value == 42
        assert parameters["negative"].default_value == -1
        assert parameters["hex"].default_value == 31
        assert parameters["float"].default_value == 1.5

    def test_expression_defaults_keep_source_text(self, parameters):
        assert parameters["constant"].default_value == PhpExpression("PHP_INT_MAX")

    def test_variadic(self, parameters):
        rest = parameters["rest"]
        assert rest.is_variadic
        assert rest.is_optional
        assert not rest.has_default

    def test_default_before_required_is_not_optional(self, parse, reflector):
        reflector.load(parse("<?php\nfunction odd($a = 1, $b) {}\n"))
        first, second = reflector.reflect("odd").parameters
        assert not first.is_optional
        assert not first.has_default
        assert not second.is_optional


class TestRenderDefaultValue:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, "null"),
            (True, "true"),
            (False, "false"),
            ("UTF-8", "'UTF-8'"),
            ("", "''"),
            ([], "[]"),
            ([1, 2, 3], "[]"),
            ({"k": 1}, "[]"),
            (0, "0"),
            (42, "42"),
            (1.5, "1.5"),
            (2.0, "2"),
            (PhpExpression("SORT_REGULAR"), "SORT_REGULAR"),
        ],
    )
    def test_rendering(self, value, expected):
        assert render_default_value(value) == expected
