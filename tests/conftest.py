"""Shared pytest fixtures for phpdocgen tests."""

import textwrap
from pathlib import Path

import pytest

from phpdocgen.config import GeneratorConfig
from phpdocgen.toolset import Toolset

LIBRARY_FILES = {
    "arrays/chunk.php": r"""
        <?php

        namespace arrays;

        /**
         * Creates an array of elements split into groups the length of `size`.
         *
         * If array can't be split evenly, the final chunk will be the remaining elements.
         *
         * **Usage**
         *
         * ```php
         * __::chunk([1, 2, 3, 4, 5], 3);
         * __::chunk([1, 2], 1);
         * ```
         *
         * @since 0.2.0 added support for iterables
         *
         * @param array  $array        original array
         * @param int    $size         the chunk size
         * @param bool   $preserveKeys preserve keys
         * @param string $unknown      this parameter was removed
         *
         * @return array a new array of chunks
         */
        function chunk(array $array, $size = 1, $preserveKeys = false)
        {
            return array_chunk($array, $size, $preserveKeys);
        }
        """,
    "collections/doForEach.php": r"""
        <?php

        namespace collections;

        /**
         * Iterate over elements of the collection.
         *
         * @param array|iterable $collection the collection
         * @param \Closure       $iteratee   the function to call
         *
         * @return void
         */
        function doForEach($collection, \Closure $iteratee)
        {
            foreach ($collection as $key => $value) {
                $iteratee($value, $key);
            }
        }
        """,
    "collections/filter.php": r"""
        <?php

        namespace collections;

        /**
         * @internal
         */
        function _applyFilter($item)
        {
            return $item;
        }

        /**
         * Returns the values that pass a truth test.
         *
         * @param array|iterable $collection the collection to filter
         * @param \Closure|null  $closure    closure to filter the array
         *
         * @throws \InvalidArgumentException when the collection is not iterable
         * @since 0.1.0
         * @since 0.3.0 closure became optional
         *
         * @return array
         */
        function filter($collection, \Closure $closure = null)
        {
            return array_filter($collection, $closure);
        }
        """,
    "collections/secret.php": r"""
        <?php

        namespace collections;

        /**
         * Not part of the public API.
         *
         * @internal
         *
         * @return array
         */
        function secret($collection)
        {
            return [];
        }
        """,
    "functions/compose.php": r"""
        <?php

        namespace functions;

        /**
         * Compose functions right to left.
         *
         * @param callable ...$functions functions to compose
         *
         * @return \Closure
         */
        function compose(...$functions)
        {
            return function () {};
        }
        """,
    "functions/sum.php": r"""
        <?php

        namespace functions;

        /**
         * Sum the given values.
         *
         * @param array $array the values
         * @param mixed ...$more extra values read through func_get_args()
         *
         * @return int|float
         */
        function sum(array $array)
        {
            return array_sum(func_get_args());
        }
        """,
    "misc/legacy.php": r"""
        <?php

        /**
         * A global function, not picked up.
         */
        function legacy()
        {
        }
        """,
    "strings/Formatter.php": r"""
        <?php

        namespace strings;

        class Formatter
        {
        }
        """,
    "strings/broken.php": r"""
        <?php

        /**
         * Points at a function that was never declared.
         *
         * @return string
         */
        return 'strings\\neverDeclared';
        """,
    "strings/toUpper.php": r"""
        <?php

        /**
         * Convert a string to upper case.
         *
         * @param string $input    the string
         * @param string $encoding encoding name
         *
         * @return string
         */
        return function ($input, $encoding = 'UTF-8') {
            return mb_strtoupper($input, $encoding);
        };
        """,
    "utilities/bottomline_max.php": r"""
        <?php

        namespace utilities;

        /**
         * Returns the maximum value of a collection.
         *
         * @param array|iterable $collection the collection
         *
         * @return mixed
         */
        function bottomline_max($collection)
        {
            return max($collection);
        }
        """,
    "sequences/BottomlineWrapper.php": r"""
        <?php

        // Do NOT modify this doc block, it is automatically generated.
        /**
         * Stale documentation.
         *
         * @method static \BottomlineWrapper stale()
         */
        class BottomlineWrapper
        {
            private $value;

            public function __construct($value)
            {
                $this->value = $value;
            }
        }
        """,
    "load.php": r"""
        <?php

        namespace {
            /**
             * @method static stale()
             */
            class __
            {
                public static function __callStatic($name, $arguments)
                {
                    return call_user_func_array('__\\' . $name, $arguments);
                }
            }

            /*
             * Function counts per namespace:
             ** Arrays [9]
             ** Collections [9]
             ** Unknown [5]
             */
            if (!defined('BOTTOMLINE_LOADED')) {   
                define('BOTTOMLINE_LOADED', true);
            }
            define('BOTTOMLINE_VERSION', '1.0');
        }
        """,
}

EXPECTED_FUNCTIONS = ["chunk", "doForEach", "filter", "compose", "sum", "toUpper", "max"]


def write_php(path: Path, source: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source).lstrip("\n"), encoding="utf-8")
    return path


@pytest.fixture(scope="session")
def toolset():
    return Toolset()


@pytest.fixture
def library(tmp_path):
    """A miniature library tree, returned as its GeneratorConfig."""
    source_dir = tmp_path / "src" / "__"
    for relative, source in LIBRARY_FILES.items():
        write_php(source_dir / relative, source)
    return GeneratorConfig.from_root(tmp_path)


@pytest.fixture
def parse(toolset):
    """Parse a dedented PHP snippet."""

    def _parse(source: str):
        return toolset.php.parse(textwrap.dedent(source).lstrip("\n"))

    return _parse
