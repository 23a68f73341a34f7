"""Static signature reflection for PHP functions.

Functions are never executed. Loading a file indexes the declarations it
contains; reflecting a function reads its parameter list and evaluates
literal default values from the syntax tree.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from tree_sitter import Node

from .errors import ReflectionError
from .models import PhpExpression, ReflectedFunction, ReflectedParameter
from .source import SourceFile

CLOSURE_TYPES = frozenset(
    {"anonymous_function", "anonymous_function_creation_expression", "arrow_function"}
)
_PARAMETER_TYPES = frozenset(
    {"simple_parameter", "variadic_parameter", "property_promotion_parameter"}
)
_INTEGER = re.compile(r"[-+]?(?:0[xX][\da-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|\d[\d_]*)")
_FLOAT = re.compile(r"[-+]?(?:\d[\d_]*)?\.?\d[\d_]*(?:[eE][-+]?\d+)?")
_DOUBLE_QUOTE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "v": "\v",
    "e": "\x1b",
    "f": "\f",
    "0": "\0",
    "\\": "\\",
    "$": "$",
    '"': '"',
}


@dataclass(frozen=True)
class ClosureRef:
    """A closure value located in a parsed file."""

    source: SourceFile
    node: Node


def _parse_int(text: str) -> int:
    digits = text.replace("_", "").lower()
    sign = -1 if digits.startswith("-") else 1
    digits = digits.lstrip("+-")
    if digits.startswith("0x"):
        return sign * int(digits[2:], 16)
    if digits.startswith("0b"):
        return sign * int(digits[2:], 2)
    if digits.startswith("0o"):
        return sign * int(digits[2:], 8)
    if len(digits) > 1 and digits.startswith("0"):
        return sign * int(digits[1:], 8)
    return sign * int(digits)


def _unquote_single(text: str) -> str:
    body = text[2:-1] if text[:1] in "bB" else text[1:-1]
    return re.sub(r"\\([\\'])", r"\1", body)


def _unquote_double(text: str) -> str:
    body = text[2:-1] if text[:1] in "bB" else text[1:-1]
    return re.sub(
        r"\\(.)",
        lambda m: _DOUBLE_QUOTE_ESCAPES.get(m.group(1), m.group(0)),
        body,
    )


def _evaluate_array(node: Node, source: SourceFile) -> list | dict:
    items = [c for c in node.named_children if c.type == "array_element_initializer"]
    keyed = any(
        any(child.type == "=>" for child in item.children) for item in items
    )
    if not keyed:
        return [evaluate_literal(item.named_children[0], source) for item in items if item.named_children]

    result: dict[Any, Any] = {}
    for item in items:
        values = item.named_children
        if len(values) == 2:
            key = evaluate_literal(values[0], source)
            if isinstance(key, (list, dict)):
                key = source.text(values[0])
            result[key] = evaluate_literal(values[1], source)
        elif values:
            result[len(result)] = evaluate_literal(values[0], source)
    return result


def evaluate_literal(node: Node, source: SourceFile) -> Any:
    """Evaluate a constant default-value expression.

    Anything that is not a plain literal is returned as a PhpExpression holding
    its source text.
    """
    text = source.text(node).strip()
    lowered = text.lower()

    if node.type == "null" or (node.type == "name" and lowered == "null"):
        return None
    if node.type == "boolean" or (node.type == "name" and lowered in ("true", "false")):
        return lowered == "true"
    if node.type == "parenthesized_expression" and node.named_children:
        return evaluate_literal(node.named_children[0], source)

    if node.type == "unary_op_expression":
        # Negative numbers
        compact = re.sub(r"\s+", "", text)
        if _INTEGER.fullmatch(compact):
            return _parse_int(compact)
        if _FLOAT.fullmatch(compact):
            return float(compact.replace("_", ""))
    if node.type == "integer":
        try:
            return _parse_int(text)
        except ValueError:
            return PhpExpression(text)
    if node.type == "float":
        return float(text.replace("_", ""))

    if node.type == "string":
        return _unquote_single(text)
    if node.type == "encapsed_string" and not any(
        c.type not in ("string", "string_content", "string_value", "escape_sequence")
        for c in node.named_children
    ):
        return _unquote_double(text)
    if node.type == "array_creation_expression":
        return _evaluate_array(node, source)

    return PhpExpression(text)


def render_default_value(value: Any) -> str:
    """Render a default value the way it reads in a PHP signature."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, (list, dict)):
        return "[]"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class SignatureReflector:
    """Index of loaded function declarations, keyed by fully-qualified name.

    PHP function names are case-insensitive, so lookups are too.
    """

    def __init__(self) -> None:
        self._functions: dict[str, ReflectedFunction] = {}

    def __contains__(self, name: str) -> bool:
        return name.lstrip("\\").lower() in self._functions

    def load(self, source: SourceFile) -> list[str]:
        """Make every top-level function in a file reflectable."""
        loaded: list[str] = []
        namespace: str | None = None

        for node in source.top_level():
            if node.type == "namespace_definition":
                if node.child_by_field_name("body") is not None:
                    loaded += self._declare(source, source.namespace_statements(node), source.namespace_name(node))
                    namespace = None
                else:
                    namespace = source.namespace_name(node)
                continue
            loaded += self._declare(source, [node], namespace)

        return loaded

    def reflect(self, target: str | ClosureRef) -> ReflectedFunction:
        if isinstance(target, ClosureRef):
            return ReflectedFunction(
                name="{closure}",
                namespace=None,
                parameters=self.parameters(target.source, target.node),
            )

        try:
            return self._functions[target.lstrip("\\").lower()]
        except KeyError:
            raise ReflectionError(f"Function {target}() does not exist") from None

    def parameters(self, source: SourceFile, function: Node) -> tuple[ReflectedParameter, ...]:
        params_node = function.child_by_field_name("parameters")
        if params_node is None:
            return ()

        declared = []
        for param in params_node.named_children:
            if param.type not in _PARAMETER_TYPES:
                continue
            name = source.text(param.child_by_field_name("name")).lstrip("$")
            default = param.child_by_field_name("default_value")
            declared.append((name, param.type == "variadic_parameter", default))

        # A parameter is only optional when every parameter after it is too
        parameters: list[ReflectedParameter] = []
        optional_tail = True
        for name, is_variadic, default in reversed(declared):
            optional_tail = optional_tail and (is_variadic or default is not None)
            if default is not None and optional_tail:
                parameters.append(
                    ReflectedParameter(
                        name=name,
                        is_optional=True,
                        has_default=True,
                        default_value=evaluate_literal(default, source),
                    )
                )
            else:
                parameters.append(
                    ReflectedParameter(
                        name=name,
                        is_optional=optional_tail,
                        is_variadic=is_variadic,
                    )
                )
        parameters.reverse()
        return tuple(parameters)

    def _declare(self, source: SourceFile, nodes: list[Node], namespace: str | None) -> list[str]:
        loaded = []
        for node in nodes:
            if node.type != "function_definition":
                continue
            function = ReflectedFunction(
                name=source.text(node.child_by_field_name("name")),
                namespace=namespace,
                parameters=self.parameters(source, node),
            )
            self._functions[function.fully_qualified_name.lower()] = function
            loaded.append(function.fully_qualified_name)
        return loaded
