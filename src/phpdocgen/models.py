"""Data models for documentation extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar


# Doc-comment tags


@dataclass(frozen=True)
class ParamTag:
    name: ClassVar[str] = "param"
    variable_name: str
    type: str | None = None
    description: str = ""
    is_variadic: bool = False


@dataclass(frozen=True)
class ReturnTag:
    name: ClassVar[str] = "return"
    type: str
    description: str = ""


@dataclass(frozen=True)
class ThrowsTag:
    name: ClassVar[str] = "throws"
    type: str
    description: str = ""


@dataclass(frozen=True)
class SinceTag:
    name: ClassVar[str] = "since"
    version: str
    description: str = ""


@dataclass(frozen=True)
class InternalTag:
    name: ClassVar[str] = "internal"
    description: str = ""


@dataclass(frozen=True)
class GenericTag:
    """Any tag the generator does not interpret (@see, @example, ...)."""

    tag_name: str
    description: str = ""

    @property
    def name(self) -> str:
        return self.tag_name


DocTag = ParamTag | ReturnTag | ThrowsTag | SinceTag | InternalTag | GenericTag


@dataclass(frozen=True)
class ParsedDocComment:
    """Parsed /** doc-comment */."""

    summary: str = ""
    description: str = ""
    tags: tuple[DocTag, ...] = ()

    def tags_by_name(self, name: str) -> list[DocTag]:
        return [tag for tag in self.tags if tag.name == name]

    def has_tag(self, name: str) -> bool:
        return any(tag.name == name for tag in self.tags)


# Reflected signatures


@dataclass(frozen=True)
class PhpExpression:
    """Default value that is not a plain literal (constant, expression)."""

    source: str

    def __str__(self) -> str:
        return self.source


@dataclass(frozen=True)
class ReflectedParameter:
    name: str
    is_optional: bool = False
    is_variadic: bool = False
    has_default: bool = False
    default_value: Any = None  # None, bool, int, float, str, list, dict or PhpExpression


@dataclass(frozen=True)
class ReflectedFunction:
    name: str
    namespace: str | None
    parameters: tuple[ReflectedParameter, ...] = ()

    @property
    def fully_qualified_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}\\{self.name}"
        return self.name


# Merged documentation


@dataclass
class ArgumentDocumentation:
    """A documented parameter, merged with its declaration when there is one."""

    name: str
    is_variadic: bool = False
    description: str = ""
    type: str = "mixed"
    default_value: Any = None
    default_value_as_string: str | None = None

    @property
    def signature(self) -> str:
        if self.default_value_as_string:
            return f"{self.name} = {self.default_value_as_string}"
        if self.is_variadic:
            return f"{self.name},..."
        return self.name

    def method_argument(self) -> tuple[str, str]:
        """(signature, type) pair as used by @method tags."""
        return self.signature, self.type


@dataclass
class FunctionDocumentation:
    """Canonical documentation of one public library function."""

    name: str
    namespace: str | None
    summary: str  # HTML
    description: str  # HTML
    arguments: list[ArgumentDocumentation] = field(default_factory=list)
    changelog: dict[str, str] = field(default_factory=dict)  # version -> markdown
    exceptions: dict[str, str] = field(default_factory=dict)  # type -> markdown
    return_type: str = "mixed"
    return_description: str = ""  # HTML

    @property
    def returns_void(self) -> bool:
        return self.return_type.lower() == "void"


@dataclass(frozen=True)
class MethodTag:
    """A synthetic @method tag."""

    method_name: str
    arguments: tuple[tuple[str, str], ...] = ()  # (signature, type)
    return_type: str = "mixed"
    is_static: bool = True
    description: str = ""

    def render(self) -> str:
        arguments = ", ".join(f"{type_} ${signature}" for signature, type_ in self.arguments)
        static = "static " if self.is_static else ""
        text = f"@method {static}{self.return_type} {self.method_name}({arguments})"
        if self.description:
            text += f" {self.description}"
        return text.strip()
