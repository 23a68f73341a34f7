"""Regeneration of the sequence wrapper and the core function loader."""

from __future__ import annotations

import dataclasses
import re
from pathlib import Path

from tree_sitter import Node

from .config import GeneratorConfig
from .docblock import render_doc_comment
from .errors import SourceParseError, TargetFileError
from .extractors import DocumentationRegistry
from .models import FunctionDocumentation, MethodTag
from .source import SourceFile
from .toolset import MarkdownRenderer, Toolset

_NAMESPACE_COUNTER = re.compile(r"\b([a-zA-Z]+)[ \t]+\[(\d+)\]")


def method_tag(documentation: FunctionDocumentation, markdown: MarkdownRenderer) -> MethodTag:
    """Describe a function as a static @method of the loader class."""
    description = documentation.description

    if documentation.changelog:
        description += "<h2>Changelog</h2>"
        description += "<ul>"
        for version, desc in documentation.changelog.items():
            body = markdown.text(f"`{version}` - {desc}")
            description += f"<li>{body}</li>"
        description += "</ul>"

    if documentation.exceptions:
        description += "<h2>Exceptions</h2>"
        description += "<ul>"
        for name, desc in documentation.exceptions.items():
            body = markdown.text(f"`{name}` - {desc}")
            description += f"<li>{body}</li>"
        description += "</ul>"

    if documentation.return_description:
        description += "<h2>Returns</h2>"
        description += documentation.return_description

    body = (documentation.summary + "<br>" + description).replace("\n", " ").strip()
    body = re.sub(r"<br>$", "", body)

    return MethodTag(
        method_name=documentation.name,
        arguments=tuple(argument.method_argument() for argument in documentation.arguments),
        return_type=documentation.return_type,
        is_static=True,
        description=body,
    )


def _parse_target(path: Path, toolset: Toolset) -> SourceFile:
    source = toolset.php.parse_file(path)
    if source.has_errors:
        raise SourceParseError(f"Syntax errors in {path}", path)
    return source


def _class_declarations(source: SourceFile) -> list[Node]:
    classes = []
    for node in source.top_level():
        if node.type == "namespace_definition":
            classes += [n for n in source.namespace_statements(node) if n.type == "class_declaration"]
        elif node.type == "class_declaration":
            classes.append(node)
    return classes


#
# Sequence wrapper
#


def sequence_wrapper_tags(
    registry: DocumentationRegistry, config: GeneratorConfig
) -> list[MethodTag]:
    """@method tags for every chainable function.

    The wrapper supplies the first argument itself and returns itself, so void
    functions are left out.
    """
    tags = []
    for documentation in registry.functions:
        if documentation.returns_void:
            continue
        tag = method_tag(documentation, registry.toolset.markdown)
        tags.append(
            dataclasses.replace(
                tag,
                arguments=tag.arguments[1:],
                return_type=config.wrapper_type,
            )
        )
    return tags


def render_sequence_wrapper(
    source: SourceFile, tags: list[MethodTag], config: GeneratorConfig
) -> str:
    classes = _class_declarations(source)
    if len(classes) != 1:
        raise TargetFileError(
            f"Expected a single class declaration in {source.path}, found {len(classes)}"
        )
    class_node = classes[0]

    # Strip every comment above the class, we write our own
    comments = source.leading_comments(class_node)
    start = comments[0].start_byte if comments else class_node.start_byte
    head_end = len(source.source[:start].rstrip())

    doc_comment = render_doc_comment(config.wrapper_summary, [tag.render() for tag in tags])
    text = (
        source.edit()
        .replace(head_end, class_node.start_byte, f"\n\n{config.generated_header}\n{doc_comment}\n")
        .apply()
        .replace("\r\n", "\n")
    )
    return (text.rstrip() + "\n").replace("\n", source.newline)


def build_sequence_wrapper(
    registry: DocumentationRegistry, config: GeneratorConfig, toolset: Toolset
) -> Path:
    source = _parse_target(config.wrapper_path, toolset)
    text = render_sequence_wrapper(source, sequence_wrapper_tags(registry, config), config)
    config.wrapper_path.write_text(text, encoding="utf-8", newline="")
    return config.wrapper_path


#
# Core function loader
#


def loader_tags(registry: DocumentationRegistry) -> list[MethodTag]:
    return [method_tag(documentation, registry.toolset.markdown) for documentation in registry.functions]


def update_namespace_counters(comment: str, namespace_count: dict[str, int]) -> str:
    """Rewrite every `Name [n]` token with the live count of namespace `name`."""
    counts = {namespace.lower(): count for namespace, count in namespace_count.items()}

    def _replace(match: re.Match) -> str:
        count = counts.get(match.group(1).lower())
        if count is None:
            return match.group(0)
        offset = match.start(2) - match.start(0)
        return f"{match.group(0)[:offset]}{count}]"

    return _NAMESPACE_COUNTER.sub(_replace, comment)


def render_core_function_loader(
    source: SourceFile, tags: list[MethodTag], namespace_count: dict[str, int]
) -> str:
    statements = source.top_level()
    if statements and statements[0].type == "namespace_definition":
        statements = source.namespace_statements(statements[0])

    edit = source.edit()
    tag_lines = [tag.render() for tag in tags]
    found_class = False

    for node in statements:
        if node.type == "class_declaration":
            # Our class definition, regenerate all the @method definitions
            found_class = True
            indent = source.indentation(node)
            doc_comment = render_doc_comment("", tag_lines, indent)
            existing = source.doc_comment(node)
            if existing is not None:
                edit.replace_node(existing, doc_comment)
            else:
                edit.insert(node.start_byte, f"{doc_comment}\n{indent}")

        elif node.type == "if_statement":
            comments = source.leading_comments(node)
            if comments:
                first = comments[0]
                edit.replace_node(first, update_namespace_counters(source.text(first), namespace_count))

    if not found_class:
        raise TargetFileError(f"No class declaration found in {source.path}")

    newline = source.newline
    text = edit.apply().replace("\r\n", "\n")
    text = re.sub(r"[ \t]+$", "", text, flags=re.MULTILINE)
    text = re.sub(r"(\}\n)(?:\n)*([ \t]+\w)", r"\1\n\2", text)
    return (text.rstrip() + "\n").replace("\n", newline)


def build_core_function_loader(
    registry: DocumentationRegistry, config: GeneratorConfig, toolset: Toolset
) -> Path:
    source = _parse_target(config.loader_path, toolset)
    text = render_core_function_loader(source, loader_tags(registry), registry.namespace_count)
    config.loader_path.write_text(text, encoding="utf-8", newline="")
    return config.loader_path
