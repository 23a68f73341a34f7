"""Parsers and renderers shared by the registry and the regenerators."""

from __future__ import annotations

from dataclasses import dataclass, field

import markdown

from .docblock import DocCommentParser
from .source import PhpParser


class MarkdownRenderer:
    """Markdown to HTML, with fenced code blocks."""

    def __init__(self) -> None:
        self._md = markdown.Markdown(extensions=["fenced_code"])

    def text(self, source: str) -> str:
        if not source or not source.strip():
            return ""
        return self._md.reset().convert(source)


@dataclass
class Toolset:
    """One doc-comment parser, one PHP parser and one markdown renderer."""

    doc_comments: DocCommentParser = field(default_factory=DocCommentParser)
    php: PhpParser = field(default_factory=PhpParser)
    markdown: MarkdownRenderer = field(default_factory=MarkdownRenderer)
