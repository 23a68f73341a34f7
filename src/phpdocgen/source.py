"""Structural parsing of PHP sources with tree-sitter.

A SourceFile never changes once parsed. Rewrites go through SourceEdit, which
splices replacement text into byte ranges and copies every other byte as is,
so formatting outside the edited regions survives untouched.
"""

from __future__ import annotations

import re
from pathlib import Path

import tree_sitter_php as tsphp
from tree_sitter import Language, Node, Parser, Tree

# Top-level nodes that are not statements
_NON_STATEMENTS = frozenset({"php_tag", "comment", "text", "text_interpolation"})


class PhpParser:
    """Thin wrapper around a tree-sitter parser loaded with the PHP grammar."""

    def __init__(self) -> None:
        self._parser = Parser(Language(tsphp.language_php()))

    def parse(self, text: str, path: Path | str | None = None) -> SourceFile:
        source = text.encode("utf-8")
        return SourceFile(source, self._parser.parse(source), path)

    def parse_file(self, path: Path | str) -> SourceFile:
        return self.parse(Path(path).read_bytes().decode("utf-8"), path)


class SourceFile:
    """A parsed PHP file."""

    def __init__(self, source: bytes, tree: Tree, path: Path | str | None = None):
        self.source = source
        self.tree = tree
        self.path = Path(path) if path is not None else None

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        return self.root.has_error

    @property
    def newline(self) -> str:
        """Line ending the file is written with."""
        return "\r\n" if b"\r\n" in self.source else "\n"

    def text(self, node: Node | None) -> str:
        """Get text content of a node."""
        if node is None:
            return ""
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def top_level(self) -> list[Node]:
        """Top-level statements, in source order, comments excluded."""
        return [n for n in self.root.named_children if n.type not in _NON_STATEMENTS]

    def namespace_name(self, namespace: Node) -> str | None:
        name = namespace.child_by_field_name("name")
        return self.text(name) if name is not None else None

    def namespace_statements(self, namespace: Node) -> list[Node]:
        """Statements belonging to a namespace.

        Handles both `namespace foo { ... }` and `namespace foo;`, where the
        statements are the siblings up to the next namespace declaration.
        """
        body = namespace.child_by_field_name("body")
        if body is not None:
            return [n for n in body.named_children if n.type not in _NON_STATEMENTS]

        statements = []
        sibling = namespace.next_named_sibling
        while sibling is not None and sibling.type != "namespace_definition":
            if sibling.type not in _NON_STATEMENTS:
                statements.append(sibling)
            sibling = sibling.next_named_sibling
        return statements

    def leading_comments(self, node: Node) -> list[Node]:
        """The run of comments directly preceding a statement, first to last."""
        comments = []
        prev = node.prev_named_sibling
        while prev is not None and prev.type == "comment":
            comments.insert(0, prev)
            prev = prev.prev_named_sibling
        return comments

    def doc_comment(self, node: Node) -> Node | None:
        """The last /** */ comment attached to a statement, if any."""
        for comment in reversed(self.leading_comments(node)):
            if self.text(comment).startswith("/**"):
                return comment
        return None

    def indentation(self, node: Node) -> str:
        """Whitespace between the start of the node's line and the node."""
        line_start = self.source.rfind(b"\n", 0, node.start_byte) + 1
        prefix = self.source[line_start : node.start_byte]
        return re.match(rb"[ \t]*", prefix).group().decode("utf-8")

    def edit(self) -> SourceEdit:
        return SourceEdit(self)


class SourceEdit:
    """Collects byte-range replacements against a SourceFile."""

    def __init__(self, source_file: SourceFile):
        self.source_file = source_file
        self._edits: list[tuple[int, int, bytes]] = []

    def replace(self, start: int, end: int, text: str) -> SourceEdit:
        self._edits.append((start, end, text.encode("utf-8")))
        return self

    def replace_node(self, node: Node, text: str) -> SourceEdit:
        return self.replace(node.start_byte, node.end_byte, text)

    def insert(self, offset: int, text: str) -> SourceEdit:
        return self.replace(offset, offset, text)

    def apply(self) -> str:
        source = self.source_file.source
        chunks = []
        cursor = 0
        for start, end, text in sorted(self._edits, key=lambda e: (e[0], e[1])):
            if start < cursor:
                raise ValueError(f"Overlapping edits at byte {start}")
            chunks.append(source[cursor:start])
            chunks.append(text)
            cursor = end
        chunks.append(source[cursor:])
        return b"".join(chunks).decode("utf-8")
