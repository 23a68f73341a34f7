"""Doc-comment parsing and serialization."""

from __future__ import annotations

import re

from .errors import DocCommentError
from .models import (
    DocTag,
    GenericTag,
    InternalTag,
    ParamTag,
    ParsedDocComment,
    ReturnTag,
    SinceTag,
    ThrowsTag,
)

_GUTTER = re.compile(r"^[ \t]*\*?[ \t]?")
_TAG_LINE = re.compile(r"^@([\w\\-]+)(.*)$", re.DOTALL)

# [type] [&][...]$name[...] [description]; the type may contain spaces (array<string, int>)
_PARAM_VARIABLE = re.compile(
    r"(?:^|(?<=\s))&?(?P<leading>\.\.\.)?\$(?P<name>\w+)(?P<trailing>,?\.\.\.)?(?=\s|$)"
)
_TYPED = re.compile(r"^(?P<type>\S+)(?:\s+(?P<description>.*))?$", re.DOTALL)


def _comment_lines(text: str) -> list[str]:
    """Strip /** */ delimiters and the leading ' * ' gutter from each line."""
    text = text.strip()
    if not (text.startswith("/**") and text.endswith("*/")) or len(text) < 5:
        raise DocCommentError(f"Not a doc-comment: {text[:40]!r}")

    lines = [_GUTTER.sub("", line, count=1).rstrip() for line in text[3:-2].split("\n")]

    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return lines


def _split_summary(lines: list[str]) -> tuple[str, str]:
    """Summary runs to the first blank line or the first line ending in a period."""
    summary: list[str] = []
    i = 0
    while i < len(lines) and lines[i].strip():
        summary.append(lines[i].strip())
        i += 1
        if summary[-1].endswith("."):
            break
    description = "\n".join(lines[i:]).strip("\n")
    return "\n".join(summary), description


def _parse_tag(name: str, body: str) -> DocTag:
    body = body.strip()

    if name == "param":
        match = _PARAM_VARIABLE.search(body)
        if not match:
            return ParamTag(variable_name="", type=body or None)
        return ParamTag(
            variable_name=match.group("name"),
            type=body[: match.start()].strip() or None,
            description=body[match.end() :].strip(),
            is_variadic=bool(match.group("leading") or match.group("trailing")),
        )

    if name in ("return", "throws"):
        match = _TYPED.match(body)
        type_ = match.group("type") if match else "mixed"
        description = ((match.group("description") if match else "") or "").strip()
        if name == "return":
            return ReturnTag(type=type_, description=description)
        return ThrowsTag(type=type_, description=description)

    if name == "since":
        match = _TYPED.match(body)
        if not match:
            return SinceTag(version="")
        return SinceTag(
            version=match.group("type"),
            description=(match.group("description") or "").strip(),
        )

    if name == "internal":
        return InternalTag(description=body)

    return GenericTag(tag_name=name, description=body)


class DocCommentParser:
    """Parses raw /** ... */ text into a ParsedDocComment."""

    def parse(self, text: str) -> ParsedDocComment:
        lines = _comment_lines(text)

        first_tag = next(
            (i for i, line in enumerate(lines) if line.startswith("@")), len(lines)
        )
        summary, description = _split_summary(lines[:first_tag])

        raw_tags: list[list[str]] = []
        for line in lines[first_tag:]:
            if line.startswith("@"):
                raw_tags.append([line])
            elif raw_tags:
                raw_tags[-1].append(line)

        tags = []
        for raw in raw_tags:
            match = _TAG_LINE.match("\n".join(raw).strip())
            if match:
                tags.append(_parse_tag(match.group(1), match.group(2)))

        return ParsedDocComment(summary=summary, description=description, tags=tuple(tags))


def render_doc_comment(summary: str, tags: list[str], indent: str = "") -> str:
    """Serialize a synthetic doc-comment.

    The first line carries no indentation so the result can be spliced in at the
    position of the declaration it documents.
    """
    lines = ["/**"]
    if summary:
        lines.extend(f" * {line}".rstrip() for line in summary.split("\n"))
    if summary and tags:
        lines.append(" *")
    for tag in tags:
        lines.extend(f" * {line}".rstrip() for line in tag.split("\n"))
    lines.append(" */")
    return ("\n" + indent).join(lines)
