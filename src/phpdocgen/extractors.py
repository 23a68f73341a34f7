"""Documentation extraction from the library's function files."""

from __future__ import annotations

import re
import sys
from pathlib import Path

from tree_sitter import Node

from .config import GeneratorConfig
from .errors import DocCommentError
from .models import (
    ArgumentDocumentation,
    FunctionDocumentation,
    ParamTag,
    ReflectedParameter,
)
from .reflection import (
    CLOSURE_TYPES,
    ClosureRef,
    SignatureReflector,
    evaluate_literal,
    render_default_value,
)
from .source import SourceFile
from .toolset import Toolset

_PRE_BLOCK = re.compile(r"<pre>.*?</pre>", re.DOTALL)
_LINE_BREAK = re.compile(r"(\r\n|\n\r|\n|\r)")


def _argument(tag: ParamTag, reflected: ReflectedParameter | None) -> ArgumentDocumentation:
    argument = ArgumentDocumentation(
        name=tag.variable_name,
        is_variadic=tag.is_variadic,
        description=tag.description,
        type=tag.type or "mixed",
    )
    if reflected is not None and reflected.is_optional and reflected.has_default:
        argument.default_value = reflected.default_value
        argument.default_value_as_string = render_default_value(reflected.default_value)
    return argument


def _reflow_code_blocks(html: str) -> str:
    """Add <br /> before line breaks inside <pre> blocks so IDEs keep the layout."""
    return _PRE_BLOCK.sub(lambda m: _LINE_BREAK.sub(r"<br />\1", m.group(0)), html)


def build_function_documentation(
    comment: str,
    target: str | ClosureRef,
    function_name: str,
    toolset: Toolset,
    reflector: SignatureReflector,
    display_prefix: str = "",
) -> FunctionDocumentation | None:
    """Merge a doc-comment with the declared signature of the function it documents.

    Args:
        comment: Raw /** ... */ text attached to the declaration
        target: Fully-qualified function name, or the closure itself
        function_name: Name the function is documented under
        toolset: Parsers and markdown renderer
        reflector: Symbol table the target has been loaded into
        display_prefix: Prefix stripped from the documented name

    Returns:
        The merged documentation, or None when the function is @internal

    Raises:
        DocCommentError: If the comment is not a doc-comment
        ReflectionError: If the target was never loaded
    """
    doc = toolset.doc_comments.parse(comment)
    if doc.has_tag("internal"):
        return None

    reflected = reflector.reflect(target)
    actual_args = {param.name: param for param in reflected.parameters}

    arguments = []
    for tag in doc.tags_by_name("param"):
        if tag.variable_name in actual_args:
            arguments.append(_argument(tag, actual_args[tag.variable_name]))
        elif tag.is_variadic:
            arguments.append(_argument(tag, None))
        # Otherwise the documented parameter no longer exists

    markdown = toolset.markdown
    documentation = FunctionDocumentation(
        name=function_name,
        namespace=reflected.namespace,
        summary=markdown.text(doc.summary),
        description=_reflow_code_blocks(markdown.text(doc.description)),
        arguments=arguments,
    )

    for tag in doc.tags_by_name("since"):
        documentation.changelog[tag.version] = tag.description

    for tag in doc.tags_by_name("throws"):
        documentation.exceptions[tag.type] = tag.description

    returns = doc.tags_by_name("return")
    if returns:
        documentation.return_type = returns[0].type
        documentation.return_description = markdown.text(returns[0].description)

    # Functions like max() live in prefixed files to avoid clashing with PHP's own
    if display_prefix and documentation.name.startswith(display_prefix):
        documentation.name = documentation.name[len(display_prefix) :]

    return documentation


class DocumentationRegistry:
    """Every public function of the library plus a function count per namespace.

    Filled once by discover(); read-only afterwards.
    """

    def __init__(self, config: GeneratorConfig, toolset: Toolset):
        self.config = config
        self.toolset = toolset
        self.reflector = SignatureReflector()
        self.namespace_count: dict[str, int] = {}
        self.functions: list[FunctionDocumentation] = []

    @classmethod
    def discover(cls, config: GeneratorConfig, toolset: Toolset) -> DocumentationRegistry:
        registry = cls(config, toolset)
        for path in config.source_files():
            registry.register_file(path)
        return registry

    def register_file(self, path: Path) -> bool:
        """Register the functions declared in a library file.

        Returns:
            False for class files, which are neither counted nor documented
        """
        path = Path(path)
        namespace = path.parent.name

        # Files starting with an uppercase letter hold classes
        if re.match(r"[A-Z]", path.name):
            return False

        self.namespace_count[namespace] = self.namespace_count.get(namespace, 0) + 1

        source = self.toolset.php.parse_file(path)
        if source.has_errors:
            print(f"  ⚠ Failed to parse {self.config.relative(path)}", file=sys.stderr)
            return True

        self.reflector.load(source)
        self._register_source(source, path)
        return True

    def _register_source(self, source: SourceFile, path: Path) -> None:
        statements = source.top_level()
        if not statements:
            return
        root = statements[0]

        if root.type == "namespace_definition":
            namespace = source.namespace_name(root)
            for node in source.namespace_statements(root):
                if node.type != "function_definition":
                    continue
                name = source.text(node.child_by_field_name("name"))
                target = f"{namespace}\\{name}" if namespace else name
                self._register_function(name, node, source, target)

        elif root.type == "return_statement":
            value = next((n for n in root.named_children if n.type != "comment"), None)
            if value is None:
                return
            if value.type in CLOSURE_TYPES:
                target = ClosureRef(source, value)
            else:
                target = str(evaluate_literal(value, source))
            self._register_function(path.stem, root, source, target)

    def _register_function(
        self,
        name: str,
        statement: Node,
        source: SourceFile,
        target: str | ClosureRef,
    ) -> FunctionDocumentation | None:
        try:
            # Helper functions are not part of the API
            if name.startswith(self.config.helper_marker):
                return None

            doc_comment = source.doc_comment(statement)
            if doc_comment is None:
                raise DocCommentError(f"No doc-comment attached to {name}")

            documentation = build_function_documentation(
                source.text(doc_comment),
                target,
                name,
                self.toolset,
                self.reflector,
                self.config.display_prefix,
            )
        except Exception as e:
            print(f"Exception message: {e}")
            print(f"  {name}\n")
            return None

        if documentation is not None:
            self.functions.append(documentation)
        return documentation
