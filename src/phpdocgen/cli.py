"""Stub generator for the library's fluent API.

Regenerates:
    src/__/sequences/BottomlineWrapper.php  - @method tags for chaining
    src/__/load.php                         - @method tags and namespace counters
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import GeneratorConfig
from .extractors import DocumentationRegistry
from .generators import build_core_function_loader, build_sequence_wrapper
from .toolset import Toolset


def main(argv: list[str] | None = None) -> None:
    """Regenerate the wrapper and loader doc-comments."""
    parser = argparse.ArgumentParser(prog="phpdocgen", description=__doc__.splitlines()[0])
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        type=Path,
        help="library root containing src/__ (default: current directory)",
    )
    args = parser.parse_args(argv)

    config = GeneratorConfig.from_root(args.root)
    toolset = Toolset()

    print("Extracting PHP docs...")

    registry = DocumentationRegistry.discover(config, toolset)
    for namespace, count in sorted(registry.namespace_count.items()):
        print(f"  ✓ {namespace}: {count} functions")
    print(f"\nDocumented: {len(registry.functions)} functions")

    print("\nGenerated:")

    wrapper = build_sequence_wrapper(registry, config, toolset)
    print(f"  {config.relative(wrapper)}")

    loader = build_core_function_loader(registry, config, toolset)
    print(f"  {config.relative(loader)}")

    print("\nDone!")


if __name__ == "__main__":
    main()
