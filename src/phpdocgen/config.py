"""Paths and naming conventions of the documented library."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator


@dataclass(frozen=True)
class GeneratorConfig:
    """Where the library lives and which files get regenerated."""

    root: Path
    source_dir: Path
    wrapper_path: Path
    loader_path: Path
    source_glob: str = "*/**/*.php"
    wrapper_type: str = "\\BottomlineWrapper"
    wrapper_summary: str = "An abstract base class for documenting our sequence support"
    # Prefix used for functions like max() that would clash with PHP built-ins
    display_prefix: str = "bottomline_"
    helper_marker: str = "_"
    generated_header: str = (
        "// Do NOT modify this doc block, it is automatically generated."
    )

    @classmethod
    def from_root(cls, root: Path | str) -> GeneratorConfig:
        root = Path(root).resolve()
        source_dir = root / "src" / "__"
        return cls(
            root=root,
            source_dir=source_dir,
            wrapper_path=source_dir / "sequences" / "BottomlineWrapper.php",
            loader_path=source_dir / "load.php",
        )

    def source_files(self) -> Iterator[Path]:
        """Yield library files in a stable order, skipping the two targets."""
        targets = {self.wrapper_path.resolve(), self.loader_path.resolve()}
        for path in sorted(self.source_dir.glob(self.source_glob)):
            if path.is_file() and path.resolve() not in targets:
                yield path

    def relative(self, path: Path) -> str:
        """Convert absolute path to relative from project root."""
        try:
            return str(path.relative_to(self.root))
        except ValueError:
            return str(path)
