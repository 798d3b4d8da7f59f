"""
Input/output path arithmetic for one document.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DocumentPaths:
    """
    Where a document lives in the input tree and where it lands in the output.

    Attributes:
        relative: Path relative to both roots.
        input_root: Root of the source tree.
        output_root: Root of the mirrored output tree.
    """
    relative: Path
    input_root: Path
    output_root: Path

    @property
    def source(self) -> Path:
        return self.input_root / self.relative

    @property
    def destination(self) -> Path:
        return self.output_root / self.relative

    @property
    def source_dir(self) -> Path:
        return self.source.parent

    @property
    def output_dir(self) -> Path:
        return self.destination.parent
