"""Position-tracking context shared by one package parse."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List

from tree_sitter import Node, Tree


@dataclass(frozen=True)
class Position:
    """A 1-based line/column location inside a source file."""

    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass
class SourceFile:
    """One parsed Go file: its bytes, syntax tree and package clause name."""

    path: Path
    source: bytes
    tree: Tree
    package: str = ""

    @property
    def name(self) -> str:
        return str(self.path)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def line_indent(self, row: int) -> str:
        """Return the leading whitespace of 0-based line ``row``."""
        start = 0
        for _ in range(row):
            start = self.source.find(b"\n", start) + 1
            if start == 0:
                return ""
        end = start
        while end < len(self.source) and self.source[end : end + 1] in (b" ", b"\t"):
            end += 1
        return self.source[start:end].decode("utf-8")

    def position(self, node: Node) -> Position:
        row, column = node.start_point[0], node.start_point[1]
        return Position(self.name, row + 1, column + 1)


@dataclass(frozen=True)
class NodeRef:
    """A syntax node together with the name of the file it belongs to."""

    node: Node
    filename: str


def named_fields(node: Node, name: str) -> List[Node]:
    """Return the named children stored under field ``name``, skipping separator tokens."""
    return [child for child in node.children_by_field_name(name) if child.is_named]


class FileSet:
    """Ordered registry of the files parsed for one package.

    A fresh FileSet is created for every parse call and handed explicitly to
    the formatter so that nodes can be resolved back to their source bytes.
    """

    def __init__(self) -> None:
        self._files: Dict[str, SourceFile] = {}

    def add(self, file: SourceFile) -> SourceFile:
        self._files[file.name] = file
        return file

    def file(self, filename: str) -> SourceFile:
        try:
            return self._files[filename]
        except KeyError:
            raise KeyError(f"file {filename} is not part of this file set") from None

    def ref(self, file: SourceFile, node: Node) -> NodeRef:
        return NodeRef(node=node, filename=file.name)

    def text(self, ref: NodeRef) -> str:
        return self.file(ref.filename).text(ref.node)

    def position(self, ref: NodeRef) -> Position:
        return self.file(ref.filename).position(ref.node)

    def files(self) -> List[SourceFile]:
        return list(self._files.values())

    def __iter__(self) -> Iterator[SourceFile]:
        return iter(self._files.values())

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, filename: object) -> bool:
        return filename in self._files


__all__ = ["FileSet", "NodeRef", "Position", "SourceFile", "named_fields"]
