"""Comment grouping and doc text normalization for Go sources.

Go attaches a comment group to a declaration when the group ends on the line
right before it (a doc comment) or starts on the line where the declaration
ends (a line comment). Tree-sitter reports comments as plain sibling nodes, so
the association is rebuilt here from row positions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from tree_sitter import Node

_DIRECTIVE = re.compile(r"^[a-z0-9]+:[a-z0-9]")


@dataclass
class Slot:
    """A node in a declaration list with the comments attached to it.

    Comments that belong to no declaration get a slot of their own with empty
    ``doc`` and ``line`` lists.
    """

    node: Node
    doc: List[Node] = field(default_factory=list)
    line: List[Node] = field(default_factory=list)

    @property
    def is_comment(self) -> bool:
        return self.node.type == "comment"

    @property
    def end_row(self) -> int:
        if self.line:
            return self.line[-1].end_point[0]
        return self.node.end_point[0]


def comment_groups(comments: Sequence[Node]) -> List[List[Node]]:
    """Split comments into groups of adjacent lines."""
    groups: List[List[Node]] = []
    for comment in comments:
        if groups and comment.start_point[0] <= groups[-1][-1].end_point[0] + 1:
            groups[-1].append(comment)
        else:
            groups.append([comment])
    return groups


def attach_comments(children: Iterable[Node]) -> List[Slot]:
    """Pair every non-comment node with its doc and line comments."""
    slots: List[Slot] = []
    pending: List[Node] = []
    last: Optional[Slot] = None
    for child in children:
        if not child.is_named:
            continue
        if child.type == "comment":
            if last is not None and not pending and child.start_point[0] == last.end_row:
                last.line.append(child)
            else:
                pending.append(child)
            continue
        doc = _lead_group(pending, child)
        slots.extend(Slot(comment) for comment in pending[: len(pending) - len(doc)])
        last = Slot(child, doc=doc)
        slots.append(last)
        pending = []
    slots.extend(Slot(comment) for comment in pending)
    return slots


def _lead_group(comments: Sequence[Node], node: Node) -> List[Node]:
    groups = comment_groups(comments)
    if groups and groups[-1][-1].end_point[0] == node.start_point[0] - 1:
        return groups[-1]
    return []


def comment_text(comments: Sequence[str]) -> str:
    """Return the text of a comment group the way go/ast's CommentGroup.Text does.

    Comment markers are removed, a single space after ``//`` is dropped,
    compiler directives are skipped, leading blank lines are removed and runs
    of blank lines collapse into one. Non-empty text ends with a newline.
    """
    lines: List[str] = []
    for raw in comments:
        if raw.startswith("//"):
            text = raw[2:]
            if text.startswith(" "):
                text = text[1:]
            elif _is_directive(text):
                continue
        elif raw.startswith("/*"):
            text = raw[2:-2]
        else:
            text = raw
        lines.extend(line.rstrip() for line in text.split("\n"))

    kept: List[str] = []
    for line in lines:
        if line or (kept and kept[-1]):
            kept.append(line)
    while kept and not kept[-1]:
        kept.pop()
    if not kept:
        return ""
    return "\n".join(kept) + "\n"


def doc_text(comments: Sequence[str]) -> str:
    """Return :func:`comment_text` without its trailing newline."""
    return comment_text(comments).rstrip("\n")


def _is_directive(text: str) -> bool:
    if text.startswith(("line ", "extern ", "export ")):
        return True
    return bool(_DIRECTIVE.match(text))


__all__ = [
    "Slot",
    "attach_comments",
    "comment_groups",
    "comment_text",
    "doc_text",
]
