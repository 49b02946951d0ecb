"""Type shape classification and struct field extraction."""

from __future__ import annotations

from typing import List, Optional, Tuple

from tree_sitter import Node

from ..models import FieldDoc, TypeKind
from .comments import attach_comments, doc_text
from .fileset import FileSet, NodeRef, SourceFile, named_fields
from .printer import SignatureFormatter

_KINDS = {
    "struct_type": TypeKind.STRUCT,
    "interface_type": TypeKind.INTERFACE,
    "function_type": TypeKind.FUNCTION,
    "array_type": TypeKind.ARRAY,
    "implicit_length_array_type": TypeKind.ARRAY,
    "slice_type": TypeKind.ARRAY,
    "map_type": TypeKind.MAP,
    "channel_type": TypeKind.CHANNEL,
}


def unwrap_type(node: Node) -> Node:
    """Strip redundant parentheses around a type expression."""
    while node.type == "parenthesized_type":
        named = [child for child in node.named_children if child.type != "comment"]
        if not named:
            break
        node = named[0]
    return node


def classify_type(node: Optional[Node]) -> TypeKind:
    """Return the kind of the right-hand side of a type spec."""
    if node is None:
        return TypeKind.OTHER
    return _KINDS.get(unwrap_type(node).type, TypeKind.OTHER)


def embedded_name(source_file: SourceFile, node: Node) -> str:
    """Return the bare identifier of an embedded field type (``*pkg.T[int]`` -> ``T``)."""
    current: Optional[Node] = node
    while current is not None:
        if current.type in ("type_identifier", "identifier"):
            return source_file.text(current)
        if current.type == "qualified_type":
            current = current.child_by_field_name("name")
        elif current.type == "generic_type":
            current = current.child_by_field_name("type")
        elif current.type in ("pointer_type", "parenthesized_type"):
            current = current.named_children[0] if current.named_children else None
        else:
            return source_file.text(current)
    return ""


def extract_fields(
    fset: FileSet, formatter: SignatureFormatter, ref: NodeRef
) -> Tuple[FieldDoc, ...]:
    """Describe every field entry declared directly in the struct at ``ref``."""
    source_file = fset.file(ref.filename)
    struct = unwrap_type(ref.node)
    body = next(
        (child for child in struct.named_children if child.type == "field_declaration_list"),
        None,
    )
    if body is None:
        return ()

    fields: List[FieldDoc] = []
    for slot in attach_comments(body.children):
        if slot.is_comment or slot.node.type != "field_declaration":
            continue
        node = slot.node
        type_node = node.child_by_field_name("type")
        if type_node is None:
            continue
        names = named_fields(node, "name")
        type_text = formatter.type_expr(fset.ref(source_file, type_node))
        if names:
            name = ", ".join(source_file.text(child) for child in names)
        else:
            name = embedded_name(source_file, type_node)
            if any(child.type == "*" for child in node.children if not child.is_named):
                type_text = "*" + type_text
        tag = node.child_by_field_name("tag")
        doc = doc_text([source_file.text(comment) for comment in slot.doc])
        if not doc:
            doc = doc_text([source_file.text(comment) for comment in slot.line])
        fields.append(
            FieldDoc(
                name=name,
                type=type_text,
                tag=source_file.text(tag) if tag is not None else "",
                doc=doc.strip(),
            )
        )
    return tuple(fields)


__all__ = ["classify_type", "embedded_name", "extract_fields", "unwrap_type"]
