"""gofmt-style re-printing of Go declarations from tree-sitter nodes.

The printer walks declaration, type and expression nodes and emits canonical
text: gofmt's token spacing, precedence-aware spacing of binary expressions,
line breaks kept where the source had them inside parameter, argument and
literal lists, and struct/interface bodies laid out with elastic tab stops.
Function literal bodies are copied from the source and re-indented.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Sequence

from tree_sitter import Node

from ..logging import get_logger
from .comments import Slot, attach_comments
from .fileset import FileSet, NodeRef, SourceFile, named_fields
from .tabwriter import CELL, SECTION, align

logger = get_logger("printer")

_LOWEST_PREC = 0
_UNARY_PREC = 6
_HIGHEST_PREC = 7

_PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "==": 3,
    "!=": 3,
    "<": 3,
    "<=": 3,
    ">": 3,
    ">=": 3,
    "+": 4,
    "-": 4,
    "|": 4,
    "^": 4,
    "*": 5,
    "/": 5,
    "%": 5,
    "<<": 5,
    ">>": 5,
    "&": 5,
    "&^": 5,
}

_LITERALS = {
    "interpreted_string_literal",
    "raw_string_literal",
    "rune_literal",
    "int_literal",
    "float_literal",
    "imaginary_literal",
}

# gofmt keeps a single-field struct or interface on one line up to this size.
_ONE_LINE_FIELD_SIZE = 30
_SMALL_KEY_SIZE = 40
_KEY_SIZE_RATIO = 2.5


class FormatError(RuntimeError):
    """Raised when a node cannot be re-printed."""


def _reduce_depth(depth: int) -> int:
    return max(depth - 1, 1)


class _Printer:
    """Renders nodes of one source file; indentation is the only state."""

    def __init__(self, file: SourceFile) -> None:
        self._file = file
        self._indent = 0

    # -- helpers -------------------------------------------------------

    def _text(self, node: Node) -> str:
        return self._file.text(node)

    def _breaks(self, rows: int, *, section: bool = False) -> str:
        count = min(max(rows, 1), 2)
        return "\n" * count + (SECTION if section else "") + "\t" * self._indent

    @staticmethod
    def _field(node: Node, name: str) -> Optional[Node]:
        return node.child_by_field_name(name)

    @staticmethod
    def _fields(node: Node, name: str) -> List[Node]:
        return named_fields(node, name)

    @staticmethod
    def _require(node: Node, name: str) -> Node:
        child = node.child_by_field_name(name)
        if child is None:
            raise FormatError(f"{node.type} has no {name}")
        return child

    @staticmethod
    def _named(node: Node) -> List[Node]:
        return [child for child in node.named_children if child.type != "comment"]

    @staticmethod
    def _has_comments(node: Node) -> bool:
        return any(child.type == "comment" for child in node.children)

    def _verbatim(self, node: Node) -> str:
        text = self._text(node)
        if "\n" not in text:
            return text
        base = self._file.line_indent(node.start_point[0])
        protected = _raw_string_rows(node)
        lines = text.split("\n")
        output = [lines[0]]
        for offset, line in enumerate(lines[1:], start=1):
            row = node.start_point[0] + offset
            if row in protected:
                output.append(line)
                continue
            if not line.strip():
                output.append("")
                continue
            if line.startswith(base):
                line = line[len(base) :]
            output.append("\t" * self._indent + line)
        return "\n".join(output)

    # -- declarations --------------------------------------------------

    def function(self, node: Node) -> str:
        parts = ["func "]
        receiver = self._field(node, "receiver")
        if receiver is not None:
            parts.append(self.parameters(receiver))
            parts.append(" ")
        parts.append(self._text(self._require(node, "name")))
        type_parameters = self._field(node, "type_parameters")
        if type_parameters is not None:
            parts.append(self.parameters(type_parameters))
        parts.append(self.signature(node))
        return "".join(parts)

    def type_spec(self, node: Node) -> str:
        name = self._text(self._require(node, "name"))
        type_parameters = self._field(node, "type_parameters")
        if type_parameters is not None:
            name += self.parameters(type_parameters)
        type_text = self.expr(self._require(node, "type"))
        if node.type == "type_alias":
            return f"{name} = {type_text}"
        return f"{name} {type_text}"

    def value_spec(self, node: Node) -> str:
        names = self._fields(node, "name")
        if not names:
            raise FormatError(f"{node.type} declares no names")
        parts = [", ".join(self._text(name) for name in names)]
        type_node = self._field(node, "type")
        if type_node is not None:
            parts.append(" " + self.expr(type_node))
        value = self._field(node, "value")
        if value is not None:
            parts.append(" = " + self._sequence(self._named(value), _LOWEST_PREC, 1))
        return "".join(parts)

    def comments(self, comments: Sequence[Node]) -> str:
        return " ".join(self._verbatim(comment) for comment in comments)

    # -- signatures ----------------------------------------------------

    def signature(self, node: Node) -> str:
        text = self.parameters(self._require(node, "parameters"))
        result = self._field(node, "result")
        if result is not None:
            printed = self._result(result)
            if printed:
                text += " " + printed
        return text

    def _result(self, node: Node) -> str:
        if node.type != "parameter_list":
            return self.expr(node)
        entries = self._named(node)
        if not entries:
            return ""
        single = entries[0]
        if (
            len(entries) == 1
            and single.type == "parameter_declaration"
            and not self._fields(single, "name")
            and not self._has_comments(node)
        ):
            type_node = self._require(single, "type")
            while type_node.type == "parenthesized_type" and self._named(type_node):
                type_node = self._named(type_node)[0]
            return self.expr(type_node)
        return self.parameters(node)

    def parameters(self, node: Node) -> str:
        return self._list(node, self._named(node), self._parameter)

    def _parameter(self, node: Node) -> str:
        if node.type == "variadic_parameter_declaration":
            type_text = "..." + self.expr(self._require(node, "type"))
            name = self._field(node, "name")
            return f"{self._text(name)} {type_text}" if name is not None else type_text
        if node.type in ("parameter_declaration", "type_parameter_declaration"):
            type_text = self.expr(self._require(node, "type"))
            names = self._fields(node, "name")
            if names:
                return ", ".join(self._text(name) for name in names) + " " + type_text
            return type_text
        return self.expr(node)

    def _list(self, container: Node, items: List[Node], render: Callable[[Node], str]) -> str:
        """Print a bracketed list, keeping the line breaks of the source."""
        if self._has_comments(container):
            return self._verbatim(container)
        tokens = [child for child in container.children if not child.is_named]
        if len(tokens) < 2:
            raise FormatError(f"{container.type} is not delimited")
        open_text, close_text = self._text(tokens[0]), self._text(tokens[-1])
        if not items:
            return open_text + close_text

        parts = [open_text]
        prev_row = container.start_point[0]
        indented = False
        for index, item in enumerate(items):
            if index:
                parts.append(",")
            if item.start_point[0] > prev_row:
                if not indented:
                    self._indent += 1
                    indented = True
                parts.append(self._breaks(item.start_point[0] - prev_row))
            elif index:
                parts.append(" ")
            parts.append(render(item))
            prev_row = item.end_point[0]
        if indented:
            self._indent -= 1
        if container.end_point[0] > prev_row:
            parts.append(",")
            parts.append(self._breaks(1))
        parts.append(close_text)
        return "".join(parts)

    def _sequence(self, items: List[Node], prec1: int, depth: int) -> str:
        """Print a comma separated expression list without brackets."""
        parts: List[str] = []
        indented = False
        for index, item in enumerate(items):
            if index:
                parts.append(",")
                gap = item.start_point[0] - items[index - 1].end_point[0]
                if gap > 0:
                    if not indented:
                        self._indent += 1
                        indented = True
                    parts.append(self._breaks(gap))
                else:
                    parts.append(" ")
            parts.append(self.expr(item, prec1, depth))
        if indented:
            self._indent -= 1
        return "".join(parts)

    # -- expressions and types -----------------------------------------

    def expr(self, node: Node, prec1: int = _LOWEST_PREC, depth: int = 1) -> str:
        handler = self._HANDLERS.get(node.type)
        if handler is not None:
            return handler(self, node, prec1, depth)
        if node.type in _LITERALS or node.named_child_count == 0:
            return self._text(node)
        return self._verbatim(node)

    def _first(self, node: Node) -> Node:
        named = self._named(node)
        if not named:
            raise FormatError(f"{node.type} is empty")
        return named[0]

    def _binary(self, node: Node, prec1: int, depth: int) -> str:
        left = self._require(node, "left")
        right = self._require(node, "right")
        operator = self._require(node, "operator")
        op = self._text(operator)
        prec = self._precedence(node)
        depth = max(depth, 1)
        separator = " " if prec < self._cutoff(node, depth) else ""

        text = self.expr(left, prec, depth + self._diff_prec(left, prec)) + separator + op
        if right.start_point[0] > operator.end_point[0]:
            self._indent += 1
            text += self._breaks(right.start_point[0] - operator.end_point[0])
            text += self.expr(right, prec + 1, depth + 1)
            self._indent -= 1
            return text
        return text + separator + self.expr(right, prec + 1, depth + 1)

    def _precedence(self, node: Node) -> int:
        op = self._text(self._require(node, "operator"))
        try:
            return _PRECEDENCE[op]
        except KeyError:
            raise FormatError(f"unknown binary operator {op!r}") from None

    def _diff_prec(self, node: Node, prec: int) -> int:
        if node.type != "binary_expression" or self._precedence(node) != prec:
            return 1
        return 0

    def _cutoff(self, node: Node, depth: int) -> int:
        has4, has5, max_problem = self._walk_binary(node)
        if max_problem > 0:
            return max_problem + 1
        if has4 and has5:
            return 5 if depth == 1 else 4
        return 6 if depth == 1 else 4

    def _walk_binary(self, node: Node) -> tuple[bool, bool, int]:
        prec = self._precedence(node)
        has4, has5, max_problem = prec == 4, prec == 5, 0

        left = self._require(node, "left")
        if left.type == "binary_expression" and self._precedence(left) >= prec:
            h4, h5, problem = self._walk_binary(left)
            has4, has5, max_problem = has4 or h4, has5 or h5, max(max_problem, problem)

        right = self._require(node, "right")
        if right.type == "binary_expression":
            if self._precedence(right) > prec:
                h4, h5, problem = self._walk_binary(right)
                has4, has5, max_problem = has4 or h4, has5 or h5, max(max_problem, problem)
        elif right.type == "unary_expression":
            pair = self._text(self._require(node, "operator")) + self._text(
                self._require(right, "operator")
            )
            if pair in ("/*", "&&", "&^"):
                max_problem = 5
            elif pair in ("++", "--"):
                max_problem = max(max_problem, 4)
        return has4, has5, max_problem

    def _unary(self, node: Node, prec1: int, depth: int) -> str:
        op = self._text(self._require(node, "operator"))
        operand = self.expr(self._require(node, "operand"), _UNARY_PREC, depth)
        if op in ("-", "+") and operand.startswith(op):
            return f"{op} {operand}"
        return op + operand

    def _parenthesized(self, node: Node, prec1: int, depth: int) -> str:
        inner = self._first(node)
        if inner.type == "parenthesized_expression":
            return self.expr(inner, _LOWEST_PREC, depth)
        return "(" + self.expr(inner, _LOWEST_PREC, _reduce_depth(depth)) + ")"

    def _call(self, node: Node, prec1: int, depth: int) -> str:
        arguments = self._require(node, "arguments")
        items = self._named(arguments)
        if len(items) > 1:
            depth += 1
        text = self.expr(self._require(node, "function"), _HIGHEST_PREC, depth)
        type_arguments = self._field(node, "type_arguments")
        if type_arguments is not None:
            text += self.expr(type_arguments)
        return text + self._list(
            arguments, items, lambda item: self.expr(item, _LOWEST_PREC, depth)
        )

    def _variadic_argument(self, node: Node, prec1: int, depth: int) -> str:
        return self.expr(self._first(node), prec1, depth) + "..."

    def _selector(self, node: Node, prec1: int, depth: int) -> str:
        operand = self.expr(self._require(node, "operand"), _HIGHEST_PREC, depth)
        return f"{operand}.{self._text(self._require(node, 'field'))}"

    def _index(self, node: Node, prec1: int, depth: int) -> str:
        operand = self.expr(self._require(node, "operand"), _HIGHEST_PREC, 1)
        indices = self._fields(node, "index")
        if not indices:
            raise FormatError("index expression without index")
        inner = ", ".join(self.expr(index, _LOWEST_PREC, depth + 1) for index in indices)
        return f"{operand}[{inner}]"

    def _slice(self, node: Node, prec1: int, depth: int) -> str:
        operand = self.expr(self._require(node, "operand"), _HIGHEST_PREC, 1)
        indices = [self._field(node, "start"), self._field(node, "end")]
        capacity = self._field(node, "capacity")
        if capacity is not None:
            indices.append(capacity)
        needs_blanks = False
        if depth <= 1:
            present = [index for index in indices if index is not None]
            needs_blanks = len(present) > 1 and any(
                index.type == "binary_expression" for index in present
            )
        parts = [operand, "["]
        for position, index in enumerate(indices):
            if position:
                if indices[position - 1] is not None and needs_blanks:
                    parts.append(" ")
                parts.append(":")
                if index is not None and needs_blanks:
                    parts.append(" ")
            if index is not None:
                parts.append(self.expr(index, _LOWEST_PREC, depth + 1))
        parts.append("]")
        return "".join(parts)

    def _type_assertion(self, node: Node, prec1: int, depth: int) -> str:
        operand = self.expr(self._require(node, "operand"), _HIGHEST_PREC, depth)
        return f"{operand}.({self.expr(self._require(node, 'type'))})"

    def _type_conversion(self, node: Node, prec1: int, depth: int) -> str:
        type_text = self.expr(self._require(node, "type"))
        return f"{type_text}({self.expr(self._require(node, 'operand'))})"

    def _composite_literal(self, node: Node, prec1: int, depth: int) -> str:
        body = self._require(node, "body")
        type_node = self._field(node, "type")
        prefix = self.expr(type_node) if type_node is not None else ""
        return prefix + self._literal(body, prec1, depth)

    def _pair(self, node: Node) -> tuple[Node, Node]:
        key = self._field(node, "key")
        value = self._field(node, "value")
        if key is None or value is None:
            named = self._named(node)
            if len(named) != 2:
                raise FormatError("keyed element without key and value")
            key, value = named
        return key, value

    def _keyed_element(self, node: Node, prec1: int, depth: int) -> str:
        key, value = self._pair(node)
        return f"{self.expr(key)}: {self.expr(value)}"

    def _element(self, node: Node, prec1: int, depth: int) -> str:
        return self.expr(self._first(node), prec1, depth)

    def _literal(self, node: Node, prec1: int, depth: int) -> str:
        """Print ``{...}`` the way gofmt's exprList lays out composite literals."""
        if self._has_comments(node):
            return self._verbatim(node)
        items = self._named(node)
        if not items:
            return "{}"

        parts = ["{"]
        prev_row = node.start_point[0]
        indented = False
        prev_break = -1
        size = 0
        ln_sum = 0.0
        count = 0
        for index, item in enumerate(items):
            row = item.start_point[0]
            prev_size = size
            pair = item.type == "keyed_element"
            if item.start_point[0] == item.end_point[0]:
                size = len(self.expr(self._pair(item)[0])) if pair else len(self.expr(item))
            else:
                size = 0

            use_ff = True
            if prev_size > 0 and size > 0:
                if count == 0 or (prev_size <= _SMALL_KEY_SIZE and size <= _SMALL_KEY_SIZE):
                    use_ff = False
                else:
                    ratio = size / math.exp(ln_sum / count)
                    use_ff = _KEY_SIZE_RATIO * ratio <= 1 or _KEY_SIZE_RATIO <= ratio

            needs_break = prev_row < row
            if index:
                parts.append(",")
            if needs_break:
                if not indented:
                    self._indent += 1
                    indented = True
                section = index == 0 or use_ff or prev_break + 1 < index
                parts.append(self._breaks(row - prev_row, section=section))
                if row - prev_row > 1:
                    ln_sum, count = 0.0, 0
                prev_break = index
            elif index:
                parts.append(" ")

            if len(items) > 1 and pair and size > 0 and needs_break:
                key, value = self._pair(item)
                parts.append(f"{self.expr(key)}:{CELL}{self.expr(value)}")
            else:
                parts.append(self.expr(item, _LOWEST_PREC, 1))

            if size > 0:
                ln_sum += math.log(size)
                count += 1
            prev_row = item.end_point[0]

        if indented:
            self._indent -= 1
        if node.end_point[0] > prev_row:
            parts.append(",")
            parts.append(self._breaks(1, section=True))
        parts.append("}")
        return "".join(parts)

    def _func_literal(self, node: Node, prec1: int, depth: int) -> str:
        return f"func{self.signature(node)} {self._verbatim(self._require(node, 'body'))}"

    def _expression_list(self, node: Node, prec1: int, depth: int) -> str:
        return self._sequence(self._named(node), prec1, depth)

    def _qualified_type(self, node: Node, prec1: int, depth: int) -> str:
        package = self._require(node, "package")
        name = self._require(node, "name")
        return f"{self._text(package)}.{self._text(name)}"

    def _pointer_type(self, node: Node, prec1: int, depth: int) -> str:
        return "*" + self.expr(self._first(node))

    def _slice_type(self, node: Node, prec1: int, depth: int) -> str:
        return "[]" + self.expr(self._require(node, "element"))

    def _array_type(self, node: Node, prec1: int, depth: int) -> str:
        length = self.expr(self._require(node, "length"))
        return f"[{length}]{self.expr(self._require(node, 'element'))}"

    def _implicit_array_type(self, node: Node, prec1: int, depth: int) -> str:
        return "[...]" + self.expr(self._require(node, "element"))

    def _map_type(self, node: Node, prec1: int, depth: int) -> str:
        key = self.expr(self._require(node, "key"))
        return f"map[{key}]{self.expr(self._require(node, 'value'))}"

    def _channel_type(self, node: Node, prec1: int, depth: int) -> str:
        tokens = _channel_tokens(node)
        value = self._require(node, "value")
        if tokens and tokens[0] == "<-":
            return f"<-chan {self.expr(value)}"
        if "<-" in tokens:
            return f"chan<- {self.expr(value)}"
        return self._bidirectional_channel(value)

    def _bidirectional_channel(self, value: Node) -> str:
        # `chan <-chan T` is `chan<- (chan T)`: the arrow binds to the leftmost chan.
        if value.type == "channel_type" and _channel_tokens(value)[:1] == ["<-"]:
            return "chan<- " + self._bidirectional_channel(self._require(value, "value"))
        return f"chan {self.expr(value)}"

    def _function_type(self, node: Node, prec1: int, depth: int) -> str:
        return "func" + self.signature(node)

    def _generic_type(self, node: Node, prec1: int, depth: int) -> str:
        base = self.expr(self._require(node, "type"))
        return base + self.expr(self._require(node, "type_arguments"))

    def _type_arguments(self, node: Node, prec1: int, depth: int) -> str:
        return self._list(node, self._named(node), self.expr)

    def _parenthesized_type(self, node: Node, prec1: int, depth: int) -> str:
        return f"({self.expr(self._first(node))})"

    def _negated_type(self, node: Node, prec1: int, depth: int) -> str:
        return "~" + self.expr(self._first(node))

    def _union(self, node: Node, prec1: int, depth: int) -> str:
        return " | ".join(self.expr(child) for child in self._named(node))

    def _constraint_term(self, node: Node, prec1: int, depth: int) -> str:
        tilde = any(child.type == "~" for child in node.children if not child.is_named)
        return ("~" if tilde else "") + self.expr(self._first(node))

    # -- struct and interface bodies -----------------------------------

    def _struct_type(self, node: Node, prec1: int, depth: int) -> str:
        body = next(
            (child for child in node.named_children if child.type == "field_declaration_list"),
            None,
        )
        if body is None:
            raise FormatError("struct type without field list")
        slots = attach_comments(body.children)
        fields = [slot for slot in slots if not slot.is_comment]
        has_comments = any(slot.is_comment or slot.doc or slot.line for slot in slots)
        if not has_comments and body.start_point[0] == body.end_point[0]:
            if not fields:
                return "struct{}"
            if len(fields) == 1 and self._field(fields[0].node, "tag") is None:
                field = fields[0].node
                type_text = self._field_type(field)
                names = self._fields(field, "name")
                if "\n" not in type_text and (1 if names else 0) + len(type_text) <= _ONE_LINE_FIELD_SIZE:
                    prefix = ", ".join(self._text(name) for name in names)
                    line = f"{prefix} {type_text}" if prefix else type_text
                    return f"struct{{ {line} }}"
        return "struct " + self._block(slots, self._field_cells)

    def _field_type(self, node: Node) -> str:
        type_text = self.expr(self._require(node, "type"))
        pointer = any(child.type == "*" for child in node.children if not child.is_named)
        return "*" + type_text if pointer else type_text

    def _field_cells(self, slot: Slot) -> str:
        node = slot.node
        names = self._fields(node, "name")
        if names:
            cells = [", ".join(self._text(name) for name in names), self._field_type(node)]
            extra = 1
        else:
            cells = [self._field_type(node)]
            extra = 2
        tag = self._field(node, "tag")
        if tag is not None:
            cells.append(self._text(tag))
            extra = 0
        text = CELL.join(cells)
        if slot.line:
            text += CELL * max(extra, 1) + self.comments(slot.line)
        return text

    def _interface_type(self, node: Node, prec1: int, depth: int) -> str:
        body = next(
            (child for child in node.named_children if child.type == "method_spec_list"),
            node,
        )
        braces = [child for child in body.children if child.type in ("{", "}")]
        if len(braces) != 2:
            raise FormatError("interface type without braces")
        slots = attach_comments(
            child
            for child in body.children
            if braces[0].end_byte <= child.start_byte and child.end_byte <= braces[1].start_byte
        )
        elements = [slot for slot in slots if not slot.is_comment]
        has_comments = any(slot.is_comment or slot.doc or slot.line for slot in slots)
        if not has_comments and braces[0].start_point[0] == braces[1].start_point[0]:
            if not elements:
                return "interface{}"
            if len(elements) == 1:
                element = elements[0].node
                text = self._interface_cells(elements[0])
                if element.type in ("method_spec", "method_elem"):
                    size = 1 + len("func" + self.signature(element))
                else:
                    size = len(text)
                if "\n" not in text and size <= _ONE_LINE_FIELD_SIZE:
                    return f"interface{{ {text} }}"
        return "interface " + self._block(slots, self._interface_cells)

    def _interface_cells(self, slot: Slot) -> str:
        node = slot.node
        if node.type in ("method_spec", "method_elem"):
            text = self._text(self._require(node, "name")) + self.signature(node)
        else:
            text = self.expr(node)
        if slot.line:
            text += CELL + self.comments(slot.line)
        return text

    def _block(self, slots: List[Slot], cells: Callable[[Slot], str]) -> str:
        """Print ``{ ... }`` with one entry per line and comments kept in place."""
        entries: List[tuple[int, int, Callable[[], str]]] = []
        for slot in slots:
            for comment in slot.doc:
                entries.append(
                    (comment.start_point[0], comment.end_point[0], lambda c=comment: self._verbatim(c))
                )
            if slot.is_comment:
                entries.append(
                    (slot.node.start_point[0], slot.end_row, lambda c=slot.node: self._verbatim(c))
                )
            else:
                entries.append((slot.node.start_point[0], slot.end_row, lambda s=slot: cells(s)))

        parts = ["{"]
        self._indent += 1
        prev_end: Optional[int] = None
        prev_multiline = False
        for start, end, render in entries:
            rows = 1 if prev_end is None else start - prev_end
            parts.append(self._breaks(rows, section=prev_multiline))
            text = render()
            parts.append(text)
            prev_multiline = "\n" in text
            prev_end = end
        self._indent -= 1
        parts.append(self._breaks(1))
        parts.append("}")
        return "".join(parts)

    _HANDLERS: Dict[str, Callable[["_Printer", Node, int, int], str]] = {
        "binary_expression": _binary,
        "unary_expression": _unary,
        "parenthesized_expression": _parenthesized,
        "call_expression": _call,
        "variadic_argument": _variadic_argument,
        "selector_expression": _selector,
        "index_expression": _index,
        "slice_expression": _slice,
        "type_assertion_expression": _type_assertion,
        "type_conversion_expression": _type_conversion,
        "composite_literal": _composite_literal,
        "literal_value": _literal,
        "keyed_element": _keyed_element,
        "literal_element": _element,
        "element": _element,
        "func_literal": _func_literal,
        "expression_list": _expression_list,
        "qualified_type": _qualified_type,
        "pointer_type": _pointer_type,
        "slice_type": _slice_type,
        "array_type": _array_type,
        "implicit_length_array_type": _implicit_array_type,
        "map_type": _map_type,
        "channel_type": _channel_type,
        "function_type": _function_type,
        "generic_type": _generic_type,
        "type_arguments": _type_arguments,
        "parenthesized_type": _parenthesized_type,
        "negated_type": _negated_type,
        "type_elem": _union,
        "type_constraint": _union,
        "constraint_elem": _union,
        "union_type": _union,
        "struct_elem": _union,
        "interface_type_name": _element,
        "constraint_term": _constraint_term,
        "struct_type": _struct_type,
        "interface_type": _interface_type,
    }


def _channel_tokens(node: Node) -> List[str]:
    return [child.type for child in node.children if not child.is_named]


def _raw_string_rows(node: Node) -> set[int]:
    """Rows inside multi-line raw strings, which must never be re-indented."""
    rows: set[int] = set()
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "raw_string_literal":
            rows.update(range(current.start_point[0] + 1, current.end_point[0] + 1))
            continue
        stack.extend(current.children)
    return rows


class SignatureFormatter:
    """Re-prints declarations of one parsed package.

    The formatter is bound to the FileSet produced by the parse call so that
    every node can be resolved to its source bytes. Printing never raises: a
    declaration that cannot be printed degrades to a synthetic form holding
    its name and an elision marker.
    """

    def __init__(self, fset: FileSet) -> None:
        self._fset = fset

    def function(self, ref: NodeRef) -> str:
        """Return ``func [(recv)] Name[T](params) results`` without the body."""
        name = self._name_of(ref, "name")
        return self._format(ref, _Printer.function, f"func {name}(...)")

    def type_decl(self, ref: NodeRef, line_comments: Sequence[Node] = ()) -> str:
        """Return ``type Name <type>`` for a single type spec or alias."""
        name = self._name_of(ref, "name")

        def render(printer: _Printer, node: Node) -> str:
            text = "type " + printer.type_spec(node)
            if line_comments:
                text += CELL + printer.comments(line_comments)
            return text

        return self._format(ref, render, f"type {name} ...")

    def type_expr(self, ref: NodeRef) -> str:
        return self._format(ref, lambda printer, node: printer.expr(node), "...")

    def value_spec(
        self,
        ref: NodeRef,
        doc_comments: Sequence[Node] = (),
        line_comments: Sequence[Node] = (),
    ) -> str:
        """Return a const/var spec, including comments written inside its group."""
        names = named_fields(ref.node, "name")
        fallback = f"{self._fset.file(ref.filename).text(names[0])} ..." if names else "..."

        def render(printer: _Printer, node: Node) -> str:
            lines = [printer.comments([comment]) for comment in doc_comments]
            text = printer.value_spec(node)
            if line_comments:
                text += CELL + printer.comments(line_comments)
            lines.append(text)
            return "\n".join(lines)

        return self._format(ref, render, fallback)

    def _name_of(self, ref: NodeRef, field: str) -> str:
        node = ref.node.child_by_field_name(field)
        if node is None:
            return "_"
        return self._fset.file(ref.filename).text(node)

    def _format(
        self,
        ref: NodeRef,
        render: Callable[[_Printer, Node], str],
        fallback: str,
    ) -> str:
        file = self._fset.file(ref.filename)
        try:
            if ref.node.has_error:
                raise FormatError("declaration contains syntax errors")
            return align(render(_Printer(file), ref.node))
        except FormatError as exc:
            logger.warning(
                "Could not format %s at %s (%s); using %r",
                ref.node.type,
                file.position(ref.node),
                exc,
                fallback,
            )
            return fallback


__all__ = ["FormatError", "SignatureFormatter"]
