"""Tree-sitter powered parsing of Go package directories."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

from ..logging import get_logger
from .comments import Slot, attach_comments, doc_text
from .errors import PackageNotFound, ParseError
from .fileset import FileSet, NodeRef, SourceFile, named_fields
from .locator import UnitFilter

logger = get_logger("parser")

_LANGUAGE = "go"
_TEST_PACKAGE_SUFFIX = "_test"
_EXCLUDED_FUNCTION_PREFIXES = ("Test", "Benchmark")


@dataclass
class ParsedPackage:
    """The files of one directory that make up a single logical package."""

    name: str
    directory: Path
    fset: FileSet
    files: List[SourceFile]


@dataclass
class FuncDecl:
    ref: NodeRef
    name: str
    doc: str
    receiver: str = ""


@dataclass
class TypeSpecDecl:
    ref: NodeRef
    name: str
    doc: str
    line_comments: List[Node] = field(default_factory=list)
    methods: List[FuncDecl] = field(default_factory=list)


@dataclass
class ValueSpecDecl:
    ref: NodeRef
    names: List[str]
    doc_comments: List[Node] = field(default_factory=list)
    line_comments: List[Node] = field(default_factory=list)


@dataclass
class ValueGroup:
    """A ``const`` or ``var`` declaration, grouped or not."""

    doc: str
    specs: List[ValueSpecDecl]


@dataclass
class PackageIndex:
    """Exported declarations of a package, each category in declaration order."""

    name: str
    doc: str
    functions: List[FuncDecl] = field(default_factory=list)
    types: List[TypeSpecDecl] = field(default_factory=list)
    constants: List[ValueGroup] = field(default_factory=list)
    variables: List[ValueGroup] = field(default_factory=list)


class DeclarationParser:
    """Parses the eligible files of a directory into one logical package."""

    def __init__(self, unit_filter: Optional[UnitFilter] = None, *, strict: bool = False) -> None:
        self.unit_filter = unit_filter or UnitFilter()
        self.strict = strict
        self._parser: Optional[Parser] = None

    def parse_dir(self, directory: Path) -> ParsedPackage:
        directory = Path(directory)
        paths = self.unit_filter.select(directory)
        if not paths:
            raise ParseError(f"no Go source files in {directory}", path=directory)

        fset = FileSet()
        parsed: List[SourceFile] = []
        for path in paths:
            source_file = self._parse_file(path)
            if source_file is None:
                continue
            parsed.append(source_file)
        if not parsed:
            raise ParseError(f"no parseable Go source files in {directory}", path=directory)

        name: Optional[str] = None
        files: List[SourceFile] = []
        for source_file in parsed:
            if source_file.package.endswith(_TEST_PACKAGE_SUFFIX):
                continue
            if name is None:
                name = source_file.package
            elif source_file.package != name:
                logger.debug(
                    "Ignoring %s: package %s differs from %s",
                    source_file.name,
                    source_file.package,
                    name,
                )
                continue
            files.append(fset.add(source_file))
        if name is None:
            raise PackageNotFound(directory)

        logger.debug("Parsed package %s from %d file(s) in %s", name, len(files), directory)
        return ParsedPackage(name=name, directory=directory, fset=fset, files=files)

    def _parse_file(self, path: Path) -> Optional[SourceFile]:
        try:
            source = path.read_bytes()
        except OSError as exc:
            return self._failed(path, f"could not read {path}: {exc}")
        tree = self._get_parser().parse(source)
        source_file = SourceFile(path=path, source=source, tree=tree)
        if tree.root_node.has_error:
            return self._failed(path, f"syntax error in {path}")
        clause = next(
            (child for child in tree.root_node.named_children if child.type == "package_clause"),
            None,
        )
        identifier = clause.named_children[0] if clause is not None and clause.named_children else None
        if identifier is None:
            return self._failed(path, f"missing package clause in {path}")
        source_file.package = source_file.text(identifier)
        return source_file

    def _failed(self, path: Path, message: str) -> None:
        if self.strict:
            raise ParseError(message, path=path)
        logger.warning("Skipping %s", message)
        return None

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(get_language(_LANGUAGE))
        return self._parser


def build_index(parsed: ParsedPackage, include_unexported: bool = False) -> PackageIndex:
    """Collect the package doc and the documented declarations of ``parsed``."""

    def visible(name: str) -> bool:
        return include_unexported or is_exported(name)

    index = PackageIndex(name=parsed.name, doc="")
    package_docs: List[str] = []
    methods: Dict[str, List[FuncDecl]] = {}

    for source_file in parsed.files:
        for slot in attach_comments(source_file.root.children):
            if slot.is_comment:
                continue
            node = slot.node
            doc = _slot_doc(source_file, slot)
            if node.type == "package_clause":
                if doc:
                    package_docs.append(doc)
            elif node.type == "function_declaration":
                name = _name(source_file, node)
                doc = doc or _line_doc(source_file, slot)
                if name and visible(name) and not name.startswith(_EXCLUDED_FUNCTION_PREFIXES):
                    index.functions.append(
                        FuncDecl(ref=parsed.fset.ref(source_file, node), name=name, doc=doc)
                    )
            elif node.type == "method_declaration":
                name = _name(source_file, node)
                doc = doc or _line_doc(source_file, slot)
                receiver = receiver_base(source_file, node)
                if name and receiver and visible(name):
                    methods.setdefault(receiver, []).append(
                        FuncDecl(
                            ref=parsed.fset.ref(source_file, node),
                            name=name,
                            doc=doc,
                            receiver=receiver,
                        )
                    )
            elif node.type == "type_declaration":
                for spec in _type_specs(parsed.fset, source_file, slot, doc):
                    if visible(spec.name):
                        index.types.append(spec)
            elif node.type in ("const_declaration", "var_declaration"):
                group = ValueGroup(doc=doc, specs=_value_specs(parsed.fset, source_file, slot))
                group.specs = [
                    spec for spec in group.specs if any(visible(name) for name in spec.names)
                ]
                if not group.specs:
                    continue
                if node.type == "const_declaration":
                    index.constants.append(group)
                else:
                    index.variables.append(group)

    for type_spec in index.types:
        type_spec.methods = methods.pop(type_spec.name, [])
    for receiver in methods:
        logger.debug("Dropping methods of undocumented type %s", receiver)

    index.doc = "\n\n".join(package_docs)
    return index


def is_exported(name: str) -> bool:
    return bool(name) and name[0].isupper()


def receiver_base(source_file: SourceFile, method: Node) -> str:
    """Return the name of the type a method is bound to, without ``*`` or type arguments."""
    receiver = method.child_by_field_name("receiver")
    if receiver is None:
        return ""
    declarations = [child for child in receiver.named_children if child.type != "comment"]
    if not declarations:
        return ""
    node: Optional[Node] = declarations[0].child_by_field_name("type")
    while node is not None:
        if node.type in ("type_identifier", "identifier"):
            return source_file.text(node)
        if node.type == "generic_type":
            node = node.child_by_field_name("type")
        elif node.type in ("pointer_type", "parenthesized_type"):
            node = node.named_children[0] if node.named_children else None
        else:
            return ""
    return ""


def _name(source_file: SourceFile, node: Node) -> str:
    name = node.child_by_field_name("name")
    return source_file.text(name) if name is not None else ""


def _slot_doc(source_file: SourceFile, slot: Slot) -> str:
    return doc_text([source_file.text(comment) for comment in slot.doc])


def _line_doc(source_file: SourceFile, slot: Slot) -> str:
    """Doc text of a trailing comment on the declaration's last line."""
    return doc_text([source_file.text(comment) for comment in slot.line])


def _is_grouped(declaration: Node) -> bool:
    return any(child.type in ("(", "var_spec_list") for child in declaration.children)


def _inner_slots(declaration: Node, kinds: Iterable[str]) -> List[Slot]:
    wanted = set(kinds)
    children: List[Node] = []
    for child in declaration.children:
        if child.type == "var_spec_list":
            children.extend(child.children)
        else:
            children.append(child)
    return [
        slot
        for slot in attach_comments(children)
        if not slot.is_comment and slot.node.type in wanted
    ]


def _type_specs(
    fset: FileSet, source_file: SourceFile, slot: Slot, group_doc: str
) -> List[TypeSpecDecl]:
    inner = _inner_slots(slot.node, ("type_spec", "type_alias"))
    specs: List[TypeSpecDecl] = []
    for spec_slot in inner:
        name = _name(source_file, spec_slot.node)
        if not name:
            continue
        line_comments = spec_slot.line or (slot.line if not _is_grouped(slot.node) else [])
        specs.append(
            TypeSpecDecl(
                ref=fset.ref(source_file, spec_slot.node),
                name=name,
                doc=_slot_doc(source_file, spec_slot) or group_doc,
                line_comments=list(line_comments),
            )
        )
    return specs


def _value_specs(fset: FileSet, source_file: SourceFile, slot: Slot) -> List[ValueSpecDecl]:
    inner = _inner_slots(slot.node, ("const_spec", "var_spec"))
    specs: List[ValueSpecDecl] = []
    for spec_slot in inner:
        names = [
            source_file.text(name) for name in named_fields(spec_slot.node, "name")
        ]
        line_comments = spec_slot.line or (slot.line if not _is_grouped(slot.node) else [])
        specs.append(
            ValueSpecDecl(
                ref=fset.ref(source_file, spec_slot.node),
                names=names,
                doc_comments=list(spec_slot.doc),
                line_comments=list(line_comments),
            )
        )
    return specs


__all__ = [
    "DeclarationParser",
    "FuncDecl",
    "PackageIndex",
    "ParsedPackage",
    "TypeSpecDecl",
    "ValueGroup",
    "ValueSpecDecl",
    "build_index",
    "is_exported",
    "receiver_base",
]
