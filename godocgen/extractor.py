"""Assembly of the documentation model for a single Go package."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .golang.fileset import FileSet
from .golang.locator import SourceLocator
from .golang.parser import (
    DeclarationParser,
    FuncDecl,
    TypeSpecDecl,
    ValueGroup,
    build_index,
    is_exported,
)
from .golang.printer import SignatureFormatter
from .golang.typeinfo import classify_type, extract_fields
from .logging import get_logger
from .models import FunctionDoc, PackageDoc, TypeDoc, TypeKind, ValueDoc

logger = get_logger("extractor")


class PackageExtractor:
    """Locates, parses and normalizes one package into a :class:`PackageDoc`.

    Every call starts from the files on disk; nothing is cached between
    calls, so two extractions of unchanged sources produce equal models.
    """

    def __init__(
        self,
        root_dir: Path,
        import_root: str,
        *,
        include_unexported: bool = False,
        strict: bool = False,
        locator: Optional[SourceLocator] = None,
        parser: Optional[DeclarationParser] = None,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.import_root = import_root.rstrip("/")
        self.include_unexported = include_unexported
        self.locator = locator or SourceLocator(self.root_dir)
        self.parser = parser or DeclarationParser(strict=strict)

    def extract(self, package: str, path: Optional[str] = None) -> PackageDoc:
        directory = self.locator.locate(package, path)
        parsed = self.parser.parse_dir(directory)
        index = build_index(parsed, include_unexported=self.include_unexported)
        formatter = SignatureFormatter(parsed.fset)

        doc = PackageDoc(
            name=index.name,
            import_path=f"{self.import_root}/{package}",
            doc=index.doc,
            functions=tuple(_function_doc(formatter, decl) for decl in index.functions),
            types=tuple(_type_doc(parsed.fset, formatter, decl) for decl in index.types),
            constants=tuple(self._value_docs(formatter, index.constants)),
            variables=tuple(self._value_docs(formatter, index.variables)),
        )
        logger.debug(
            "Extracted %s: %d function(s), %d type(s), %d constant(s), %d variable(s)",
            package,
            len(doc.functions),
            len(doc.types),
            len(doc.constants),
            len(doc.variables),
        )
        return doc

    def _value_docs(self, formatter: SignatureFormatter, groups: List[ValueGroup]) -> List[ValueDoc]:
        values: List[ValueDoc] = []
        for group in groups:
            for spec in group.specs:
                decl = formatter.value_spec(spec.ref, spec.doc_comments, spec.line_comments)
                for name in spec.names:
                    if name == "_":
                        continue
                    if self.include_unexported or is_exported(name):
                        values.append(ValueDoc(name=name, doc=group.doc, decl=decl))
        return values


def _function_doc(formatter: SignatureFormatter, decl: FuncDecl) -> FunctionDoc:
    return FunctionDoc(name=decl.name, doc=decl.doc, signature=formatter.function(decl.ref))


def _type_doc(fset: FileSet, formatter: SignatureFormatter, decl: TypeSpecDecl) -> TypeDoc:
    type_node = decl.ref.node.child_by_field_name("type")
    kind = classify_type(type_node)
    fields = ()
    underlying = ""
    if type_node is not None:
        type_ref = fset.ref(fset.file(decl.ref.filename), type_node)
        if kind is TypeKind.STRUCT:
            fields = extract_fields(fset, formatter, type_ref)
        elif kind is not TypeKind.INTERFACE:
            underlying = formatter.type_expr(type_ref)
    return TypeDoc(
        name=decl.name,
        doc=decl.doc,
        decl=formatter.type_decl(decl.ref, decl.line_comments),
        kind=kind,
        fields=fields,
        methods=tuple(_function_doc(formatter, method) for method in decl.methods),
        underlying=underlying,
    )


__all__ = ["PackageExtractor"]
