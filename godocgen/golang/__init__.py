"""Go source handling: locating, parsing, printing and classifying declarations."""

from .errors import ExtractionError, LocateError, PackageNotFound, ParseError
from .fileset import FileSet, NodeRef, SourceFile
from .locator import SourceLocator, UnitFilter, discover_packages
from .parser import DeclarationParser, PackageIndex, ParsedPackage, build_index
from .printer import FormatError, SignatureFormatter
from .typeinfo import classify_type, extract_fields

__all__ = [
    "DeclarationParser",
    "ExtractionError",
    "FileSet",
    "FormatError",
    "LocateError",
    "NodeRef",
    "PackageIndex",
    "PackageNotFound",
    "ParseError",
    "ParsedPackage",
    "SignatureFormatter",
    "SourceFile",
    "SourceLocator",
    "UnitFilter",
    "build_index",
    "classify_type",
    "discover_packages",
    "extract_fields",
]
