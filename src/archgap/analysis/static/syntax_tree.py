"""Parse C# source text into immutable tree-sitter syntax trees.

One :class:`SyntaxTree` per source file. Parsing never looks at any
other file, so trees can be built and analyzed on worker threads
independently. Malformed input still yields a tree (tree-sitter error
recovery); ``has_errors`` tells callers the tree is partial.
"""

from __future__ import annotations

import importlib
import threading
from dataclasses import dataclass
from enum import StrEnum

import tree_sitter

from archgap.config import GRAMMAR_MODULE
from archgap.errors import GrammarUnavailableError, SourceDecodeError


class NodeKind(StrEnum):
    """Grammar-independent node categories used by every detector."""

    TYPE = "type"
    METHOD = "method"
    PROPERTY = "property"
    ATTRIBUTE = "attribute"
    STRING_LITERAL = "string_literal"
    BINARY_EXPRESSION = "binary_expression"
    INVOCATION = "invocation"
    MEMBER_ACCESS = "member_access"
    BRANCH = "branch"
    LOOP = "loop"
    FOREACH = "foreach"
    CATCH = "catch"
    CONDITIONAL = "conditional"
    COMMENT = "comment"


# NodeKind → tree-sitter-c-sharp node types. Some grammar releases
# renamed nodes (for_each_statement → foreach_statement), so both
# spellings are listed.
NODE_TYPES: dict[NodeKind, frozenset[str]] = {
    NodeKind.TYPE: frozenset({
        "class_declaration",
        "struct_declaration",
        "record_declaration",
        "record_struct_declaration",
    }),
    NodeKind.METHOD: frozenset({"method_declaration"}),
    NodeKind.PROPERTY: frozenset({"property_declaration"}),
    NodeKind.ATTRIBUTE: frozenset({"attribute"}),
    NodeKind.STRING_LITERAL: frozenset({
        "string_literal",
        "verbatim_string_literal",
        "raw_string_literal",
    }),
    NodeKind.BINARY_EXPRESSION: frozenset({"binary_expression"}),
    NodeKind.INVOCATION: frozenset({"invocation_expression"}),
    NodeKind.MEMBER_ACCESS: frozenset({"member_access_expression"}),
    NodeKind.BRANCH: frozenset({"if_statement"}),
    NodeKind.LOOP: frozenset({
        "for_statement",
        "foreach_statement",
        "for_each_statement",
        "while_statement",
        "do_statement",
    }),
    NodeKind.FOREACH: frozenset({"foreach_statement", "for_each_statement"}),
    NodeKind.CATCH: frozenset({"catch_clause"}),
    NodeKind.CONDITIONAL: frozenset({"conditional_expression"}),
    NodeKind.COMMENT: frozenset({"comment"}),
}


@dataclass(frozen=True, slots=True)
class Span:
    """1-indexed source position of a node."""

    start_line: int
    start_column: int
    end_line: int


class SyntaxTree:
    """Read-only wrapper around a tree-sitter parse tree for one file.

    Attributes:
        path: Path of the source file (used for finding locations).
        source: Text that was parsed.
    """

    __slots__ = ("path", "source", "_tree", "_source_bytes")

    def __init__(
        self,
        tree: tree_sitter.Tree,
        source: str,
        source_bytes: bytes,
        path: str,
    ) -> None:
        self._tree = tree
        self._source_bytes = source_bytes
        self.source = source
        self.path = path

    @property
    def root(self) -> tree_sitter.Node:
        """Return the ``compilation_unit`` root node."""
        return self._tree.root_node

    @property
    def has_errors(self) -> bool:
        """Return ``True`` when error recovery produced a partial tree."""
        return self._tree.root_node.has_error

    def span_of(self, node: tree_sitter.Node) -> Span:
        """Return the 1-indexed line/column span of *node*.

        tree-sitter reports byte columns; the column here counts
        characters so it matches what an editor shows.
        """
        row, byte_col = node.start_point
        line_start = node.start_byte - byte_col
        prefix = self._source_bytes[line_start:node.start_byte]
        column = len(prefix.decode("utf-8", errors="replace")) + 1
        return Span(
            start_line=row + 1,
            start_column=column,
            end_line=node.end_point[0] + 1,
        )

    def location_of(self, node: tree_sitter.Node) -> str:
        """Human-readable ``path:line`` location for findings."""
        return f"{self.path}:{node.start_point[0] + 1}"


# ---------------------------------------------------------------------------
# Parser cache
# ---------------------------------------------------------------------------

_language: tree_sitter.Language | None = None
_language_lock = threading.Lock()
# tree-sitter parsers are not thread-safe; one per worker thread
_local = threading.local()


def _get_language() -> tree_sitter.Language:
    """Load (once) the C# grammar."""
    global _language  # noqa: PLW0603
    with _language_lock:
        if _language is None:
            try:
                mod = importlib.import_module(GRAMMAR_MODULE)
                _language = tree_sitter.Language(mod.language())
            except (ImportError, AttributeError) as exc:
                raise GrammarUnavailableError(
                    f"Cannot load tree-sitter grammar {GRAMMAR_MODULE!r}"
                ) from exc
        return _language


def _get_parser() -> tree_sitter.Parser:
    """Get or create the calling thread's parser."""
    parser: tree_sitter.Parser | None = getattr(_local, "parser", None)
    if parser is None:
        parser = tree_sitter.Parser(_get_language())
        _local.parser = parser
    return parser


def parse(text: str, path: str = "<memory>") -> SyntaxTree:
    """Parse C# *text* into a :class:`SyntaxTree`.

    Raises:
        SourceDecodeError: If *text* cannot be encoded as UTF-8
            (e.g. lone surrogates from a bad decode upstream).
    """
    try:
        source_bytes = text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise SourceDecodeError(f"{path}: {exc}") from exc

    tree = _get_parser().parse(source_bytes)
    return SyntaxTree(
        tree=tree, source=text, source_bytes=source_bytes, path=path
    )
