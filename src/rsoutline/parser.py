"""Rust source parsing using tree-sitter."""

from __future__ import annotations

import importlib
import logging

from tree_sitter import Language, Node, Parser, Tree

from rsoutline.classifier import DEFAULT_MAX_NESTING, classify_items, node_text
from rsoutline.config import ParserConfig
from rsoutline.declarations import Declaration
from rsoutline.errors import GrammarError, ParseError, SourceReadError
from rsoutline.utils import PathLike, normalize_path

logger = logging.getLogger(__name__)


def read_source(path: PathLike) -> str:
    """Read a source file as UTF-8 text.

    Raises:
        SourceReadError: If the file cannot be read or is not valid UTF-8.
    """
    file_path = normalize_path(path)
    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(f"file reading error: {exc}") from exc


def first_error(root: Node) -> Node | None:
    """Return the first ERROR or MISSING node in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def describe_error(node: Node) -> str:
    line, column = node.start_point[0] + 1, node.start_point[1] + 1
    if node.is_missing:
        return f"expected `{node.type}` at line {line}, column {column}"
    snippet = " ".join(node_text(node).split())
    if len(snippet) > 40:
        snippet = snippet[:37] + "..."
    return f"unexpected `{snippet}` at line {line}, column {column}"


class RustParser:
    """Parses Rust source into declaration sequences.

    Loads the tree-sitter grammar named by ``config.grammar_module``.

    Usage:
        parser = RustParser()
        declarations = parser.parse_file(Path("src/lib.rs"))
    """

    def __init__(self, config: ParserConfig | None = None, *, max_nesting: int = DEFAULT_MAX_NESTING) -> None:
        """Initialize the parser.

        Args:
            config: Parser configuration (default: ParserConfig()).
            max_nesting: Deepest inline module nesting accepted.
        """
        self._config = config or ParserConfig()
        self._max_nesting = max_nesting
        grammar_module = self._config.grammar_module
        try:
            grammar_pkg = importlib.import_module(grammar_module)
        except ImportError as exc:
            raise GrammarError(f"Failed to import grammar module: {grammar_module}") from exc

        self._language = Language(grammar_pkg.language())
        self._parser = Parser(self._language)
        logger.debug("Loaded grammar %s", grammar_module)

    @property
    def language(self) -> Language:
        """Return the tree-sitter Language object."""
        return self._language

    def parse_tree(self, source_bytes: bytes) -> Tree:
        """Parse raw bytes and return the tree-sitter Tree."""
        return self._parser.parse(source_bytes)

    def parse_text(self, text: str) -> list[Declaration]:
        """Parse source text and classify its top-level items.

        Raises:
            ParseError: If the source has syntax errors and partial trees
                are not allowed.
            NestingTooDeepError: If inline modules nest too deeply.
        """
        tree = self.parse_tree(text.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            error_node = first_error(root)
            detail = describe_error(error_node) if error_node is not None else "syntax error"
            if not self._config.allow_partial:
                line = column = None
                if error_node is not None:
                    line, column = error_node.start_point[0] + 1, error_node.start_point[1] + 1
                raise ParseError(f"parsing error: {detail}", line=line, column=column)
            logger.warning("Parse errors (continuing with partial tree): %s", detail)

        declarations = classify_items(root, max_nesting=self._max_nesting)
        logger.debug("Classified %d top-level items", len(declarations))
        return declarations

    def parse_file(self, path: PathLike) -> list[Declaration]:
        """Read and parse a source file.

        Raises:
            SourceReadError: If the file cannot be read.
            ParseError: See ``parse_text``.
        """
        file_path = normalize_path(path)
        text = read_source(file_path)
        logger.debug("Read %d characters from %s", len(text), file_path)
        return self.parse_text(text)


__all__ = ["RustParser", "read_source", "first_error", "describe_error"]
