from tree_sitter import Node, Tree
from tree_sitter_language_pack import get_parser

from line_sitter.core.ports.syntax import SyntaxNode

GRAMMAR = "clojure"


class ParseError(ValueError):
    """Raised when source text cannot be parsed into a well-formed tree."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


def _first_problem_node(node: Node) -> Node | None:
    if not node.has_error:
        return None
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        found = _first_problem_node(child)
        if found is not None:
            return found
    return node


def parse_source(source: str) -> Tree:
    """Parse Clojure source into a tree-sitter tree.

    The tree is only valid for this exact ``source``; byte offsets of its
    nodes are UTF-8 offsets into ``source.encode("utf-8")``.
    """
    parser = get_parser(GRAMMAR)
    tree = parser.parse(source.encode("utf-8"))

    problem = _first_problem_node(tree.root_node)
    if problem is not None:
        line = problem.start_point[0] + 1
        column = problem.start_point[1] + 1
        if problem.is_missing:
            detail = f"missing {problem.type!r}"
        else:
            detail = "syntax error"
        raise ParseError(f"Cannot parse source: {detail} at line {line}, column {column}", line, column)

    return tree


def node_line_range(node: SyntaxNode) -> tuple[int, int]:
    """Return the 1-indexed, inclusive ``(first, last)`` lines spanned by ``node``."""
    return node.start_point[0] + 1, node.end_point[0] + 1


def node_text(node: Node) -> str:
    text = node.text
    return text.decode("utf-8") if text is not None else ""
