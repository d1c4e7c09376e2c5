"""Structural line breaking for Clojure source.

Long lines are fixed by breaking the outermost collection literal around them
that is not already broken, one element per line, and re-scanning until
nothing changes.
"""

import logging
from collections.abc import Iterable
from itertools import pairwise

from line_sitter.core.check import find_long_lines
from line_sitter.core.ports.syntax import SyntaxNode, SyntaxTree
from line_sitter.core.syntax import node_line_range, parse_source
from line_sitter.models import Edit, FixConfig

logger = logging.getLogger(__name__)

BREAKABLE_TYPES: frozenset[str] = frozenset({"list_lit", "vec_lit", "map_lit", "set_lit"})

_INDENT_WIDTH = 2

# reader metadata (`^String`, `#^String`) is a named child of the form it annotates
_METADATA_TYPES: frozenset[str] = frozenset({"meta_lit", "old_meta_lit"})


class EditConflictError(ValueError):
    """Raised when edits overlap or fall outside the source."""


class UnsafeBreakError(ValueError):
    """Raised when breaking a form would remove anything but whitespace."""


# ---------------------------------------------------------------------------
# Edit application
# ---------------------------------------------------------------------------


def apply_edits(source: str, edits: Iterable[Edit]) -> str:
    """Apply non-overlapping byte-range edits to ``source``.

    Edits are spliced right to left so pending offsets stay valid.
    """
    ordered = sorted(edits, key=lambda e: e.start, reverse=True)
    if not ordered:
        return source

    buffer = source.encode("utf-8")
    size = len(buffer)
    limit = size
    for edit in ordered:
        if edit.end > size:
            raise EditConflictError(f"Edit [{edit.start}, {edit.end}) exceeds the source length ({size} bytes)")
        if edit.end > limit:
            raise EditConflictError(f"Edit [{edit.start}, {edit.end}) overlaps an edit starting at {limit}")
        buffer = buffer[: edit.start] + edit.replacement.encode("utf-8") + buffer[edit.end :]
        limit = edit.start
    return buffer.decode("utf-8")


# ---------------------------------------------------------------------------
# Locating breakable forms
# ---------------------------------------------------------------------------


def is_breakable(node: SyntaxNode) -> bool:
    return node.type in BREAKABLE_TYPES


def _contains_line(node: SyntaxNode, line: int) -> bool:
    first, last = node_line_range(node)
    return first <= line <= last


def _collect_breakable(node: SyntaxNode, line: int, found: list[SyntaxNode]) -> None:
    if not _contains_line(node, line):
        return
    if is_breakable(node):
        found.append(node)
    for child in node.named_children:
        _collect_breakable(child, line, found)


def find_breakable_forms(tree: SyntaxTree, line: int) -> list[SyntaxNode]:
    """Return every breakable form spanning ``line``, outermost first."""
    found: list[SyntaxNode] = []
    _collect_breakable(tree.root_node, line, found)
    return found


def find_breakable_form(tree: SyntaxTree, line: int) -> SyntaxNode | None:
    """Return the outermost breakable form spanning the 1-indexed ``line``, if any."""
    forms = find_breakable_forms(tree, line)
    return forms[0] if forms else None


# ---------------------------------------------------------------------------
# Planning edits
# ---------------------------------------------------------------------------


def _ends_with_newline(node: SyntaxNode) -> bool:
    # line comments may own their terminating newline
    return node.end_point[1] == 0 and node.end_point[0] > node.start_point[0]


def _elements(node: SyntaxNode) -> list[SyntaxNode]:
    return [child for child in node.named_children if child.type not in _METADATA_TYPES]


def _check_gaps(node: SyntaxNode, elements: list[SyntaxNode]) -> None:
    spans = {(element.start_byte, element.end_byte) for element in elements}
    for child in node.children:
        if (child.start_byte, child.end_byte) in spans:
            continue
        for prev, nxt in pairwise(elements):
            if prev.end_byte <= child.start_byte and child.end_byte <= nxt.start_byte:
                raise UnsafeBreakError(
                    f"Breaking {node.type} at byte {node.start_byte} would remove {child.type!r} "
                    f"at [{child.start_byte}, {child.end_byte})"
                )


def _display_column(node: SyntaxNode, source: str | None) -> int:
    # tree-sitter columns count bytes, line lengths count characters
    if source is None:
        return node.start_point[1]
    encoded = source.encode("utf-8")
    line_start = encoded.rfind(b"\n", 0, node.start_byte) + 1
    return len(encoded[line_start : node.start_byte].decode("utf-8"))


def break_form(node: SyntaxNode, source: str | None = None) -> list[Edit] | None:
    """Plan edits that put each element of ``node`` on its own line.

    The first element stays next to the opening delimiter and the closing
    delimiter stays after the last element. Reader metadata in front of the
    form is not an element. Returns ``None`` when there is at most one
    element.

    ``source`` is the text the node was parsed from; when given, the indent
    is measured in characters rather than bytes.
    """
    elements = _elements(node)
    if len(elements) <= 1:
        return None
    _check_gaps(node, elements)

    padding = " " * (_display_column(node, source) + _INDENT_WIDTH)
    return [
        Edit(
            start=prev.end_byte,
            end=nxt.start_byte,
            replacement=padding if _ends_with_newline(prev) else "\n" + padding,
        )
        for prev, nxt in pairwise(elements)
    ]


# ---------------------------------------------------------------------------
# Fix loop
# ---------------------------------------------------------------------------


def _break_line(source: str, line: int) -> str:
    tree = parse_source(source)
    for form in find_breakable_forms(tree, line):
        edits = break_form(form, source)
        if not edits:
            continue
        updated = apply_edits(source, edits)
        if updated != source:
            logger.debug("Broke %s at byte %d for line %d", form.type, form.start_byte, line)
            return updated
    return source


def fix_source(source: str, config: FixConfig | None = None, *, max_iterations: int | None = None) -> str:
    """Break collection literals until no line exceeds the limit or no progress is possible.

    Each iteration re-scans the current text, reparses it and works on the
    earliest long line only. When that line cannot be shortened the text is
    returned as is, with the remaining long lines left in place.
    """
    config = config or FixConfig()
    current = source
    iteration = 0

    while True:
        long_lines = find_long_lines(current, config.line_length)
        if not long_lines:
            logger.debug("Converged after %d iteration(s)", iteration)
            return current

        if max_iterations is not None and iteration >= max_iterations:
            logger.warning("Stopped after %d iteration(s) with %d long line(s) left", iteration, len(long_lines))
            return current

        iteration += 1
        line = long_lines[0]
        updated = _break_line(current, line)
        if updated == current:
            logger.debug("Stalled on line %d after %d iteration(s)", line, iteration)
            return current
        current = updated
