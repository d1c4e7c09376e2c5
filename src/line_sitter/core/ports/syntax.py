from collections.abc import Sequence
from typing import Protocol


class SyntaxNode(Protocol):
    @property
    def type(self) -> str: ...

    @property
    def start_byte(self) -> int: ...

    @property
    def end_byte(self) -> int: ...

    @property
    def start_point(self) -> tuple[int, int]: ...

    @property
    def end_point(self) -> tuple[int, int]: ...

    @property
    def children(self) -> Sequence["SyntaxNode"]: ...

    @property
    def named_children(self) -> Sequence["SyntaxNode"]: ...


class SyntaxTree(Protocol):
    @property
    def root_node(self) -> SyntaxNode: ...
