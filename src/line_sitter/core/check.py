from line_sitter.models import Violation


def _split_lines(source: str) -> list[str]:
    if not source:
        return []
    return [line.removesuffix("\r") for line in source.split("\n")]


def check_line_lengths(source: str, max_length: int) -> list[Violation]:
    """Return a violation for every line longer than ``max_length`` characters."""
    return [
        Violation(line=number, length=len(line))
        for number, line in enumerate(_split_lines(source), start=1)
        if len(line) > max_length
    ]


def find_long_lines(source: str, max_length: int) -> list[int]:
    """Return the ascending 1-indexed numbers of lines longer than ``max_length``."""
    return [
        number for number, line in enumerate(_split_lines(source), start=1) if len(line) > max_length
    ]
