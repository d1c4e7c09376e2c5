import logging
from pathlib import Path

from line_sitter.core.check import check_line_lengths
from line_sitter.core.fix import fix_source
from line_sitter.models import FileReport, FixConfig

logger = logging.getLogger(__name__)


def _read_source(path: Path) -> str:
    try:
        return path.read_bytes().decode("utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None


def check_file(path: str | Path, config: FixConfig) -> FileReport:
    """Report the long lines of a file without modifying it."""
    file_path = Path(path)
    source = _read_source(file_path)
    violations = check_line_lengths(source, config.line_length)
    logger.info("Checked %s: %d long line(s)", file_path, len(violations))
    return FileReport(path=str(file_path), violations=violations)


def fix_file(path: str | Path, config: FixConfig, write: bool = True) -> tuple[FileReport, str]:
    """Fix a file and return its report together with the fixed content.

    The file is only rewritten when ``write`` is set and the content changed.
    The report lists the long lines that remain after fixing.
    """
    file_path = Path(path)
    source = _read_source(file_path)
    fixed = fix_source(source, config)
    changed = fixed != source

    if changed and write:
        file_path.write_bytes(fixed.encode("utf-8"))
        logger.info("Rewrote %s", file_path)

    report = FileReport(
        path=str(file_path),
        violations=check_line_lengths(fixed, config.line_length),
        changed=changed,
    )
    logger.info("Fixed %s: %d long line(s) left", file_path, len(report.violations))
    return report, fixed
