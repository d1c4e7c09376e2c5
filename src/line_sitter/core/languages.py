from collections.abc import Iterable
from pathlib import Path

# Clojure, ClojureScript, cljc, ClojureDart, EDN and babashka scripts
_SUPPORTED_EXTENSIONS: frozenset[str] = frozenset({".bb", ".clj", ".cljc", ".cljd", ".cljs", ".edn"})


def is_supported_file(path: Path) -> bool:
    return path.suffix.lower() in _SUPPORTED_EXTENSIONS


def _walk(directory: Path) -> list[Path]:
    found: list[Path] = []
    for entry in sorted(directory.iterdir()):
        if entry.name.startswith("."):
            continue
        if entry.is_dir():
            found.extend(_walk(entry))
        elif entry.is_file() and is_supported_file(entry):
            found.append(entry)
    return found


def collect_source_files(paths: Iterable[str | Path]) -> list[Path]:
    """Expand ``paths`` into the list of files to process.

    Files named explicitly are kept whatever their extension; directories are
    searched recursively for Clojure-family sources, skipping hidden entries.
    """
    files: list[Path] = []
    seen: set[Path] = set()
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            candidates = _walk(path)
        elif path.is_file():
            candidates = [path]
        else:
            raise FileNotFoundError(f"File not found: {raw}")

        for candidate in candidates:
            key = candidate.resolve()
            if key not in seen:
                seen.add(key)
                files.append(candidate)
    return files
