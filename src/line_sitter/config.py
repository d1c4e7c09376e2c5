import os

from line_sitter.models import FixConfig

LINE_LENGTH_ENV = "LINE_SITTER_LINE_LENGTH"


def load_config(line_length: int | None = None) -> FixConfig:
    """Build the fix configuration.

    An explicit ``line_length`` wins over the ``LINE_SITTER_LINE_LENGTH``
    environment variable, which wins over the default of 80.
    """
    if line_length is None:
        raw = os.getenv(LINE_LENGTH_ENV, "").strip()
        if raw:
            try:
                line_length = int(raw)
            except ValueError:
                raise ValueError(f"{LINE_LENGTH_ENV} must be an integer, got {raw!r}") from None

    if line_length is None:
        return FixConfig()
    return FixConfig(line_length=line_length)
