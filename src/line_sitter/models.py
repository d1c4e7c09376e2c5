from pydantic import BaseModel, ConfigDict, Field, model_validator


class Edit(BaseModel):
    """Replace the half-open UTF-8 byte range ``[start, end)`` with ``replacement``."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    replacement: str

    @model_validator(mode="after")
    def _check_range(self) -> "Edit":
        if self.end < self.start:
            raise ValueError(f"Edit end ({self.end}) precedes start ({self.start})")
        return self


class Violation(BaseModel):
    line: int = Field(ge=1)
    length: int = Field(ge=0)


class FixConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_length: int = Field(default=80, gt=0)


class FileReport(BaseModel):
    path: str
    violations: list[Violation] = Field(default_factory=list)
    changed: bool = False
