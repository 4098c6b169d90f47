"""Data models for namespace mappings and resolution reports."""

from pydantic import BaseModel
from pydantic import Field
from pydantic import field_validator


class NamespaceMapping(BaseModel):
    """A namespace prefix and the base directories probed for it, in order.

    Attributes:
        prefix: Namespace prefix as configured (normalized by the autoloader)
        directories: Base directories, probe order
    """

    prefix: str = Field(min_length=1)
    directories: list[str] = Field(min_length=1)

    @field_validator("directories", mode="before")
    @classmethod
    def _coerce_single_directory(cls, value):
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("directories")
    @classmethod
    def _reject_empty_directories(cls, value: list[str]) -> list[str]:
        if any(not directory for directory in value):
            raise ValueError("directories must be non-empty strings")
        return value


class ProbeAttempt(BaseModel):
    """One candidate file tried during resolution."""

    prefix: str
    relative_name: str
    path: str
    loaded: bool


class Resolution(BaseModel):
    """Outcome of resolving a symbol, with every probe that was made."""

    symbol: str
    loaded: bool
    path: str | None = None
    attempts: list[ProbeAttempt] = Field(default_factory=list)
