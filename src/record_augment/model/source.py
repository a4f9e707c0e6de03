"""Dictionary source models — one SourceFile per configured dictionary path.

Format resolution:
    "auto" picks the format from the file extension (.csv, .json, .yaml, .yml)
    "yml" is accepted as an alias of "yaml"

CSV first-line policies:
    header  first row holds the column names (header must not be configured)
    ignore  first row is discarded (header must be configured)
    data    first row is data (header must be configured)
    auto    "data" when a header is configured, otherwise "header"
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SourceFormat = Literal["auto", "csv", "json", "yaml", "yml"]
FirstLine = Literal["auto", "header", "ignore", "data"]

_EXTENSIONS = {
    ".csv": "csv",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


class CsvOptions(BaseModel):
    first_line: FirstLine = "auto"
    header: list[str] | None = None
    key: str | None = None           # defaults to the first header column
    remove_key: bool = True
    col_sep: str = Field(default=",", min_length=1, max_length=1)
    quote_char: str = Field(default='"', min_length=1, max_length=1)

    @property
    def resolved_first_line(self) -> Literal["header", "ignore", "data"]:
        if self.first_line == "auto":
            return "data" if self.header else "header"
        return self.first_line


class ArrayOptions(BaseModel):
    """Options for JSON/YAML sources whose top-level value is a list."""

    key: str | None = None  # element field holding the dictionary key
    remove_key: bool = True


class SourceFile(BaseModel):
    path: str
    format: SourceFormat = "auto"
    csv: CsvOptions = Field(default_factory=CsvOptions)
    array: ArrayOptions = Field(default_factory=ArrayOptions)

    @property
    def resolved_format(self) -> str | None:
        """The concrete format, or None when "auto" cannot match the extension."""
        if self.format == "yml":
            return "yaml"
        if self.format != "auto":
            return self.format
        lowered = self.path.lower()
        for ext, fmt in _EXTENSIONS.items():
            if lowered.endswith(ext):
                return fmt
        return None
