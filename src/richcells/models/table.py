from __future__ import annotations

from pydantic import BaseModel, model_validator


class Table(BaseModel):
    """Header plus rows of cell strings, as handed to the page renderer."""

    header: list[str] = []
    rows: list[list[str]] = []

    @model_validator(mode="after")
    def check_row_widths(self) -> Table:
        width = len(self.header)
        for i, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(f"row {i} has {len(row)} cells, header has {width}")
        return self

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.header)

    @property
    def is_empty(self) -> bool:
        return not self.header
