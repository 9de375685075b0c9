"""Schema models describing the columns of a row set."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

ColumnType = Literal["string", "number", "boolean", "date"]


class ColumnSchema(BaseModel):
    """Schema definition for a single column."""

    name: str = Field(description="Column name")
    type: ColumnType = Field(description="Inferred column type")
    nullable: bool = Field(
        default=True,
        description="Whether any row has a null, empty or missing value for the column",
    )


class Schema(BaseModel):
    """Column list for a dataset."""

    columns: list[ColumnSchema] = Field(
        default_factory=list, description="List of column definitions"
    )

    def get_column(self, name: str) -> Optional[ColumnSchema]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def get_column_names(self) -> list[str]:
        return [col.name for col in self.columns]
