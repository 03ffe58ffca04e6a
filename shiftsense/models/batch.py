"""
Batch processing models for uploaded metric tables.
"""

from pydantic import BaseModel, Field


class RowOutcome(BaseModel):
    """Validation outcome of a single uploaded row."""

    row_index: int = Field(ge=0, description="Zero-based position in the upload")
    valid: bool
    employee_name: str = ""
    missing_fields: list[str] = Field(default_factory=list)


class BatchProgress(BaseModel):
    """Running counters reported after each processed row."""

    processed: int = Field(ge=0)
    total_rows: int = Field(ge=0)
    success: int = Field(ge=0)
    failed: int = Field(ge=0)
    progress: float = Field(ge=0.0, le=100.0, description="Percent of rows visited")


class BatchResult(BaseModel):
    """
    Final outcome of a batch run.

    Attributes:
        total_rows: Rows supplied to the run
        success: Rows that passed validation
        failed: Rows that failed validation
        progress: Percent of rows visited (100 iff every row was visited)
        completed: True when every row was visited
        cancelled: True when the run stopped on a cancel signal
        row_outcomes: Per-row results in input order
    """

    total_rows: int = Field(ge=0)
    success: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    progress: float = Field(default=0.0, ge=0.0, le=100.0)
    completed: bool = False
    cancelled: bool = False
    row_outcomes: list[RowOutcome] = Field(default_factory=list)
