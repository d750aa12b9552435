from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class PurgeResult(BaseModel):
    """Outcome of one purge run."""

    num_days: int = Field(..., ge=0)
    batch_size: int = Field(..., gt=0)
    cutoff: datetime
    batches: List[int] = Field(default_factory=list, description="Rows deleted per commit")
    remaining: int = 0

    @property
    def total_deleted(self) -> int:
        return sum(self.batches)

    @property
    def commits(self) -> int:
        return len(self.batches)


class TableCount(BaseModel):
    table: str
    rows: int = Field(..., ge=0)


class AgeBucket(BaseModel):
    bucket: int = Field(..., ge=1, le=5)
    label: str
    snapshots: int = 0
    servers: int = 0


class SnapshotReport(BaseModel):
    generated_at: datetime
    interval_days: int = Field(..., gt=0)
    tables: List[TableCount] = Field(default_factory=list)
    buckets: List[AgeBucket] = Field(default_factory=list)
