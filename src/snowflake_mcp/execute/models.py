"""Models for the run_query tool."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class RunQueryArguments(BaseModel):
    """Arguments accepted by ``run_query``."""

    model_config = ConfigDict(extra="ignore")

    sql: StrictStr = Field(min_length=1, description="Read-only SQL to run on the warehouse")
