from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

JobStatus = Literal["active", "closed", "draft"]


class Job(BaseModel):
    """Recruiting requisition owned by the entity store."""

    id: str
    title: str
    location: str = ""
    salary_range: str = ""
    seniority: str = "Mid-Level"
    skills_required: list[str] = Field(default_factory=list)
    responsibilities: list[str] = Field(default_factory=list)
    description: str = ""
    status: JobStatus = "active"
    created_at: str

    model_config = ConfigDict(extra="forbid", frozen=True)
