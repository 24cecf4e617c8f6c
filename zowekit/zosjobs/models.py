"""
z/OSMF job models.

Field names follow Python conventions; aliases match the z/OSMF JSON keys so
responses validate directly and ``model_dump(by_alias=True)`` round-trips.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class JobStatus:
    """Job status values reported by z/OSMF."""
    INPUT = "INPUT"
    ACTIVE = "ACTIVE"
    OUTPUT = "OUTPUT"


class ZosmfModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Job(ZosmfModel):
    jobid: str
    jobname: str
    owner: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    job_class: Optional[str] = Field(default=None, alias="class")
    retcode: Optional[str] = None
    subsystem: Optional[str] = None
    url: Optional[str] = None
    files_url: Optional[str] = Field(default=None, alias="files-url")
    job_correlator: Optional[str] = Field(default=None, alias="job-correlator")
    phase: Optional[int] = None
    phase_name: Optional[str] = Field(default=None, alias="phase-name")


class SpoolFile(ZosmfModel):
    id: int
    ddname: str
    stepname: Optional[str] = None
    procstep: Optional[str] = None
    jobid: Optional[str] = None
    jobname: Optional[str] = None
    recfm: Optional[str] = None
    lrecl: Optional[int] = None
    spool_class: Optional[str] = Field(default=None, alias="class")
    byte_count: Optional[int] = Field(default=None, alias="byte-count")
    record_count: Optional[int] = Field(default=None, alias="record-count")
    records_url: Optional[str] = Field(default=None, alias="records-url")


class JobFeedback(ZosmfModel):
    """Response to a cancel or delete request."""
    jobid: Optional[str] = None
    jobname: Optional[str] = None
    status: Optional[int] = None
    message: Optional[str] = None
    original_jobid: Optional[str] = Field(default=None, alias="original-jobid")


def parse_jobs(data) -> List[Job]:
    return [Job.model_validate(item) for item in (data or [])]
