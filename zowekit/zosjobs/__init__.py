"""
Zowekit z/OS jobs

Job submission and spool access over the z/OSMF jobs REST API.
"""

from zowekit.zosjobs.jobs import Jobs
from zowekit.zosjobs.models import Job, JobFeedback, JobStatus, SpoolFile

__all__ = ["Job", "JobFeedback", "JobStatus", "Jobs", "SpoolFile"]
