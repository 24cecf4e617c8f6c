"""
Submit, inspect, cancel and purge z/OS jobs through /zosmf/restjobs.
"""

import time
from typing import List, Optional, Union

from zowekit.base import ZosmfApi
from zowekit.config import get_config
from zowekit.errors import JobTimeoutError, ZosmfNotFoundError, expect_non_blank
from zowekit.zosjobs.models import Job, JobFeedback, JobStatus, SpoolFile, parse_jobs

RESOURCE = "/zosmf/restjobs/jobs"
JOB_MODIFY_VERSION = "2.0"

MISSING_JCL = "Specify the JCL to submit."
MISSING_JOB_ID = "Specify the job ID."
MISSING_JOB_NAME = "Specify the job name."


class Jobs(ZosmfApi):
    """
    Job operations.

    Example:
        jobs = Jobs(client)
        job = jobs.submit_jcl("//IEFBR14 JOB ...\\n//S1 EXEC PGM=IEFBR14")
        job = jobs.wait_for_output(job)
        for spool in jobs.list_spool_files(job):
            print(jobs.get_spool_content(spool))
    """

    @staticmethod
    def _job_path(jobname: str, jobid: str) -> str:
        return f"{RESOURCE}/{jobname}/{jobid}"

    def submit_jcl(
        self,
        jcl: str,
        *,
        internal_reader_recfm: str = "F",
        internal_reader_lrecl: int = 80,
        job_class: str = "A",
    ) -> Job:
        expect_non_blank(jcl, MISSING_JCL)
        headers = {
            "Content-Type": "text/plain",
            "X-IBM-Intrdr-Class": job_class,
            "X-IBM-Intrdr-Recfm": internal_reader_recfm,
            "X-IBM-Intrdr-Lrecl": str(internal_reader_lrecl),
            "X-IBM-Intrdr-Mode": "TEXT",
        }
        data = self.client.put_expect_json(RESOURCE, content=jcl.encode("utf-8"), headers=headers)
        job = Job.model_validate(data)
        self.logger.info("job_submitted", extra=self.log_extra(job_id=job.jobid, jobname=job.jobname))
        return job

    def submit_data_set(self, data_set_name: str) -> Job:
        """Submit the JCL held in a data set or member."""
        expect_non_blank(data_set_name, "Specify the input data set name.")
        data = self.client.put_expect_json(RESOURCE, json_body={"file": f"//'{data_set_name.strip()}'"})
        job = Job.model_validate(data)
        self.logger.info("job_submitted", extra=self.log_extra(job_id=job.jobid, data_set=data_set_name))
        return job

    def list_jobs(
        self,
        owner: Optional[str] = None,
        prefix: Optional[str] = None,
        max_jobs: Optional[int] = None,
    ) -> List[Job]:
        """List jobs; z/OSMF defaults the owner to the session user."""
        data = self.client.get_expect_json(
            RESOURCE, params={"owner": owner, "prefix": prefix, "max-jobs": max_jobs}
        )
        return parse_jobs(data)

    def get_job(self, jobid: str) -> Job:
        expect_non_blank(jobid, MISSING_JOB_ID)
        jobs = parse_jobs(self.client.get_expect_json(RESOURCE, params={"owner": "*", "jobid": jobid.upper()}))
        if not jobs:
            raise ZosmfNotFoundError(f"Job not found: {jobid}", status_code=404)
        return jobs[0]

    def get_status(self, jobname: str, jobid: str) -> Job:
        expect_non_blank(jobname, MISSING_JOB_NAME)
        expect_non_blank(jobid, MISSING_JOB_ID)
        return Job.model_validate(self.client.get_expect_json(self._job_path(jobname, jobid)))

    def list_spool_files(self, job: Job) -> List[SpoolFile]:
        data = self.client.get_expect_json(f"{self._job_path(job.jobname, job.jobid)}/files")
        return [SpoolFile.model_validate(item) for item in (data or [])]

    def get_spool_content(self, spool: SpoolFile, job: Optional[Job] = None) -> str:
        jobname = spool.jobname or (job.jobname if job else None)
        jobid = spool.jobid or (job.jobid if job else None)
        expect_non_blank(jobname, MISSING_JOB_NAME)
        expect_non_blank(jobid, MISSING_JOB_ID)
        return self.get_spool_content_by_id(jobname, jobid, spool.id)

    def get_spool_content_by_id(self, jobname: str, jobid: str, spool_id: int) -> str:
        return self.client.get_expect_text(f"{self._job_path(jobname, jobid)}/files/{spool_id}/records")

    def get_jcl(self, job: Job) -> str:
        return self.client.get_expect_text(f"{self._job_path(job.jobname, job.jobid)}/files/JCL/records")

    def cancel_job(self, job: Job) -> JobFeedback:
        data = self.client.put_expect_json(
            self._job_path(job.jobname, job.jobid),
            json_body={"request": "cancel", "version": JOB_MODIFY_VERSION},
        )
        self.logger.info("job_cancelled", extra=self.log_extra(job_id=job.jobid))
        return JobFeedback.model_validate(data or {})

    def delete_job(self, job: Job) -> JobFeedback:
        data = self.client.delete_expect_json(
            self._job_path(job.jobname, job.jobid),
            headers={"X-IBM-Job-Modify-Version": JOB_MODIFY_VERSION},
        )
        self.logger.info("job_deleted", extra=self.log_extra(job_id=job.jobid))
        return JobFeedback.model_validate(data or {})

    def wait_for_output(
        self,
        job: Union[Job, str],
        attempts: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> Job:
        """
        Poll until the job reaches OUTPUT status.

        Raises:
            JobTimeoutError: The job was still queued or running after all attempts
        """
        config = get_config()
        attempts = config.job_wait_attempts if attempts is None else attempts
        interval = config.job_poll_interval if interval is None else interval
        current = self.get_job(job) if isinstance(job, str) else job

        for attempt in range(max(attempts, 1)):
            current = self.get_status(current.jobname, current.jobid)
            if current.status == JobStatus.OUTPUT:
                return current
            self.logger.debug(
                "job_waiting",
                extra=self.log_extra(job_id=current.jobid, status=current.status, attempt=attempt + 1),
            )
            if attempt + 1 < attempts:
                time.sleep(interval)
        raise JobTimeoutError(
            f"Job {current.jobname}({current.jobid}) did not reach OUTPUT status after {attempts} attempts "
            f"(last status: {current.status})",
            metadata={"job_id": current.jobid, "status": current.status},
        )
