"""zos-jobs commands: submit, list, view, cancel and delete jobs."""

from pathlib import Path

import click

from zowekit.cli.common import emit, get_client, handle_errors, is_json, print_table
from zowekit.zosjobs import Job, Jobs


def _job_payload(job: Job) -> dict:
    return job.model_dump(by_alias=True, exclude_none=True)


def _job_text(job: Job) -> str:
    lines = [f"jobid: {job.jobid}", f"jobname: {job.jobname}"]
    for label, value in (("status", job.status), ("retcode", job.retcode), ("owner", job.owner)):
        if value is not None:
            lines.append(f"{label}: {value}")
    return "\n".join(lines)


def _submit_and_report(ctx, jobs: Jobs, job: Job, wait_for_output: bool, view_all_spool_content: bool) -> None:
    if wait_for_output or view_all_spool_content:
        job = jobs.wait_for_output(job)
    payload = _job_payload(job)
    text = _job_text(job)
    if view_all_spool_content:
        spool = []
        for spool_file in jobs.list_spool_files(job):
            content = jobs.get_spool_content(spool_file, job)
            spool.append({"ddname": spool_file.ddname, "stepname": spool_file.stepname, "data": content})
            text += f"\n\nSpool file: {spool_file.ddname} (ID #{spool_file.id}, Step: {spool_file.stepname})\n{content}"
        payload["spool"] = spool
    emit(ctx, payload, text)


@click.group("zos-jobs")
def jobs():
    """Submit and manage z/OS batch jobs."""
    pass


@jobs.group()
def submit():
    """Submit jobs."""
    pass


@submit.command("data-set")
@click.argument("data_set_name")
@click.option("--wait-for-output", "--wfo", is_flag=True, help="Wait until the job reaches OUTPUT status")
@click.option("--view-all-spool-content", "--vasc", is_flag=True, help="Print all spool files after completion")
@click.pass_context
@handle_errors
def submit_data_set(ctx, data_set_name, wait_for_output, view_all_spool_content):
    """Submit the JCL held in a data set or member."""
    with get_client(ctx) as client:
        api = Jobs(client)
        _submit_and_report(ctx, api, api.submit_data_set(data_set_name), wait_for_output, view_all_spool_content)


@submit.command("local-file")
@click.argument("local_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--wait-for-output", "--wfo", is_flag=True, help="Wait until the job reaches OUTPUT status")
@click.option("--view-all-spool-content", "--vasc", is_flag=True, help="Print all spool files after completion")
@click.pass_context
@handle_errors
def submit_local_file(ctx, local_file, wait_for_output, view_all_spool_content):
    """Submit JCL from a local file."""
    jcl = Path(local_file).read_text()
    with get_client(ctx) as client:
        api = Jobs(client)
        _submit_and_report(ctx, api, api.submit_jcl(jcl), wait_for_output, view_all_spool_content)


@jobs.group("list")
def list_group():
    """List jobs and spool files."""
    pass


@list_group.command("jobs")
@click.option("--owner", "-o", help="Job owner (default: you)")
@click.option("--prefix", "-p", help="Job name prefix, e.g. IBMUSER*")
@click.option("--max-jobs", "--mj", type=int, help="Maximum number of jobs")
@click.pass_context
@handle_errors
def list_jobs(ctx, owner, prefix, max_jobs):
    """List jobs on the JES spool."""
    with get_client(ctx) as client:
        found = Jobs(client).list_jobs(owner=owner, prefix=prefix, max_jobs=max_jobs)
    if is_json(ctx):
        emit(ctx, [_job_payload(job) for job in found])
        return
    print_table(
        "Jobs",
        ["Job ID", "Name", "Owner", "Status", "Retcode"],
        ((job.jobid, job.jobname, job.owner, job.status, job.retcode) for job in found),
    )


@list_group.command("spool-files-by-jobid")
@click.argument("jobid")
@click.pass_context
@handle_errors
def list_spool_files(ctx, jobid):
    """List the spool files of a job."""
    with get_client(ctx) as client:
        api = Jobs(client)
        spool_files = api.list_spool_files(api.get_job(jobid))
    if is_json(ctx):
        emit(ctx, [spool.model_dump(by_alias=True, exclude_none=True) for spool in spool_files])
        return
    print_table(
        "Spool files",
        ["ID", "DD name", "Step", "Proc step", "Records"],
        ((s.id, s.ddname, s.stepname, s.procstep, s.record_count) for s in spool_files),
    )


@jobs.group()
def view():
    """View job status and spool content."""
    pass


@view.command("job-status-by-jobid")
@click.argument("jobid")
@click.pass_context
@handle_errors
def view_job_status(ctx, jobid):
    """Show the status of a job."""
    with get_client(ctx) as client:
        job = Jobs(client).get_job(jobid)
    emit(ctx, _job_payload(job), _job_text(job))


@view.command("spool-file-by-id")
@click.argument("jobid")
@click.argument("spool_file_id", type=int)
@click.pass_context
@handle_errors
def view_spool_file(ctx, jobid, spool_file_id):
    """Print one spool file of a job."""
    with get_client(ctx) as client:
        api = Jobs(client)
        job = api.get_job(jobid)
        content = api.get_spool_content_by_id(job.jobname, job.jobid, spool_file_id)
    emit(ctx, {"jobid": job.jobid, "id": spool_file_id, "data": content}, content)


@view.command("all-spool-content")
@click.argument("jobid")
@click.pass_context
@handle_errors
def view_all_spool_content(ctx, jobid):
    """Print every spool file of a job."""
    with get_client(ctx) as client:
        api = Jobs(client)
        job = api.get_job(jobid)
        _submit_and_report(ctx, api, job, False, True)


@jobs.group()
def cancel():
    """Cancel jobs."""
    pass


@cancel.command("job")
@click.argument("jobid")
@click.pass_context
@handle_errors
def cancel_job(ctx, jobid):
    """Cancel a job that is queued or running."""
    with get_client(ctx) as client:
        api = Jobs(client)
        job = api.get_job(jobid)
        feedback = api.cancel_job(job)
    emit(ctx, feedback.model_dump(by_alias=True, exclude_none=True),
         f"✓ Successfully cancelled job {job.jobname} ({job.jobid})")


@jobs.group()
def delete():
    """Purge jobs from the spool."""
    pass


@delete.command("job")
@click.argument("jobid")
@click.pass_context
@handle_errors
def delete_job(ctx, jobid):
    """Delete a job and its output."""
    with get_client(ctx) as client:
        api = Jobs(client)
        job = api.get_job(jobid)
        feedback = api.delete_job(job)
    emit(ctx, feedback.model_dump(by_alias=True, exclude_none=True),
         f"✓ Successfully deleted job {job.jobname} ({job.jobid})")
