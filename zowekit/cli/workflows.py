"""zos-workflows commands."""

import click

from zowekit.cli.common import emit, get_client, handle_errors, is_json, print_table
from zowekit.errors import ValidationError
from zowekit.workflows import Workflows
from zowekit.workflows.workflows import RESOLVE_CONFLICT_OPTIONS


def _check_key_options(workflow_key, workflow_name) -> None:
    """Exactly one of --workflow-key and --workflow-name must be given."""
    if workflow_key and workflow_name:
        raise ValidationError(
            "The following options conflict (mutually exclusive):\n--workflow-key\n--workflow-name"
        )
    if not workflow_key and not workflow_name:
        raise ValidationError("You must specify one of these options:\n--workflow-key\n--workflow-name")


def _resolve_key(api: Workflows, workflow_key, workflow_name) -> str:
    return workflow_key or api.get_key_by_name(workflow_name)


def _key_options(func):
    func = click.option("--workflow-name", "--wn", help="Workflow name")(func)
    func = click.option("--workflow-key", "--wk", help="Workflow key")(func)
    return func


@click.group("zos-workflows")
def workflows():
    """Create and run z/OSMF workflows."""
    pass


@workflows.group()
def create():
    """Create workflow instances."""
    pass


@create.command("workflow-from-data-set")
@click.argument("workflow_name")
@click.option("--data-set", "--ds", required=True, help="Data set holding the workflow definition")
@click.option("--system-name", "--sn", required=True, help="System to run the workflow on")
@click.option("--owner", "--ow", required=True, help="Workflow owner")
@click.option("--variables-input-file", "--vif", help="Data set or USS file with variable values")
@click.option("--variables", "--vs", help="Variables, e.g. name1=value1,name2=value2")
@click.option("--assign-to-owner/--no-assign-to-owner", default=True, show_default=True)
@click.option("--access-type", "--at", type=click.Choice(["Public", "Restricted", "Private"]), default="Public",
              show_default=True)
@click.option("--delete-completed", "--dc", is_flag=True, help="Purge jobs of completed steps")
@click.pass_context
@handle_errors
def create_from_data_set(ctx, workflow_name, data_set, system_name, owner, variables_input_file, variables,
                         assign_to_owner, access_type, delete_completed):
    """Create a workflow from a definition stored in a data set."""
    parsed = None
    if variables:
        parsed = dict(pair.split("=", 1) for pair in variables.split(",") if "=" in pair)
    with get_client(ctx) as client:
        result = Workflows(client).create(
            workflow_name,
            data_set,
            system_name,
            owner,
            variables_input_file=variables_input_file,
            variables=parsed,
            assign_to_owner=assign_to_owner,
            access_type=access_type,
            delete_completed_jobs=delete_completed,
        )
    emit(ctx, result, f"✓ Workflow {workflow_name} created. Key: {result.get('workflowKey', '')}")


@workflows.group("list")
def list_group():
    """List workflows."""
    pass


@list_group.command("active-workflows")
@click.option("--workflow-name", "--wn", help="Workflow name filter")
@click.option("--category", "--cat", help="Category filter")
@click.option("--system", "--sys", help="System filter")
@click.option("--owner", "--ow", help="Owner filter")
@click.option("--vendor", "--vd", help="Vendor filter")
@click.option("--status-name", "--sn", help="Status filter, e.g. in-progress")
@click.pass_context
@handle_errors
def list_active_workflows(ctx, workflow_name, category, system, owner, vendor, status_name):
    """List workflow instances."""
    with get_client(ctx) as client:
        found = Workflows(client).list(
            workflow_name=workflow_name, category=category, system=system, owner=owner,
            vendor=vendor, status_name=status_name,
        )
    if is_json(ctx):
        emit(ctx, found)
        return
    print_table(
        "Workflows",
        ["Name", "Key", "Owner", "System", "Status"],
        ((w.get("workflowName"), w.get("workflowKey"), w.get("owner"), w.get("system"), w.get("statusName"))
         for w in found),
    )


@list_group.command("active-workflow-details")
@_key_options
@click.option("--list-steps", "--ls", is_flag=True, help="Include the workflow steps")
@click.option("--list-variables", "--lv", is_flag=True, help="Include the workflow variables")
@click.pass_context
@handle_errors
def list_active_workflow_details(ctx, workflow_key, workflow_name, list_steps, list_variables):
    """Show the properties of one workflow."""
    _check_key_options(workflow_key, workflow_name)
    with get_client(ctx) as client:
        api = Workflows(client)
        key = _resolve_key(api, workflow_key, workflow_name)
        props = api.properties(key, steps=list_steps, variables=list_variables)
    lines = [f"{k}: {props[k]}" for k in ("workflowName", "workflowKey", "statusName", "owner", "system")
             if k in props]
    for step in props.get("steps") or []:
        lines.append(f"  step {step.get('name')}: {step.get('state')}")
    emit(ctx, props, "\n".join(lines))


@list_group.command("archived-workflows")
@click.pass_context
@handle_errors
def list_archived_workflows(ctx):
    """List archived workflows."""
    with get_client(ctx) as client:
        archived = Workflows(client).list_archived()
    if is_json(ctx):
        emit(ctx, archived)
        return
    print_table(
        "Archived workflows",
        ["Name", "Key", "Archived"],
        ((w.get("workflowName"), w.get("workflowKey"), w.get("archivedInstanceURI")) for w in archived),
    )


@workflows.group()
def start():
    """Start workflows and workflow steps."""
    pass


def _start_options(func):
    func = click.option("--wait", "-w", is_flag=True, help="Wait for the workflow to complete")(func)
    func = click.option(
        "--resolve-conflict-by", "--rcb", type=click.Choice(RESOLVE_CONFLICT_OPTIONS), default="outputFileValue",
        show_default=True, help="How to resolve variable conflicts",
    )(func)
    return func


@start.command("workflow-full")
@_key_options
@_start_options
@click.pass_context
@handle_errors
def start_workflow_full(ctx, workflow_key, workflow_name, resolve_conflict_by, wait):
    """Run every automated step of a workflow."""
    _check_key_options(workflow_key, workflow_name)
    with get_client(ctx) as client:
        api = Workflows(client)
        key = _resolve_key(api, workflow_key, workflow_name)
        api.start(key, resolve_conflict_by=resolve_conflict_by)
        if wait:
            api.wait_for_completion(key)
    message = f"✓ Workflow {key} completed." if wait else f"✓ Workflow {key} started."
    emit(ctx, {"success": True, "workflowKey": key}, message)


@start.command("workflow-step")
@click.argument("step_name")
@_key_options
@_start_options
@click.option("--perform-following-steps", "--pfs", is_flag=True, help="Continue with the following steps")
@click.pass_context
@handle_errors
def start_workflow_step(ctx, step_name, workflow_key, workflow_name, resolve_conflict_by, wait,
                        perform_following_steps):
    """Run one step of a workflow, optionally followed by the rest."""
    if not step_name.strip():
        raise ValidationError("Missing Positional Argument: stepName")
    _check_key_options(workflow_key, workflow_name)
    with get_client(ctx) as client:
        api = Workflows(client)
        key = _resolve_key(api, workflow_key, workflow_name)
        api.start(key, step_name=step_name, resolve_conflict_by=resolve_conflict_by,
                  perform_following_steps=perform_following_steps)
        if wait:
            api.wait_for_completion(key)
    emit(ctx, {"success": True, "workflowKey": key, "stepName": step_name},
         f"✓ Step {step_name} of workflow {key} started.")


@workflows.group()
def delete():
    """Delete workflows."""
    pass


@delete.command("active-workflow")
@_key_options
@click.pass_context
@handle_errors
def delete_active_workflow(ctx, workflow_key, workflow_name):
    """Delete a workflow instance."""
    _check_key_options(workflow_key, workflow_name)
    with get_client(ctx) as client:
        api = Workflows(client)
        key = _resolve_key(api, workflow_key, workflow_name)
        api.delete(key)
    emit(ctx, {"success": True, "workflowKey": key}, f"✓ Workflow {key} deleted.")


@workflows.group()
def archive():
    """Archive workflows."""
    pass


@archive.command("active-workflow")
@_key_options
@click.pass_context
@handle_errors
def archive_active_workflow(ctx, workflow_key, workflow_name):
    """Archive a workflow instance."""
    _check_key_options(workflow_key, workflow_name)
    with get_client(ctx) as client:
        api = Workflows(client)
        key = _resolve_key(api, workflow_key, workflow_name)
        result = api.archive(key)
    emit(ctx, result, f"✓ Workflow {key} archived.")
