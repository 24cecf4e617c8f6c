"""provisioning commands: templates and provisioned instances."""

import click

from zowekit.cli.common import emit, get_client, handle_errors, is_json, print_table
from zowekit.provisioning import Provisioning


@click.group("provisioning")
def provisioning():
    """Provision z/OS middleware from published templates."""
    pass


@provisioning.group("list")
def list_group():
    """List templates and provisioned instances."""
    pass


@list_group.command("catalog-templates")
@click.pass_context
@handle_errors
def list_catalog_templates(ctx):
    """List the published software templates."""
    with get_client(ctx) as client:
        templates = Provisioning(client).list_templates()
    if is_json(ctx):
        emit(ctx, templates)
        return
    print_table(
        "Templates",
        ["Name", "Version", "Owner", "State", "Description"],
        ((t.get("name"), t.get("version"), t.get("owner"), t.get("state"), t.get("description")) for t in templates),
    )


@list_group.command("template-info")
@click.argument("template_name")
@click.pass_context
@handle_errors
def list_template_info(ctx, template_name):
    """Show the details of a published template."""
    with get_client(ctx) as client:
        info = Provisioning(client).get_template(template_name)
    emit(ctx, info, "\n".join(f"{k}: {v}" for k, v in info.items()))


@list_group.command("registry-instances")
@click.option("--type", "-t", "instance_type", help="Instance type, e.g. CICS")
@click.option("--external-name", "--en", help="Instance external name")
@click.pass_context
@handle_errors
def list_registry_instances(ctx, instance_type, external_name):
    """List provisioned instances in the registry."""
    with get_client(ctx) as client:
        instances = Provisioning(client).list_instances(instance_type, external_name)
    if is_json(ctx):
        emit(ctx, instances)
        return
    print_table(
        "Instances",
        ["Object ID", "External name", "Type", "State", "System"],
        ((i.get("object-id"), i.get("external-name"), i.get("type"), i.get("state"), i.get("system"))
         for i in instances),
    )


@list_group.command("instance-variables")
@click.argument("name")
@click.pass_context
@handle_errors
def list_instance_variables(ctx, name):
    """List the variables of a provisioned instance."""
    with get_client(ctx) as client:
        api = Provisioning(client)
        variables = api.get_instance_variables(api.find_instance_id(name))
    emit(ctx, variables, "\n".join(f"{v.get('name')}: {v.get('value')}" for v in variables))


@provisioning.group("provision")
def provision_group():
    """Provision instances."""
    pass


@provision_group.command("template")
@click.argument("template_name")
@click.option("--properties", "-p", help="Runtime properties, e.g. name1=value1,name2=value2")
@click.option("--properties-file", "--pf", type=click.Path(exists=True, dir_okay=False),
              help="YAML file with runtime properties")
@click.option("--system-nick-names", "--snn", help="System nickname to provision on")
@click.option("--account-info", "--ai", help="Account information for the provisioning jobs")
@click.option("--user-data-id", "--udi", help="Owner of the instance")
@click.pass_context
@handle_errors
def provision_template(ctx, template_name, properties, properties_file, system_nick_names, account_info,
                       user_data_id):
    """Provision an instance from a published template."""
    with get_client(ctx) as client:
        result = Provisioning(client).provision(
            template_name,
            properties=properties,
            properties_file=properties_file,
            system=system_nick_names,
            account=account_info,
            owner=user_data_id,
        )
    registry = result.get("registry-info", {})
    emit(ctx, result,
         f"✓ Template {template_name} provisioned.\n"
         f"  Instance: {registry.get('external-name', '')} ({registry.get('object-id', '')})")


@provisioning.group("perform")
def perform_group():
    """Perform actions on provisioned instances."""
    pass


@perform_group.command("action")
@click.argument("name")
@click.argument("action_name")
@click.pass_context
@handle_errors
def perform_action(ctx, name, action_name):
    """Perform an action on a provisioned instance, by external name."""
    with get_client(ctx) as client:
        api = Provisioning(client)
        result = api.perform_action(api.find_instance_id(name), action_name)
    emit(ctx, result, f"✓ Action {action_name} started on {name}. Action ID: {result.get('action-id', '')}")


@provisioning.group("delete")
def delete_group():
    """Delete provisioned instances."""
    pass


@delete_group.command("instance")
@click.argument("name")
@click.pass_context
@handle_errors
def delete_instance(ctx, name):
    """Remove a deprovisioned instance from the registry."""
    with get_client(ctx) as client:
        api = Provisioning(client)
        instance_id = api.find_instance_id(name)
        api.delete_instance(instance_id)
    emit(ctx, {"success": True, "objectId": instance_id}, f"✓ Instance {name} deleted")
