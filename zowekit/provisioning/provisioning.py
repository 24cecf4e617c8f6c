"""
z/OSMF cloud provisioning: published software templates (PSC) and the
registry of provisioned instances (SCR).
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from zowekit.base import ZosmfApi
from zowekit.errors import EXPECT_PREFIX, ValidationError, ZosmfNotFoundError, expect_non_blank

RESOURCE = "/zosmf/provisioning/rest/1.0"
RES_PSC = "/psc"
RES_SCR = "/scr"

MISSING_TEMPLATE = "Specify the name of the provisioning template."
MISSING_INSTANCE_ID = "Specify the provisioned instance ID."
MISSING_ACTION = "Specify the action name."
MISSING_INSTANCE_NAME = "Specify the provisioned instance name."


def parse_properties(properties: Union[str, Mapping[str, Any], None]) -> Dict[str, str]:
    """Accept ``{"a": 1}`` or ``"a=1,b=2"`` and return a flat name/value dict."""
    if not properties:
        return {}
    if isinstance(properties, Mapping):
        return {str(k): str(v) for k, v in properties.items()}
    parsed: Dict[str, str] = {}
    for pair in str(properties).split(","):
        if not pair.strip():
            continue
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ValidationError(f"{EXPECT_PREFIX}Invalid property '{pair.strip()}'. Use name=value.")
        parsed[name.strip()] = value.strip()
    return parsed


def read_properties_file(path: str) -> Dict[str, str]:
    """
    Read runtime properties from a YAML file.

    Both a mapping (``name: value``) and a list of ``{name, value}`` entries
    are accepted.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ValidationError(f"{EXPECT_PREFIX}Properties file not found: {path}")
    data = yaml.safe_load(file_path.read_text()) or {}
    if isinstance(data, list):
        return {str(item["name"]): str(item.get("value", "")) for item in data}
    if isinstance(data, dict):
        return {str(k): str(v) for k, v in data.items()}
    raise ValidationError(f"{EXPECT_PREFIX}Unsupported properties file format: {path}")


class Provisioning(ZosmfApi):
    """
    Provisioning operations.

    Example:
        api = Provisioning(client)
        result = api.provision("cics_template", properties="CICS_REGION=A1")
        instance_id = result["registry-info"]["object-id"]
    """

    # Templates
    def list_templates(self) -> List[Dict[str, Any]]:
        data = self.client.get_expect_json(f"{RESOURCE}{RES_PSC}") or {}
        return data.get("psc-list", [])

    def get_template(self, template_name: str) -> Dict[str, Any]:
        expect_non_blank(template_name, MISSING_TEMPLATE)
        return self.client.get_expect_json(f"{RESOURCE}{RES_PSC}/{template_name.strip()}") or {}

    def provision(
        self,
        template_name: str,
        *,
        properties: Union[str, Mapping[str, Any], None] = None,
        properties_file: Optional[str] = None,
        system: Optional[str] = None,
        account: Optional[str] = None,
        owner: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Run a published template; explicit properties win over the file."""
        expect_non_blank(template_name, MISSING_TEMPLATE)
        variables = read_properties_file(properties_file) if properties_file else {}
        variables.update(parse_properties(properties))

        body: Dict[str, Any] = {}
        if variables:
            body["input-variables"] = [{"name": k, "value": v} for k, v in variables.items()]
        if system:
            body["systems-nicknames"] = [system]
        if account:
            body["account-info"] = account
        if owner:
            body["user-data-id"] = owner
        self.logger.info("template_provision", extra=self.log_extra(template=template_name, system=system))
        return self.client.post_expect_json(
            f"{RESOURCE}{RES_PSC}/{template_name.strip()}/actions/run", json_body=body
        ) or {}

    # Instances
    def list_instances(
        self,
        instance_type: Optional[str] = None,
        external_name: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        data = self.client.get_expect_json(
            f"{RESOURCE}{RES_SCR}", params={"type": instance_type, "external-name": external_name}
        ) or {}
        return data.get("scr-list", [])

    def get_instance(self, instance_id: str) -> Dict[str, Any]:
        expect_non_blank(instance_id, MISSING_INSTANCE_ID)
        return self.client.get_expect_json(f"{RESOURCE}{RES_SCR}/{instance_id}") or {}

    def get_instance_variables(self, instance_id: str) -> List[Dict[str, Any]]:
        expect_non_blank(instance_id, MISSING_INSTANCE_ID)
        data = self.client.get_expect_json(f"{RESOURCE}{RES_SCR}/{instance_id}/variables") or {}
        return data.get("variables", [])

    def perform_action(self, instance_id: str, action_name: str) -> Dict[str, Any]:
        expect_non_blank(instance_id, MISSING_INSTANCE_ID)
        expect_non_blank(action_name, MISSING_ACTION)
        self.logger.info("instance_action", extra=self.log_extra(instance_id=instance_id, action=action_name))
        return self.client.post_expect_json(
            f"{RESOURCE}{RES_SCR}/{instance_id}/actions/{action_name.strip()}"
        ) or {}

    def delete_instance(self, instance_id: str) -> None:
        expect_non_blank(instance_id, MISSING_INSTANCE_ID)
        self.logger.info("instance_delete", extra=self.log_extra(instance_id=instance_id))
        self.client.delete_expect_text(f"{RESOURCE}{RES_SCR}/{instance_id}")

    def find_instance_id(self, external_name: str) -> str:
        """Resolve an instance's external name to its object ID."""
        expect_non_blank(external_name, MISSING_INSTANCE_NAME)
        matches = [
            item for item in self.list_instances(external_name=external_name)
            if item.get("external-name") == external_name
        ]
        if not matches:
            raise ZosmfNotFoundError(f"Provisioned instance not found: {external_name}", status_code=404)
        return matches[0]["object-id"]
