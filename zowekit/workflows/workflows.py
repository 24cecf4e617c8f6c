"""
z/OSMF workflows: create from a definition file, inspect, run, archive.
"""

import time
from typing import Any, Dict, List, Mapping, Optional

from zowekit.base import ZosmfApi
from zowekit.config import get_config
from zowekit.errors import (
    EXPECT_PREFIX,
    JobTimeoutError,
    ValidationError,
    ZoweError,
    ZosmfNotFoundError,
    expect_non_blank,
)

RESOURCE = "/zosmf/workflow/rest/1.0"
RES_WORKFLOWS = "/workflows"
RES_ARCHIVED = "/archivedworkflows"

RESOLVE_CONFLICT_OPTIONS = ("outputFileValue", "existingValue", "leaveConflict")
ACCESS_TYPES = ("Public", "Restricted", "Private")
STATUS_COMPLETE = "complete"
STATUS_CANCELED = "canceled"

MISSING_WORKFLOW_KEY = "Specify the workflow key."
MISSING_WORKFLOW_NAME = "Specify the workflow name."
MISSING_DEFINITION_FILE = "Specify the workflow definition file."
MISSING_SYSTEM = "Specify the system name."
MISSING_OWNER = "Specify the workflow owner."
MISSING_STEP_NAME = "Specify the workflow step name."


class Workflows(ZosmfApi):
    """
    Workflow operations.

    Example:
        api = Workflows(client)
        key = api.create("wf1", "/u/ibmuser/wf.xml", "SYS1", "ibmuser")["workflowKey"]
        api.start(key)
        api.wait_for_completion(key)
    """

    def _workflow_path(self, key: str) -> str:
        expect_non_blank(key, MISSING_WORKFLOW_KEY)
        return f"{RESOURCE}{RES_WORKFLOWS}/{key.strip()}"

    def create(
        self,
        name: str,
        definition_file: str,
        system: str,
        owner: str,
        *,
        variables_input_file: Optional[str] = None,
        variables: Optional[Mapping[str, Any]] = None,
        assign_to_owner: bool = True,
        access_type: str = "Public",
        delete_completed_jobs: bool = False,
        comments: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a workflow instance from a definition in a data set or USS file."""
        expect_non_blank(name, MISSING_WORKFLOW_NAME)
        expect_non_blank(definition_file, MISSING_DEFINITION_FILE)
        expect_non_blank(system, MISSING_SYSTEM)
        expect_non_blank(owner, MISSING_OWNER)
        if access_type not in ACCESS_TYPES:
            raise ValidationError(
                f"{EXPECT_PREFIX}Access type must be one of: {', '.join(ACCESS_TYPES)}."
            )
        body: Dict[str, Any] = {
            "workflowName": name,
            "workflowDefinitionFile": definition_file,
            "system": system,
            "owner": owner,
            "assignToOwner": assign_to_owner,
            "accessType": access_type,
            "deleteCompletedJobs": delete_completed_jobs,
        }
        if variables_input_file:
            body["variableInputFile"] = variables_input_file
        if variables:
            body["variables"] = [{"name": k, "value": str(v)} for k, v in variables.items()]
        if comments:
            body["comments"] = comments
        self.logger.info("workflow_create", extra=self.log_extra(workflow=name, system=system))
        return self.client.post_expect_json(f"{RESOURCE}{RES_WORKFLOWS}", json_body=body) or {}

    def list(
        self,
        *,
        workflow_name: Optional[str] = None,
        category: Optional[str] = None,
        system: Optional[str] = None,
        owner: Optional[str] = None,
        vendor: Optional[str] = None,
        status_name: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {
            "workflowName": workflow_name,
            "category": category,
            "system": system,
            "owner": owner,
            "vendor": vendor,
            "statusName": status_name,
        }
        data = self.client.get_expect_json(f"{RESOURCE}{RES_WORKFLOWS}", params=params) or {}
        return data.get("workflows", [])

    def get_key_by_name(self, name: str) -> str:
        """Resolve a workflow name to its key; names are unique per z/OSMF instance."""
        expect_non_blank(name, MISSING_WORKFLOW_NAME)
        for workflow in self.list(workflow_name=name):
            if workflow.get("workflowName") == name:
                return workflow["workflowKey"]
        raise ZosmfNotFoundError(f"No workflows match the provided workflow name: {name}", status_code=404)

    def properties(self, key: str, *, steps: bool = False, variables: bool = False) -> Dict[str, Any]:
        return_data = [part for part, wanted in (("steps", steps), ("variables", variables)) if wanted]
        params = {"returnData": ",".join(return_data)} if return_data else None
        return self.client.get_expect_json(self._workflow_path(key), params=params) or {}

    def start(
        self,
        key: str,
        step_name: Optional[str] = None,
        resolve_conflict_by: str = "outputFileValue",
        perform_following_steps: bool = False,
    ) -> None:
        """Start the whole workflow, or one step (optionally followed by the rest)."""
        path = self._workflow_path(key)
        if resolve_conflict_by not in RESOLVE_CONFLICT_OPTIONS:
            raise ValidationError(
                f"{EXPECT_PREFIX}Resolve conflict option must be one of: {', '.join(RESOLVE_CONFLICT_OPTIONS)}."
            )
        body: Dict[str, Any] = {"resolveConflictByUsing": resolve_conflict_by}
        if step_name is not None:
            expect_non_blank(step_name, MISSING_STEP_NAME)
            body["stepName"] = step_name
            body["performSubsequent"] = perform_following_steps
        self.logger.info("workflow_start", extra=self.log_extra(workflow_key=key, step=step_name))
        self.client.put_expect_text(f"{path}/operations/start", json_body=body)

    def wait_for_completion(
        self,
        key: str,
        attempts: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Poll the workflow until it completes.

        Raises:
            ZoweError: The workflow was canceled
            JobTimeoutError: The workflow did not complete in time
        """
        config = get_config()
        attempts = config.job_wait_attempts if attempts is None else attempts
        interval = config.job_poll_interval if interval is None else interval
        props: Dict[str, Any] = {}
        for attempt in range(max(attempts, 1)):
            props = self.properties(key)
            status = props.get("statusName")
            if status == STATUS_COMPLETE:
                return props
            if status == STATUS_CANCELED:
                raise ZoweError(f"Workflow {key} was canceled", metadata={"workflow_key": key}, retryable=False)
            if attempt + 1 < attempts:
                time.sleep(interval)
        raise JobTimeoutError(
            f"Workflow {key} did not complete after {attempts} attempts (last status: {props.get('statusName')})",
            metadata={"workflow_key": key},
        )

    def delete(self, key: str) -> None:
        self.logger.info("workflow_delete", extra=self.log_extra(workflow_key=key))
        self.client.delete_expect_text(self._workflow_path(key))

    def archive(self, key: str) -> Dict[str, Any]:
        self.logger.info("workflow_archive", extra=self.log_extra(workflow_key=key))
        return self.client.post_expect_json(f"{self._workflow_path(key)}/operations/archive") or {}

    def list_archived(self) -> List[Dict[str, Any]]:
        data = self.client.get_expect_json(f"{RESOURCE}{RES_ARCHIVED}") or {}
        return data.get("archivedWorkflows", [])
