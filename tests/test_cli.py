import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from zowekit import __version__, extenders
from zowekit.cli.main import cli
from zowekit.config import get_config

JOBS = "/zosmf/restjobs/jobs"
JOB = {"jobid": "JOB00123", "jobname": "IEFBR14", "owner": "IBMUSER", "status": "OUTPUT", "retcode": "CC 0000"}


@pytest.fixture
def run(zosmf):
    runner = CliRunner()

    def invoke(*args, **kwargs):
        return runner.invoke(cli, list(args), obj={"TRANSPORT": zosmf.transport}, **kwargs)

    return invoke


def test_version(run) -> None:
    result = run("version")

    assert result.exit_code == 0
    assert result.output.strip() == f"zowekit v{__version__}"


def test_missing_host_is_reported(run) -> None:
    result = run("zos-jobs", "list", "jobs")

    assert result.exit_code == 1
    assert "✗ Error: No z/OSMF host configured" in result.output


# zos-files

def test_create_data_set_through_aliases(run, zosmf, cli_env) -> None:
    zosmf.add("POST", "/zosmf/restfiles/ds/IBMUSER.TEST.PDS", status=201)

    result = run("files", "create", "pds", "IBMUSER.TEST.PDS", "--size", "5CYL", "--rf", "FB")

    assert result.exit_code == 0, result.output
    assert "Data set created successfully." in result.output
    body = zosmf.body(zosmf.last("POST"))
    assert body["primary"] == 5
    assert body["alcunit"] == "CYL"
    assert zosmf.last().headers["Authorization"].startswith("Basic ")


def test_root_options_override_connection(run, zosmf, cli_env) -> None:
    zosmf.add("POST", "/zosmf/restfiles/ds/IBMUSER.TEST.PDS", status=201)

    result = run("--host", "lpar2.example.com", "--port", "10443", "files", "create", "pds", "IBMUSER.TEST.PDS")

    assert result.exit_code == 0, result.output
    assert zosmf.last().url.host == "lpar2.example.com"
    assert zosmf.last().url.port == 10443


def test_delete_requires_for_sure(run, zosmf, cli_env) -> None:
    result = run("zos-files", "delete", "data-set", "IBMUSER.OLD")

    assert result.exit_code == 2
    assert "--for-sure" in result.output
    assert zosmf.requests == []


def test_delete_data_set(run, zosmf, cli_env) -> None:
    zosmf.add("DELETE", "/zosmf/restfiles/ds/IBMUSER.OLD", status=204)

    result = run("zos-files", "delete", "data-set", "IBMUSER.OLD", "-f")

    assert result.exit_code == 0, result.output
    assert "Data set deleted successfully." in result.output


def test_json_output(run, zosmf, cli_env) -> None:
    zosmf.add("GET", "/zosmf/restfiles/ds", json_body={"items": [{"dsname": "IBMUSER.A"}], "returnedRows": 1})

    result = run("--json", "files", "list", "data-set", "IBMUSER.*")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["success"] is True
    assert payload["apiResponse"]["items"] == [{"dsname": "IBMUSER.A"}]


def test_zosmf_errors_are_reported(run, zosmf, cli_env, tmp_path: Path) -> None:
    zosmf.add("GET", "/zosmf/restfiles/ds/IBMUSER.MISSING", status=404, json_body={
        "message": "Data set not found", "rc": 4, "reason": 8,
    })

    target = tmp_path / "out.txt"

    result = run("zos-files", "download", "data-set", "IBMUSER.MISSING", "-f", str(target))

    assert result.exit_code == 1
    assert "✗ Error: 404 Not Found: Data set not found" in result.output
    assert not target.exists()


def test_unmount_fs(run, zosmf, cli_env) -> None:
    zosmf.add("PUT", "/zosmf/restfiles/mfs/IBMUSER.ZFS", status=204)

    result = run("zos-files", "unmount", "fs", "IBMUSER.ZFS")

    assert result.exit_code == 0, result.output
    assert "File system unmounted successfully." in result.output
    assert zosmf.body(zosmf.last("PUT")) == {"action": "unmount"}


def test_unmount_fs_requires_file_system_name(run, zosmf, cli_env) -> None:
    missing = run("zos-files", "unmount", "fs")
    blank = run("zos-files", "unmount", "fs", " ")

    assert missing.exit_code == 2
    assert "Missing argument 'FILE_SYSTEM_NAME'" in missing.output
    assert blank.exit_code == 1
    assert "✗ Error: Expect Error: Specify the file system name." in blank.output
    assert zosmf.requests == []


# zos-jobs

def test_list_jobs_table(run, zosmf, cli_env) -> None:
    zosmf.add("GET", JOBS, json_body=[JOB])

    result = run("jobs", "list", "jobs", "--owner", "IBMUSER")

    assert result.exit_code == 0, result.output
    assert "JOB00123" in result.output
    assert "IEFBR14" in result.output


def test_list_jobs_empty(run, zosmf, cli_env) -> None:
    zosmf.add("GET", JOBS, json_body=[])

    result = run("jobs", "list", "jobs")

    assert result.exit_code == 0
    assert "No jobs found" in result.output


def test_view_unknown_job(run, zosmf, cli_env) -> None:
    zosmf.add("GET", JOBS, json_body=[])

    result = run("zos-jobs", "view", "job-status-by-jobid", "JOB00999")

    assert result.exit_code == 1
    assert "✗ Error: Job not found: JOB00999" in result.output


def test_submit_local_file_and_wait(run, zosmf, cli_env, tmp_path: Path) -> None:
    jcl = tmp_path / "iefbr14.jcl"
    jcl.write_text("//IEFBR14 JOB\n//S1 EXEC PGM=IEFBR14\n")
    zosmf.add("PUT", JOBS, status=201, json_body={**JOB, "status": "INPUT", "retcode": None})
    zosmf.add("GET", f"{JOBS}/IEFBR14/JOB00123", json_body=JOB)

    result = run("--json", "jobs", "submit", "local-file", str(jcl), "--wfo")

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["status"] == "OUTPUT"
    assert payload["retcode"] == "CC 0000"


def test_cancel_job(run, zosmf, cli_env) -> None:
    zosmf.add("GET", JOBS, json_body=[JOB])
    zosmf.add("PUT", f"{JOBS}/IEFBR14/JOB00123", json_body={"jobid": "JOB00123", "status": 0})

    result = run("jobs", "cancel", "job", "JOB00123")

    assert result.exit_code == 0, result.output
    assert "✓ Successfully cancelled job IEFBR14 (JOB00123)" in result.output


# zos-tso / zos-console

def test_tso_issue_command(run, zosmf, cli_env) -> None:
    key = "IBMUSER-1-aaa"
    zosmf.add("POST", "/zosmf/tsoApp/tso", json_body={
        "servletKey": key, "tsoData": [{"TSO PROMPT": {"VERSION": "0100"}}],
    })
    zosmf.add("PUT", f"/zosmf/tsoApp/tso/{key}", json_body={
        "servletKey": key,
        "tsoData": [{"TSO MESSAGE": {"DATA": "IKJ56650I TIME-10:00:00 AM"}}, {"TSO PROMPT": {"VERSION": "0100"}}],
    })
    zosmf.add("DELETE", f"/zosmf/tsoApp/tso/{key}", json_body={})

    result = run("tso", "issue", "command", "TIME", "--account", "ACCT#")

    assert result.exit_code == 0, result.output
    assert result.output.strip() == "IKJ56650I TIME-10:00:00 AM"


def test_tso_requires_account(run, cli_env) -> None:
    result = run("tso", "issue", "command", "TIME")

    assert result.exit_code == 2
    assert "--account" in result.output


def test_console_issue_command(run, zosmf, cli_env) -> None:
    zosmf.add("PUT", "/zosmf/restconsoles/consoles/defcn", json_body={"cmd-response": "IEE254I IPLINFO\r"})

    result = run("console", "issue", "command", "D IPLINFO", "--sn", "SYS1")

    assert result.exit_code == 0, result.output
    assert "IEE254I IPLINFO" in result.output
    assert zosmf.body(zosmf.last("PUT")) == {"cmd": "D IPLINFO", "system": "SYS1"}


# provisioning / workflows

def test_provision_template(run, zosmf, cli_env) -> None:
    zosmf.add("POST", "/zosmf/provisioning/rest/1.0/psc/cics/actions/run", json_body={
        "registry-info": {"object-id": "OBJ1", "external-name": "CICS_1"},
    })

    result = run("pv", "provision", "template", "cics", "-p", "REGION=A1")

    assert result.exit_code == 0, result.output
    assert "Instance: CICS_1 (OBJ1)" in result.output


@pytest.mark.parametrize(
    "options, message",
    [
        (["--workflow-key", "K1", "--workflow-name", "wf1"],
         "The following options conflict (mutually exclusive):\n--workflow-key\n--workflow-name"),
        ([], "You must specify one of these options:\n--workflow-key\n--workflow-name"),
    ],
)
def test_workflow_key_options(run, zosmf, cli_env, options, message) -> None:
    result = run("wf", "start", "workflow-full", *options)

    assert result.exit_code == 1
    assert message in result.output
    assert zosmf.requests == []


def test_start_workflow_step_requires_step_name(run, zosmf, cli_env) -> None:
    result = run("zos-workflows", "start", "workflow-step", "", "--wk", "K1")

    assert result.exit_code == 1
    assert "✗ Error: Missing Positional Argument: stepName" in result.output
    assert zosmf.requests == []


def test_start_workflow_by_name(run, zosmf, cli_env) -> None:
    wf = "/zosmf/workflow/rest/1.0/workflows"
    zosmf.add("GET", wf, json_body={"workflows": [{"workflowName": "wf1", "workflowKey": "K1"}]})
    zosmf.add("PUT", f"{wf}/K1/operations/start", status=202)

    result = run("zos-workflows", "start", "workflow-full", "--wn", "wf1")

    assert result.exit_code == 0, result.output
    assert "✓ Workflow K1 started." in result.output


# config / plugins / events / docs

def test_config_list_and_set(run, zowe_home: Path) -> None:
    path = zowe_home / "cli" / "zowe.config.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({
        "profiles": {"lpar1": {"type": "zosmf", "properties": {"host": "lpar1"}}},
        "defaults": {"zosmf": "lpar1"},
    }))

    result = run("config", "set", "lpar1", "port", "443")
    assert result.exit_code == 0, result.output
    assert "✓ Set port on profile lpar1" in result.output
    assert json.loads(path.read_text())["profiles"]["lpar1"]["properties"]["port"] == 443

    listed = run("--json", "config", "list")
    assert listed.exit_code == 0, listed.output
    assert json.loads(listed.output)["lpar1"] == {"type": "zosmf", "default": True, "properties": ["host", "port"]}


@pytest.mark.parametrize("value, stored", [("no", "no"), ("on", "on"), ("true", True), ("1.5", 1.5), ("IBMUSER", "IBMUSER")])
def test_config_set_keeps_words_as_text(run, zowe_home: Path, value, stored) -> None:
    path = zowe_home / "cli" / "zowe.config.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"profiles": {"lpar1": {"type": "zosmf", "properties": {}}}}))

    result = run("config", "set", "lpar1", "user", value)

    assert result.exit_code == 0, result.output
    assert json.loads(path.read_text())["profiles"]["lpar1"]["properties"]["user"] == stored


def test_config_set_unknown_profile(run) -> None:
    result = run("config", "set", "nope", "port", "443")

    assert result.exit_code == 1
    assert "✗ Error: Profile not found: nope" in result.output


def test_plugins_list_without_plugins(run) -> None:
    result = run("--json", "plugins", "list")

    assert result.exit_code == 0
    assert json.loads(result.output) == []


def test_events_apps_and_emit(run) -> None:
    extenders.add_profile_type("zftp", "@zowe/zos-ftp-for-zowe-cli")

    apps = run("events", "apps")
    emitted = run("events", "emit", "onSaved", "--app", "zftp")

    assert apps.output.split() == ["Zowe", "zftp"]
    assert emitted.exit_code == 0, emitted.output
    assert "✓ Emitted onSaved for zftp" in emitted.output
    record = json.loads((get_config().shared_events_dir / "zftp" / "onSaved").read_text())
    assert record["eventType"] == "CustomSharedEvent"


def test_emit_zowe_event(run) -> None:
    result = run("events", "emit", "onCredentialManagerChanged")

    assert result.exit_code == 0, result.output
    assert (get_config().shared_events_dir / "Zowe" / "onCredentialManagerChanged").exists()


def test_emit_for_unknown_app(run) -> None:
    result = run("events", "emit", "onSaved", "--app", "nope")

    assert result.exit_code == 1
    assert "✗ Error: Application name not found: nope" in result.output


def test_watch_times_out(run) -> None:
    result = run("events", "watch", "onCredentialManagerChanged", "--timeout", "0.2")

    assert result.exit_code == 1
    assert "No onCredentialManagerChanged event within 0.2 seconds" in result.output


def test_docs_generate(run, tmp_path: Path) -> None:
    target = tmp_path / "cmd_docs"

    result = run("docs", "generate", "-o", str(target))

    assert result.exit_code == 0, result.output
    assert "✓ Generated documentation pages for" in result.output
    assert (target / "cli_root_help.html").exists()
    assert (target / "zos-files_create_data-set-partitioned.html").exists()
    assert (target / "zos-jobs_submit_local-file.html").exists()
    tree = (target / "tree-nodes.js").read_text()
    assert '"files": [\n    "zos-files"\n  ]' in tree
