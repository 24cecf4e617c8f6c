from pathlib import Path

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from zowekit.errors import ValidationError
from zowekit.zosfiles import Invoke, List, Mount, Tag, Unmount, Utilities, UssListOptions, ZosFilesResponse
from zowekit.zosfiles.invoke import read_statements
from zowekit.zosfiles.utils import (
    data_set_endpoint,
    data_set_local_file,
    extension_for,
    get_dirs_from_data_set,
    normalize_extension,
    split_member,
    uss_endpoint,
)

DS = "/zosmf/restfiles/ds"
FS = "/zosmf/restfiles/fs"


# List

def test_list_data_sets(client, zosmf) -> None:
    zosmf.add("GET", DS, json_body={"items": [{"dsname": "IBMUSER.A"}], "returnedRows": 1})

    response = List(client).data_sets("IBMUSER.*", attributes=True, max_length=50, volume="VOL001")

    request = zosmf.last("GET")
    assert request.url.params["dslevel"] == "IBMUSER.*"
    assert request.url.params["volser"] == "VOL001"
    assert request.headers["X-IBM-Attributes"] == "base"
    assert request.headers["X-IBM-Max-Items"] == "50"
    assert response.api_response["items"][0]["dsname"] == "IBMUSER.A"


def test_list_members_with_pattern(client, zosmf) -> None:
    zosmf.add("GET", f"{DS}/IBMUSER.PDS/member", json_body={"items": [{"member": "M1"}]})

    response = List(client).all_members("IBMUSER.PDS", pattern="M*")

    assert zosmf.last().url.params["pattern"] == "M*"
    assert "X-IBM-Attributes" not in zosmf.last().headers
    assert response.command_response == "Member list returned successfully."


def test_list_uss_files_reports_symlinks(client, zosmf) -> None:
    zosmf.add("GET", FS, json_body={"items": []})

    List(client).uss_files("/u/ibmuser", UssListOptions(symlinks=True, name="*.txt"))

    params = zosmf.last().url.params
    assert params["symlinks"] == "report"
    assert params["name"] == "*.txt"
    assert "filesys" not in params


def test_list_file_systems(client, zosmf) -> None:
    zosmf.add("GET", "/zosmf/restfiles/mfs", json_body={"items": [{"name": "OMVS.ROOT"}]})

    response = List(client).file_systems(path="/u")

    assert zosmf.last().url.params["path"] == "/u"
    assert response.api_response["items"] == [{"name": "OMVS.ROOT"}]


def test_list_file_systems_rejects_name_and_path(client) -> None:
    with pytest.raises(ValidationError):
        List(client).file_systems(fsname="A", path="/u")


# Invoke

def test_invoke_ams_statements(client, zosmf) -> None:
    zosmf.add("PUT", "/zosmf/restfiles/ams", json_body={"output": ["IDC0001I FUNCTION COMPLETED"]})

    response = Invoke(client).ams(["DELETE (IBMUSER.VSAM) CLUSTER", "  "])

    assert zosmf.body(zosmf.last("PUT")) == {"input": ["DELETE (IBMUSER.VSAM) CLUSTER"]}
    assert response.command_response == "AMS command executed successfully."


def test_invoke_ams_from_file(client, zosmf, tmp_path: Path) -> None:
    zosmf.add("PUT", "/zosmf/restfiles/ams", json_body={})
    statements = tmp_path / "define.ams"
    statements.write_text("DEFINE CLUSTER -\n(NAME(IBMUSER.VSAM))\n\n")

    Invoke(client).ams(str(statements))

    assert zosmf.body(zosmf.last("PUT"))["input"] == ["DEFINE CLUSTER -", "(NAME(IBMUSER.VSAM))"]


@pytest.mark.parametrize("statements", [None, "", [], ["   "]])
def test_invoke_ams_requires_statements(client, statements) -> None:
    with pytest.raises(ValidationError, match="Expect Error: Missing AMS statements to be submitted."):
        Invoke(client).ams(statements)


def test_invoke_ams_rejects_long_statement(client) -> None:
    with pytest.raises(ValidationError, match="longer than 255 characters"):
        Invoke(client).ams(["X" * 256])


def test_read_statements_missing_file() -> None:
    with pytest.raises(ValidationError, match="Specify the input file path"):
        read_statements("no-such-file.ams")


# Mount

def test_mount_and_unmount(client, zosmf) -> None:
    zosmf.add("PUT", "/zosmf/restfiles/mfs/IBMUSER.ZFS", status=204)

    Mount(client).fs("IBMUSER.ZFS", "/u/ibmuser/mnt", fs_type="zfs", mode="RDWR")
    assert zosmf.body(zosmf.last("PUT")) == {
        "action": "mount", "mount-point": "/u/ibmuser/mnt", "fs-type": "ZFS", "mode": "rdwr",
    }

    response = Unmount(client).fs("IBMUSER.ZFS")
    assert zosmf.body(zosmf.last("PUT")) == {"action": "unmount"}
    assert response.command_response == "File system unmounted successfully."


def test_mount_validation(client) -> None:
    api = Mount(client)
    with pytest.raises(ValidationError, match="mount point"):
        api.fs("IBMUSER.ZFS", "")
    with pytest.raises(ValidationError, match="'XFS' is not supported"):
        api.fs("IBMUSER.ZFS", "/mnt", fs_type="xfs")
    with pytest.raises(ValidationError, match="rdonly"):
        api.fs("IBMUSER.ZFS", "/mnt", mode="rw")


# Utilities

def test_chtag_text_requires_codeset(client) -> None:
    with pytest.raises(ValidationError, match="codeset is required"):
        Utilities(client).chtag("/u/ibmuser/a.txt", Tag.TEXT)


def test_chtag_binary_rejects_codeset(client) -> None:
    with pytest.raises(ValidationError, match="cannot be specified for a binary file"):
        Utilities(client).chtag("/u/ibmuser/a.bin", "binary", "ISO8859-1")


def test_chtag_sets_tag(client, zosmf) -> None:
    zosmf.add("PUT", f"{FS}/u/ibmuser/a.txt", json_body={})

    Utilities(client).chtag("/u/ibmuser/a.txt", "mixed", "IBM-1047")

    assert zosmf.body(zosmf.last("PUT")) == {
        "request": "chtag", "action": "set", "type": "mixed", "codeset": "IBM-1047",
    }


@pytest.mark.parametrize(
    "stdout, expected",
    [
        (["t ISO8859-1   T=on  /u/a"], True),
        (["t UTF-8       T=on  /u/a"], True),
        (["t IBM-1047    T=on  /u/a"], False),
        (["b binary      T=off /u/a"], True),
        (["m IBM-1047    T=off /u/a"], False),
        ([], False),
    ],
)
def test_is_file_tagged_binary_or_ascii(client, zosmf, stdout, expected) -> None:
    zosmf.add("PUT", f"{FS}/u/a", json_body={"stdout": stdout})

    assert Utilities(client).is_file_tagged_binary_or_ascii("/u/a") is expected


# Local paths and endpoints

def test_split_member() -> None:
    assert split_member("USER.PDS(MEM)") == ("USER.PDS", "MEM")
    assert split_member(" USER.PS ") == ("USER.PS", None)


def test_get_dirs_from_data_set() -> None:
    assert get_dirs_from_data_set("USER.TEST.DATA") == "user/test/data"
    assert get_dirs_from_data_set("USER.PDS(MEM)") == "user/pds/mem"
    assert get_dirs_from_data_set("User.Data", preserve_case=True) == "User/Data"


def test_data_set_local_file() -> None:
    assert data_set_local_file("USER.PS") == Path("user/ps.txt")
    assert data_set_local_file("USER.PDS(MEM)", directory="out", extension="") == Path("out/mem")
    assert data_set_local_file("USER.PS", directory="out", preserve_case=True) == Path("out/USER.PS.txt")


def test_extension_resolution() -> None:
    assert normalize_extension(None) == ".txt"
    assert normalize_extension("jcl") == ".jcl"
    assert normalize_extension("") == ""
    assert extension_for("USER.CNTL(JOB)", "txt", {"CNTL": "jcl"}) == ".jcl"
    assert extension_for("USER.OTHER", "dat", {"cntl": "jcl"}) == ".dat"


def test_endpoints() -> None:
    assert data_set_endpoint("USER.PDS(MEM)") == "/zosmf/restfiles/ds/USER.PDS(MEM)"
    assert data_set_endpoint("USER.PS", "VOL1") == "/zosmf/restfiles/ds/-(VOL1)/USER.PS"
    assert uss_endpoint("/u/ibmuser/my file.txt") == "/zosmf/restfiles/fs/u/ibmuser/my%20file.txt"
    assert uss_endpoint("//u/./ibmuser/") == "/zosmf/restfiles/fs/u/ibmuser"


def test_response_to_dict() -> None:
    assert ZosFilesResponse(True, "ok", {"a": 1}).to_dict() == {
        "success": True, "commandResponse": "ok", "apiResponse": {"a": 1},
    }
    assert ZosFilesResponse(False, "", error_message="bad").to_dict()["errorMessage"] == "bad"


_QUALIFIER = st.from_regex(r"[A-Z#$@][A-Z0-9#$@]{0,7}", fullmatch=True)


@settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(qualifiers=st.lists(_QUALIFIER, min_size=1, max_size=5), member=st.one_of(st.none(), _QUALIFIER))
def test_dirs_from_data_set_mirror_qualifiers(qualifiers, member) -> None:
    name = ".".join(qualifiers) + (f"({member})" if member else "")

    parts = get_dirs_from_data_set(name).split("/")

    expected = [q.lower() for q in qualifiers] + ([member.lower()] if member else [])
    assert parts == expected
