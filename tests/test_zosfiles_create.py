import pytest

from zowekit.base import ZosmfApi
from zowekit.errors import ValidationError
from zowekit.zosfiles import Create, DataSetType, Delete, generate_zosmf_options
from zowekit.zosfiles.create import CREATE_DEFAULTS, parse_size, validate_create_options

DS_PATH = "/zosmf/restfiles/ds/IBMUSER.TEST.PDS"


def test_api_requires_a_client() -> None:
    with pytest.raises(ValidationError, match="Expect Error: Required object must be defined"):
        ZosmfApi(None)


def test_create_partitioned_uses_defaults(client, zosmf) -> None:
    zosmf.add("POST", DS_PATH, status=201)

    response = Create(client).data_set(DataSetType.PARTITIONED, "IBMUSER.TEST.PDS")

    assert response.success
    assert response.command_response == "Data set created successfully."
    assert zosmf.body(zosmf.last("POST", DS_PATH)) == CREATE_DEFAULTS[DataSetType.PARTITIONED]


def test_create_sequential_has_no_directory_blocks(client, zosmf) -> None:
    zosmf.add("POST", "/zosmf/restfiles/ds/IBMUSER.TEST.PS", status=201)

    Create(client).data_set("sequential", "IBMUSER.TEST.PS", {"dirblk": 10, "volser": "VOL001"})

    body = zosmf.body(zosmf.last("POST"))
    assert body["dsorg"] == "PS"
    assert "dirblk" not in body
    assert body["volser"] == "VOL001"


def test_create_options_override_defaults(client, zosmf) -> None:
    zosmf.add("POST", DS_PATH, status=201)

    Create(client).data_set(DataSetType.CLASSIC, "IBMUSER.TEST.PDS", {"primary": 20, "recfm": "fb", "lrecl": None})

    body = zosmf.body(zosmf.last("POST"))
    assert body["primary"] == 20
    assert body["recfm"] == "FB"
    assert body["dirblk"] == 25
    assert body["lrecl"] == 80


def test_create_requires_type_and_name(client) -> None:
    api = Create(client)
    with pytest.raises(ValidationError, match="Specify the data set type"):
        api.data_set(None, "IBMUSER.A")
    with pytest.raises(ValidationError, match="Invalid data set type"):
        api.data_set("vsam", "IBMUSER.A")
    with pytest.raises(ValidationError, match="Specify the input data set name"):
        api.data_set(DataSetType.BINARY, "  ")


@pytest.mark.parametrize(
    "options, message",
    [
        ({"dsorg": "XX"}, "Invalid data set organization"),
        ({"alcunit": "BLK"}, "Invalid allocation unit"),
        ({"primary": 0}, "primary space allocation"),
        ({"primary": 16777216}, "primary space allocation"),
        ({"secondary": -1}, "secondary space allocation"),
        ({"dirblk": 0}, "directory blocks"),
        ({"recfm": "ZZ"}, "Invalid record format"),
        ({"primary": "ten"}, "primary space allocation"),
        ({"secondary": "1CYL"}, "secondary space allocation"),
        ({"dirblk": "many"}, "directory blocks"),
        ({"lrecl": "eighty"}, "record length"),
        ({"blksize": "big"}, "block size"),
    ],
)
def test_validate_create_options_rejects(options, message) -> None:
    merged = {**CREATE_DEFAULTS[DataSetType.PARTITIONED], **options}

    with pytest.raises(ValidationError, match=message):
        validate_create_options(merged)


def test_library_needs_no_directory_blocks() -> None:
    opts = validate_create_options({**CREATE_DEFAULTS[DataSetType.PARTITIONED], "dirblk": 0, "dsntype": "LIBRARY"})

    assert opts["dsntype"] == "LIBRARY"


def test_missing_record_length() -> None:
    opts = dict(CREATE_DEFAULTS[DataSetType.SEQUENTIAL])
    del opts["lrecl"]

    with pytest.raises(ValidationError, match="record length"):
        validate_create_options(opts)


def test_block_size_raised_to_record_length() -> None:
    fixed = validate_create_options({**CREATE_DEFAULTS[DataSetType.SEQUENTIAL], "lrecl": 100, "blksize": 80})
    variable = validate_create_options(
        {**CREATE_DEFAULTS[DataSetType.SEQUENTIAL], "recfm": "VB", "lrecl": 100, "blksize": 80}
    )

    assert fixed["blksize"] == 100
    assert variable["blksize"] == 104


def test_generate_zosmf_options_from_cli_arguments() -> None:
    options = generate_zosmf_options({
        "size": "5TRK",
        "secondary_space": 2,
        "record_format": "VB",
        "record_length": 255,
        "volume_serial": "VOL001",
        "data_class": None,
    })

    assert options == {"primary": 5, "alcunit": "TRK", "secondary": 2, "recfm": "VB", "lrecl": 255, "volser": "VOL001"}


def test_parse_size() -> None:
    assert parse_size("10") == {"primary": 10}
    assert parse_size(" 3 cyl ") == {"primary": 3, "alcunit": "CYL"}
    with pytest.raises(ValidationError, match="Invalid size option"):
        parse_size("lots")


def test_create_uss_directory(client, zosmf) -> None:
    zosmf.add("POST", "/zosmf/restfiles/fs/u/ibmuser/newdir", status=201)

    response = Create(client).uss("/u/ibmuser/newdir", "directory", "rwxr-xr-x")

    assert response.success
    assert zosmf.body(zosmf.last("POST")) == {"type": "directory", "mode": "rwxr-xr-x"}


def test_create_uss_rejects_unknown_kind(client) -> None:
    with pytest.raises(ValidationError, match="'file' or 'directory'"):
        Create(client).uss("/u/ibmuser/x", "socket")


def test_create_zfs(client, zosmf) -> None:
    zosmf.add("POST", "/zosmf/restfiles/mfs/zfs/IBMUSER.TEST.ZFS", status=201)

    response = Create(client).zfs("IBMUSER.TEST.ZFS", volumes=["VOL001"], storage_class="SC1")

    request = zosmf.last("POST")
    assert zosmf.body(request) == {
        "perms": 755, "cylsPri": 10, "cylsSec": 2, "volumes": ["VOL001"], "storageClass": "SC1",
    }
    assert request.url.params["timeout"] == "20"
    assert response.command_response == "Successfully created file system."


def test_delete_operations(client, zosmf) -> None:
    zosmf.add("DELETE", "/zosmf/restfiles/ds/-(VOL001)/IBMUSER.OLD", status=204)
    zosmf.add("DELETE", "/zosmf/restfiles/fs/u/ibmuser/dir", status=204)
    zosmf.add("DELETE", "/zosmf/restfiles/mfs/zfs/IBMUSER.ZFS", status=204)
    api = Delete(client)

    assert api.data_set("IBMUSER.OLD", volume="VOL001").success
    assert api.uss_file("/u/ibmuser/dir", recursive=True).success
    assert zosmf.last("DELETE", "/zosmf/restfiles/fs/u/ibmuser/dir").headers["X-IBM-Option"] == "recursive"
    assert api.zfs("IBMUSER.ZFS").command_response == "z/OS file system deleted successfully."


def test_delete_requires_names(client) -> None:
    with pytest.raises(ValidationError, match="Specify the USS file name"):
        Delete(client).uss_file("")
