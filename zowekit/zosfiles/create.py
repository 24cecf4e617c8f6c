"""
Create data sets, USS files and directories, and zFS file systems.
"""

import re
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from zowekit.base import ZosmfApi
from zowekit.errors import EXPECT_PREFIX, ValidationError, expect_non_blank
from zowekit.zosfiles import constants, messages
from zowekit.zosfiles.response import ZosFilesResponse
from zowekit.zosfiles.utils import data_set_endpoint, uss_endpoint


class DataSetType(str, Enum):
    PARTITIONED = "PARTITIONED"
    SEQUENTIAL = "SEQUENTIAL"
    CLASSIC = "CLASSIC"
    C = "C"
    BINARY = "BINARY"


CREATE_DEFAULTS: Dict[DataSetType, Dict[str, Any]] = {
    DataSetType.PARTITIONED: {
        "alcunit": "CYL", "dsorg": "PO", "primary": 1, "dirblk": 5,
        "recfm": "FB", "blksize": 6160, "lrecl": 80,
    },
    DataSetType.SEQUENTIAL: {
        "alcunit": "CYL", "dsorg": "PS", "primary": 1,
        "recfm": "FB", "blksize": 6160, "lrecl": 80,
    },
    DataSetType.CLASSIC: {
        "alcunit": "CYL", "dsorg": "PO", "primary": 1, "dirblk": 25,
        "recfm": "FB", "blksize": 6160, "lrecl": 80,
    },
    DataSetType.C: {
        "alcunit": "CYL", "dsorg": "PO", "primary": 1, "dirblk": 25,
        "recfm": "VB", "blksize": 32760, "lrecl": 260,
    },
    DataSetType.BINARY: {
        "alcunit": "CYL", "dsorg": "PO", "primary": 10, "dirblk": 25,
        "recfm": "U", "blksize": 27998, "lrecl": 27998,
    },
}

VALID_DSORG = ("PO", "POE", "PS", "VS", "DA")
VALID_ALCUNIT = ("CYL", "TRK")
VALID_RECFM = ("F", "FB", "FBA", "FBS", "FS", "V", "VB", "VBA", "VBS", "VS", "U", "A")

# CLI argument name -> z/OSMF create option
ARGUMENT_OPTIONS = {
    "secondary_space": "secondary",
    "directory_blocks": "dirblk",
    "record_format": "recfm",
    "block_size": "blksize",
    "record_length": "lrecl",
    "volume_serial": "volser",
    "device_type": "unit",
    "data_class": "dataclass",
    "storage_class": "storclass",
    "management_class": "mgntclass",
    "data_set_type": "dsntype",
    "average_block": "avgblk",
}

_SIZE_RE = re.compile(r"^\s*(\d+)\s*([A-Za-z]*)\s*$")


def parse_size(size: str) -> Dict[str, Any]:
    """Split a size such as ``5CYL`` into ``{"primary": 5, "alcunit": "CYL"}``."""
    match = _SIZE_RE.match(str(size))
    if not match:
        raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_SIZE.format(value=size)}")
    parsed: Dict[str, Any] = {"primary": int(match.group(1))}
    if match.group(2):
        parsed["alcunit"] = match.group(2).upper()
    return parsed


def generate_zosmf_options(arguments: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate CLI arguments into z/OSMF data set create options."""
    options: Dict[str, Any] = {}
    if arguments.get("size"):
        options.update(parse_size(arguments["size"]))
    for argument, option in ARGUMENT_OPTIONS.items():
        value = arguments.get(argument)
        if value is not None:
            options[option] = value
    return options


def _as_int(value: Any, message: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{EXPECT_PREFIX}{message}") from None


def validate_create_options(options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate (and normalize) merged create options.

    Returns a new dict; block sizes smaller than the record length are raised
    to it (plus the 4-byte descriptor for variable formats).
    """
    opts = dict(options)
    for key in ("dsorg", "alcunit", "recfm"):
        if isinstance(opts.get(key), str):
            opts[key] = opts[key].upper()

    dsorg = opts.get("dsorg")
    if dsorg is not None and dsorg not in VALID_DSORG:
        raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_DSORG.format(value=dsorg)}")
    alcunit = opts.get("alcunit")
    if alcunit is not None and alcunit not in VALID_ALCUNIT:
        raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_ALCUNIT.format(value=alcunit)}")

    invalid_primary = messages.INVALID_PRIMARY.format(max=constants.MAX_ALLOC_QUANTITY)
    primary = _as_int(opts.get("primary"), invalid_primary)
    if not 0 < primary <= constants.MAX_ALLOC_QUANTITY:
        raise ValidationError(f"{EXPECT_PREFIX}{invalid_primary}")
    opts["primary"] = primary
    if opts.get("secondary") is not None:
        invalid_secondary = messages.INVALID_SECONDARY.format(max=constants.MAX_ALLOC_QUANTITY)
        secondary = _as_int(opts["secondary"], invalid_secondary)
        if not 0 <= secondary <= constants.MAX_ALLOC_QUANTITY:
            raise ValidationError(f"{EXPECT_PREFIX}{invalid_secondary}")
        opts["secondary"] = secondary

    if dsorg in ("PO", "POE"):
        dirblk = _as_int(opts.get("dirblk") or 0, messages.INVALID_DIRBLK)
        if opts.get("dsntype", "").upper() != "LIBRARY" and dirblk <= 0:
            raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_DIRBLK}")
    else:
        opts.pop("dirblk", None)

    recfm = opts.get("recfm")
    if recfm is not None and recfm not in VALID_RECFM:
        raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_RECFM.format(value=recfm)}")
    if opts.get("lrecl") is None:
        raise ValidationError(f"{EXPECT_PREFIX}{messages.MISSING_LRECL}")
    lrecl = _as_int(opts["lrecl"], messages.MISSING_LRECL)
    opts["lrecl"] = lrecl
    if opts.get("blksize") is not None:
        blksize = _as_int(opts["blksize"], messages.INVALID_BLKSIZE)
        if blksize <= lrecl:
            blksize = lrecl + 4 if recfm and recfm.startswith("V") else lrecl
        opts["blksize"] = blksize
    return opts


class Create(ZosmfApi):
    """
    Create z/OS resources.

    Example:
        Create(client).data_set(DataSetType.PARTITIONED, "IBMUSER.TEST.PDS", {"primary": 5})
    """

    def data_set(
        self,
        data_set_type: DataSetType,
        data_set_name: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> ZosFilesResponse:
        if data_set_type is None:
            raise ValidationError(f"{EXPECT_PREFIX}{messages.MISSING_DATA_SET_TYPE}")
        try:
            ds_type = DataSetType(str(getattr(data_set_type, "value", data_set_type)).upper())
        except ValueError:
            raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_DATA_SET_TYPE}") from None
        expect_non_blank(data_set_name, messages.MISSING_DATA_SET_NAME)

        user_options = {k: v for k, v in (options or {}).items() if v is not None}
        merged = {**CREATE_DEFAULTS[ds_type], **user_options}
        body = validate_create_options(merged)

        self.logger.info(
            "data_set_create",
            extra=self.log_extra(data_set=data_set_name, data_set_type=ds_type.value),
        )
        self.client.post_expect_text(data_set_endpoint(data_set_name), json_body=body)
        return ZosFilesResponse(True, messages.DATA_SET_CREATED, body)

    def uss(self, uss_path: str, kind: str, mode: Optional[str] = None) -> ZosFilesResponse:
        """Create a USS file (``kind="file"``) or directory (``kind="directory"``)."""
        expect_non_blank(uss_path, messages.MISSING_USS_PATH)
        kind = (kind or "").lower()
        if kind not in ("file", "directory", "dir"):
            raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_USS_TYPE}")
        body: Dict[str, Any] = {"type": "directory" if kind == "dir" else kind}
        if mode:
            body["mode"] = mode
        self.logger.info("uss_create", extra=self.log_extra(path=uss_path, kind=body["type"]))
        self.client.post_expect_text(uss_endpoint(uss_path), json_body=body)
        return ZosFilesResponse(True, messages.USS_FILE_CREATED, body)

    def zfs(
        self,
        file_system_name: str,
        *,
        perms: int = 755,
        cyls_pri: int = 10,
        cyls_sec: int = 2,
        volumes: Optional[list] = None,
        storage_class: Optional[str] = None,
        management_class: Optional[str] = None,
        data_class: Optional[str] = None,
        timeout: int = 20,
    ) -> ZosFilesResponse:
        """Create a zFS aggregate."""
        expect_non_blank(file_system_name, messages.MISSING_FILE_SYSTEM_NAME)
        body: Dict[str, Any] = {"perms": int(perms), "cylsPri": int(cyls_pri), "cylsSec": int(cyls_sec)}
        if volumes:
            body["volumes"] = list(volumes)
        if storage_class:
            body["storageClass"] = storage_class
        if management_class:
            body["managementClass"] = management_class
        if data_class:
            body["dataClass"] = data_class
        endpoint = f"{constants.RESOURCE}{constants.RES_ZFS_FILES}/{file_system_name.strip()}"
        self.logger.info("zfs_create", extra=self.log_extra(file_system=file_system_name))
        self.client.post_expect_text(endpoint, json_body=body, params={"timeout": timeout})
        return ZosFilesResponse(True, messages.ZFS_CREATED, body)
