"""
Helpers shared by the z/OS files operations: local path derivation for
data sets and members, USS path encoding and request header generation.
"""

import posixpath
import re
from pathlib import Path
from typing import Dict, Optional, Tuple
from urllib.parse import quote

from zowekit.errors import EXPECT_PREFIX, ValidationError
from zowekit.zosfiles import constants, messages

_MEMBER_RE = re.compile(r"^(?P<dsn>[^()]+)\((?P<member>[^()]+)\)$")


def split_member(data_set_name: str) -> Tuple[str, Optional[str]]:
    """Split ``HLQ.PDS(MEMBER)`` into ``("HLQ.PDS", "MEMBER")``."""
    match = _MEMBER_RE.match(data_set_name.strip())
    if match:
        return match.group("dsn"), match.group("member")
    return data_set_name.strip(), None


def normalize_extension(extension: Optional[str]) -> str:
    """Return ``extension`` with a leading dot, or ``""`` when explicitly empty."""
    if extension is None:
        return constants.DEFAULT_EXTENSION
    extension = extension.strip()
    if not extension:
        return ""
    return extension if extension.startswith(".") else f".{extension}"


def get_dirs_from_data_set(data_set_name: str, preserve_case: bool = False) -> str:
    """
    Convert a data set name into a relative directory path.

    ``USER.TEST.DATA`` becomes ``user/test/data``; a member name, if present,
    becomes the final path segment.
    """
    dsn, member = split_member(data_set_name)
    path = dsn.replace(".", "/")
    if member:
        path = f"{path}/{member}"
    return path if preserve_case else path.lower()


def data_set_local_file(
    data_set_name: str,
    *,
    extension: Optional[str] = None,
    directory: Optional[str] = None,
    preserve_case: bool = False,
) -> Path:
    """Local file a data set (or member) downloads to when no file is given."""
    ext = normalize_extension(extension)
    if directory:
        dsn, member = split_member(data_set_name)
        leaf = member or dsn
        if not preserve_case:
            leaf = leaf.lower()
        return Path(directory) / f"{leaf}{ext}"
    return Path(f"{get_dirs_from_data_set(data_set_name, preserve_case)}{ext}")


def member_local_file(
    directory: Path,
    member: str,
    *,
    extension: Optional[str] = None,
    preserve_case: bool = False,
) -> Path:
    name = member if preserve_case else member.lower()
    return directory / f"{name}{normalize_extension(extension)}"


def extension_for(data_set_name: str, extension: Optional[str], extension_map: Optional[Dict[str, str]]) -> str:
    """
    Pick the file extension for a data set.

    The extension map is keyed by the lower-cased last qualifier of the data
    set name; entries win over ``extension``.
    """
    if extension_map:
        last = split_member(data_set_name)[0].split(".")[-1].lower()
        mapped = {k.lower(): v for k, v in extension_map.items()}.get(last)
        if mapped is not None:
            return normalize_extension(mapped)
    return normalize_extension(extension)


def uss_endpoint(uss_path: str) -> str:
    """REST endpoint of a USS file or directory."""
    normalized = posixpath.normpath(uss_path.strip())
    return f"{constants.RESOURCE}{constants.RES_USS_FILES}/{quote(normalized.lstrip('/'), safe='/')}"


def data_set_endpoint(data_set_name: str, volume: Optional[str] = None) -> str:
    """REST endpoint of a data set or member, optionally pinned to a volume."""
    target = quote(data_set_name.strip(), safe="()")
    if volume:
        target = f"-({quote(volume)})/{target}"
    return f"{constants.RESOURCE}{constants.RES_DS_FILES}/{target}"


def data_type_headers(
    *,
    binary: bool = False,
    record: bool = False,
    encoding: Optional[str] = None,
    return_etag: bool = False,
    etag: Optional[str] = None,
) -> Dict[str, str]:
    """Build the ``X-IBM-Data-Type`` / etag headers for a transfer."""
    if binary and record:
        raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_BINARY_AND_RECORD}")
    if encoding and (binary or record):
        raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_ENCODING_WITH_BINARY}")
    headers: Dict[str, str] = {}
    if binary:
        headers[constants.HEADER_DATA_TYPE] = "binary"
    elif record:
        headers[constants.HEADER_DATA_TYPE] = "record"
    elif encoding:
        headers[constants.HEADER_DATA_TYPE] = f"text;fileEncoding={encoding}"
    if return_etag:
        headers[constants.HEADER_RETURN_ETAG] = "true"
    if etag:
        headers["If-Match"] = etag
    return headers


def ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
