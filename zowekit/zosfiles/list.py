"""List data sets, members, USS directories and mounted file systems."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from zowekit.base import ZosmfApi
from zowekit.errors import EXPECT_PREFIX, ValidationError, expect_non_blank
from zowekit.zosfiles import constants, messages
from zowekit.zosfiles.response import ZosFilesResponse
from zowekit.zosfiles.utils import data_set_endpoint


@dataclass
class UssListOptions:
    """
    Filters for a USS directory listing.

    ``filesys`` lists across mount points; ``symlinks`` reports symbolic
    links instead of following them.
    """

    depth: Optional[int] = None
    filesys: bool = False
    symlinks: bool = False
    name: Optional[str] = None
    max_length: Optional[int] = None

    def to_params(self, path: str) -> Dict[str, Any]:
        return {
            "path": path,
            "depth": self.depth,
            "filesys": "all" if self.filesys else None,
            "symlinks": "report" if self.symlinks else None,
            "name": self.name,
        }


def _item_headers(attributes: bool, max_length: Optional[int]) -> Dict[str, str]:
    headers = {constants.HEADER_MAX_ITEMS: str(max_length or 0)}
    if attributes:
        headers[constants.HEADER_ATTRIBUTES] = "base"
    return headers


class List(ZosmfApi):
    def data_sets(
        self,
        pattern: str,
        *,
        attributes: bool = False,
        volume: Optional[str] = None,
        start: Optional[str] = None,
        max_length: Optional[int] = None,
    ) -> ZosFilesResponse:
        """List data sets matching a ``dslevel`` pattern such as ``IBMUSER.*``."""
        expect_non_blank(pattern, messages.MISSING_DATA_SET_NAME)
        params = {"dslevel": pattern.strip(), "volser": volume, "start": start}
        data = self.client.get_expect_json(
            f"{constants.RESOURCE}{constants.RES_DS_FILES}",
            params=params,
            headers=_item_headers(attributes, max_length),
        ) or {}
        return ZosFilesResponse(True, messages.DATA_SET_LISTED, data)

    def all_members(
        self,
        data_set_name: str,
        *,
        pattern: Optional[str] = None,
        attributes: bool = False,
        start: Optional[str] = None,
        max_length: Optional[int] = None,
    ) -> ZosFilesResponse:
        expect_non_blank(data_set_name, messages.MISSING_DATA_SET_NAME)
        data = self.client.get_expect_json(
            f"{data_set_endpoint(data_set_name)}{constants.RES_DS_MEMBERS}",
            params={"pattern": pattern, "start": start},
            headers=_item_headers(attributes, max_length),
        ) or {}
        return ZosFilesResponse(True, messages.MEMBERS_LISTED, data)

    def uss_files(self, path: str, options: Optional[UssListOptions] = None) -> ZosFilesResponse:
        expect_non_blank(path, messages.MISSING_USS_PATH)
        options = options or UssListOptions()
        data = self.client.get_expect_json(
            f"{constants.RESOURCE}{constants.RES_USS_FILES}",
            params=options.to_params(path.strip()),
            headers={constants.HEADER_MAX_ITEMS: str(options.max_length or 0)},
        ) or {}
        return ZosFilesResponse(True, messages.USS_LISTED, data)

    def file_systems(
        self,
        *,
        fsname: Optional[str] = None,
        path: Optional[str] = None,
        max_length: Optional[int] = None,
    ) -> ZosFilesResponse:
        """List mounted file systems, filtered by name or by a path inside one."""
        if fsname and path:
            raise ValidationError(f"{EXPECT_PREFIX}Specify either a file system name or a path, not both.")
        data = self.client.get_expect_json(
            f"{constants.RESOURCE}{constants.RES_MFS}",
            params={"fsname": fsname, "path": path},
            headers={constants.HEADER_MAX_ITEMS: str(max_length or 0)},
        ) or {}
        return ZosFilesResponse(True, messages.FS_LISTED, data)
