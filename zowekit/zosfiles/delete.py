"""Delete data sets, USS files and zFS file systems."""

from typing import Optional

from zowekit.base import ZosmfApi
from zowekit.errors import expect_non_blank
from zowekit.zosfiles import constants, messages
from zowekit.zosfiles.response import ZosFilesResponse
from zowekit.zosfiles.utils import data_set_endpoint, uss_endpoint


class Delete(ZosmfApi):
    def data_set(self, data_set_name: str, volume: Optional[str] = None) -> ZosFilesResponse:
        expect_non_blank(data_set_name, messages.MISSING_DATA_SET_NAME)
        self.logger.info("data_set_delete", extra=self.log_extra(data_set=data_set_name, volume=volume))
        self.client.delete_expect_text(data_set_endpoint(data_set_name, volume))
        return ZosFilesResponse(True, messages.DATA_SET_DELETED)

    def uss_file(self, uss_path: str, recursive: bool = False) -> ZosFilesResponse:
        """Delete a USS file, or a directory tree when ``recursive`` is set."""
        expect_non_blank(uss_path, messages.MISSING_USS_FILE_NAME)
        headers = {constants.HEADER_OPTION: "recursive"} if recursive else None
        self.logger.info("uss_delete", extra=self.log_extra(path=uss_path, recursive=recursive))
        self.client.delete_expect_text(uss_endpoint(uss_path), headers=headers)
        return ZosFilesResponse(True, messages.USS_FILE_DELETED)

    def zfs(self, file_system_name: str) -> ZosFilesResponse:
        expect_non_blank(file_system_name, messages.MISSING_FILE_SYSTEM_NAME)
        endpoint = f"{constants.RESOURCE}{constants.RES_ZFS_FILES}/{file_system_name.strip()}"
        self.logger.info("zfs_delete", extra=self.log_extra(file_system=file_system_name))
        self.client.delete_expect_text(endpoint)
        return ZosFilesResponse(True, messages.ZFS_DELETED)
