"""Mount and unmount z/OS UNIX file systems."""

from zowekit.base import ZosmfApi
from zowekit.errors import EXPECT_PREFIX, ValidationError, expect_non_blank
from zowekit.zosfiles import constants, messages
from zowekit.zosfiles.response import ZosFilesResponse

MOUNT_MODES = ("rdonly", "rdwr")
FS_TYPES = ("ZFS", "HFS", "NFS", "TFS")


def _mfs_endpoint(file_system_name: str) -> str:
    return f"{constants.RESOURCE}{constants.RES_MFS}/{file_system_name.strip()}"


class Mount(ZosmfApi):
    def fs(
        self,
        file_system_name: str,
        mount_point: str,
        fs_type: str = "ZFS",
        mode: str = "rdonly",
    ) -> ZosFilesResponse:
        expect_non_blank(file_system_name, messages.MISSING_FILE_SYSTEM_NAME)
        expect_non_blank(mount_point, messages.MISSING_MOUNT_POINT)
        fs_type = (fs_type or "ZFS").upper()
        if fs_type not in FS_TYPES:
            raise ValidationError(EXPECT_PREFIX + messages.INVALID_FS_TYPE.format(fs_type=fs_type))
        mode = (mode or "rdonly").lower()
        if mode not in MOUNT_MODES:
            raise ValidationError(f"{EXPECT_PREFIX}{messages.INVALID_MOUNT_MODE}")

        body = {"action": "mount", "mount-point": mount_point, "fs-type": fs_type, "mode": mode}
        self.logger.info("fs_mount", extra=self.log_extra(file_system=file_system_name, mount_point=mount_point))
        self.client.put_expect_text(_mfs_endpoint(file_system_name), json_body=body)
        return ZosFilesResponse(True, messages.FS_MOUNTED, body)


class Unmount(ZosmfApi):
    def fs(self, file_system_name: str) -> ZosFilesResponse:
        expect_non_blank(file_system_name, messages.MISSING_FILE_SYSTEM_NAME)
        body = {"action": "unmount"}
        self.logger.info("fs_unmount", extra=self.log_extra(file_system=file_system_name))
        self.client.put_expect_text(_mfs_endpoint(file_system_name), json_body=body)
        return ZosFilesResponse(True, messages.FS_UNMOUNTED, body)
