"""Upload local files and buffers to data sets and USS files."""

import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from zowekit.base import ZosmfApi
from zowekit.errors import EXPECT_PREFIX, ValidationError, expect_non_blank
from zowekit.zosfiles import messages
from zowekit.zosfiles.list import List as ListApi
from zowekit.zosfiles.response import ZosFilesResponse
from zowekit.zosfiles.utils import data_set_endpoint, data_type_headers, split_member, uss_endpoint

MAX_MEMBER_LENGTH = 8


@dataclass
class UploadOptions:
    binary: bool = False
    record: bool = False
    encoding: Optional[str] = None
    volume: Optional[str] = None
    etag: Optional[str] = None
    return_etag: bool = False


def member_name_from_file(path: Path) -> str:
    """Derive a PDS member name from a local file name (``my.jcl`` -> ``MY``)."""
    stem = path.name.split(".")[0]
    return stem[:MAX_MEMBER_LENGTH].upper()


class Upload(ZosmfApi):
    """
    Upload content to z/OS.

    Text uploads are sent with ``\\n`` line endings; binary and record uploads
    are sent unchanged.
    """

    def _put(self, endpoint: str, buffer: bytes, options: UploadOptions) -> Dict[str, Any]:
        headers = data_type_headers(
            binary=options.binary,
            record=options.record,
            encoding=options.encoding,
            return_etag=options.return_etag,
            etag=options.etag,
        )
        if not (options.binary or options.record):
            buffer = buffer.replace(b"\r\n", b"\n")
        resp = self.client.request("PUT", endpoint, content=buffer, headers=headers)
        api: Dict[str, Any] = {"bytes": len(buffer)}
        if options.return_etag:
            api["etag"] = resp.headers.get("etag")
        return api

    def buffer_to_data_set(
        self, buffer: bytes, data_set_name: str, options: Optional[UploadOptions] = None
    ) -> ZosFilesResponse:
        expect_non_blank(data_set_name, messages.MISSING_DATA_SET_NAME)
        options = options or UploadOptions()
        self.logger.info("data_set_upload", extra=self.log_extra(data_set=data_set_name, size=len(buffer)))
        api = self._put(data_set_endpoint(data_set_name, options.volume), buffer, options)
        return ZosFilesResponse(True, messages.DATA_SET_UPLOADED, api)

    def _is_partitioned(self, data_set_name: str) -> bool:
        items = ListApi(self.client).data_sets(data_set_name, attributes=True).api_response.get("items") or []
        for item in items:
            if item.get("dsname", "").upper() == data_set_name.upper():
                return str(item.get("dsorg", "")).startswith("PO")
        return False

    def file_to_data_set(
        self, local_file: str, data_set_name: str, options: Optional[UploadOptions] = None
    ) -> ZosFilesResponse:
        """
        Upload a local file to a sequential data set or a member.

        When the target is a PDS without a member name, the member is named
        after the local file. A directory is uploaded with ``dir_to_pds``.
        """
        expect_non_blank(local_file, messages.MISSING_INPUT_FILE)
        expect_non_blank(data_set_name, messages.MISSING_DATA_SET_NAME)
        path = Path(local_file)
        if path.is_dir():
            return self.dir_to_pds(local_file, data_set_name, options)
        if not path.is_file():
            raise ValidationError(f"{EXPECT_PREFIX}{messages.MISSING_INPUT_FILE} Not found: {local_file}")

        target = data_set_name.strip()
        dsn, member = split_member(target)
        if member is None and self._is_partitioned(dsn):
            target = f"{dsn}({member_name_from_file(path)})"
        response = self.buffer_to_data_set(path.read_bytes(), target, options)
        response.api_response["to"] = target
        return response

    def dir_to_pds(
        self, local_dir: str, data_set_name: str, options: Optional[UploadOptions] = None
    ) -> ZosFilesResponse:
        """Upload every regular file of a directory as a member of a PDS."""
        expect_non_blank(local_dir, messages.MISSING_INPUT_DIRECTORY)
        expect_non_blank(data_set_name, messages.MISSING_DATA_SET_NAME)
        directory = Path(local_dir)
        if not directory.is_dir():
            raise ValidationError(f"{EXPECT_PREFIX}{messages.MISSING_INPUT_DIRECTORY} Not found: {local_dir}")

        uploaded: List[str] = []
        for path in sorted(p for p in directory.iterdir() if p.is_file()):
            target = f"{data_set_name.strip()}({member_name_from_file(path)})"
            self.buffer_to_data_set(path.read_bytes(), target, options)
            uploaded.append(target)
        return ZosFilesResponse(True, messages.DATA_SET_UPLOADED, {"members": uploaded})

    def buffer_to_uss_file(
        self, uss_path: str, buffer: bytes, options: Optional[UploadOptions] = None
    ) -> ZosFilesResponse:
        expect_non_blank(uss_path, messages.MISSING_USS_FILE_NAME)
        options = options or UploadOptions()
        if options.record:
            raise ValidationError(f"{EXPECT_PREFIX}{messages.UNSUPPORTED_DATA_TYPE}")
        self.logger.info("uss_upload", extra=self.log_extra(path=uss_path, size=len(buffer)))
        api = self._put(uss_endpoint(uss_path), buffer, options)
        return ZosFilesResponse(True, messages.USS_FILE_UPLOADED, api)

    def file_to_uss_file(
        self, local_file: str, uss_path: str, options: Optional[UploadOptions] = None
    ) -> ZosFilesResponse:
        expect_non_blank(local_file, messages.MISSING_INPUT_FILE)
        path = Path(local_file)
        if not path.is_file():
            raise ValidationError(f"{EXPECT_PREFIX}{messages.MISSING_INPUT_FILE} Not found: {local_file}")
        if uss_path and uss_path.endswith("/"):
            uss_path = posixpath.join(uss_path, path.name)
        return self.buffer_to_uss_file(uss_path, path.read_bytes(), options)
