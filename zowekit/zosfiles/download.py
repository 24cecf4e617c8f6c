"""
Download data sets, members and USS files to the local workstation.

Local destinations are derived from the remote names unless a file or
directory is given: data set qualifiers become directories
(``USER.TEST.DATA`` -> ``user/test/data.txt``) and PDS members become files
inside the directory of their data set.
"""

import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Dict, List, Mapping, Optional, Sequence

from zowekit.base import ZosmfApi
from zowekit.errors import EXPECT_PREFIX, ValidationError, ZoweError, expect_non_blank
from zowekit.zosfiles import messages
from zowekit.zosfiles.list import List as ListApi
from zowekit.zosfiles.list import UssListOptions
from zowekit.zosfiles.response import ZosFilesResponse
from zowekit.zosfiles.utilities import Utilities
from zowekit.zosfiles.utils import (
    data_set_endpoint,
    data_set_local_file,
    data_type_headers,
    ensure_parent,
    extension_for,
    get_dirs_from_data_set,
    member_local_file,
    uss_endpoint,
)

PARTITIONED_DSORGS = ("PO", "PO-E")
SEQUENTIAL_DSORGS = ("PS",)


@dataclass
class DownloadOptions:
    file: Optional[str] = None
    directory: Optional[str] = None
    extension: Optional[str] = None
    extension_map: Optional[Dict[str, str]] = None
    binary: bool = False
    record: bool = False
    encoding: Optional[str] = None
    volume: Optional[str] = None
    preserve_original_letter_case: bool = False
    overwrite: bool = False
    return_etag: bool = False
    fail_fast: bool = True
    stream: Optional[IO[bytes]] = None


class Download(ZosmfApi):
    """
    Download z/OS content.

    Example:
        Download(client).data_set("IBMUSER.TEST.PS", DownloadOptions(binary=True))
    """

    def _fetch(self, endpoint: str, destination: Optional[Path], options: DownloadOptions,
               *, binary: Optional[bool] = None) -> Optional[str]:
        headers = data_type_headers(
            binary=options.binary if binary is None else binary,
            record=options.record,
            encoding=options.encoding,
            return_etag=options.return_etag,
        )
        if options.stream is not None and destination is None:
            resp_headers = self.client.stream_to(endpoint, options.stream, headers=headers)
        else:
            ensure_parent(destination)
            try:
                with open(destination, "wb") as handle:
                    resp_headers = self.client.stream_to(endpoint, handle, headers=headers)
            except ZoweError:
                destination.unlink(missing_ok=True)
                raise
        return resp_headers.get("etag")

    def data_set(self, data_set_name: str, options: Optional[DownloadOptions] = None) -> ZosFilesResponse:
        expect_non_blank(data_set_name, messages.MISSING_DATA_SET_NAME)
        options = options or DownloadOptions()
        endpoint = data_set_endpoint(data_set_name, options.volume)

        if options.stream is not None:
            destination = None
        elif options.file:
            destination = Path(options.file)
        else:
            destination = data_set_local_file(
                data_set_name,
                extension=extension_for(data_set_name, options.extension, options.extension_map),
                directory=options.directory,
                preserve_case=options.preserve_original_letter_case,
            )

        self.logger.info("data_set_download", extra=self.log_extra(data_set=data_set_name, destination=str(destination)))
        etag = self._fetch(endpoint, destination, options)
        if destination is None:
            message = messages.DATA_SET_DOWNLOADED.split("\n")[0]
        else:
            message = messages.DATA_SET_DOWNLOADED.format(destination=destination)
        api: Dict[str, Any] = {"destination": str(destination) if destination else None}
        if options.return_etag:
            api["etag"] = etag
        return ZosFilesResponse(True, message, api)

    def all_members(self, data_set_name: str, options: Optional[DownloadOptions] = None) -> ZosFilesResponse:
        """Download every member of a partitioned data set into one directory."""
        expect_non_blank(data_set_name, messages.MISSING_DATA_SET_NAME)
        options = options or DownloadOptions()
        members = ListApi(self.client).all_members(data_set_name).api_response.get("items") or []
        if not members:
            raise ZoweError(messages.NO_MEMBERS_FOUND, retryable=False)

        directory = Path(options.directory or get_dirs_from_data_set(
            data_set_name, options.preserve_original_letter_case
        ))
        extension = extension_for(data_set_name, options.extension, options.extension_map)
        downloaded: List[str] = []
        for item in members:
            member = item["member"]
            target = member_local_file(
                directory, member, extension=extension, preserve_case=options.preserve_original_letter_case
            )
            self._fetch(data_set_endpoint(f"{data_set_name.strip()}({member})", options.volume), target, options)
            downloaded.append(str(target))
        self.logger.info(
            "members_downloaded",
            extra=self.log_extra(data_set=data_set_name, count=len(downloaded), directory=str(directory)),
        )
        return ZosFilesResponse(
            True,
            messages.MEMBERS_DOWNLOADED.format(destination=directory),
            {"items": members, "files": downloaded},
        )

    def all_data_sets(
        self,
        data_sets: Sequence[Mapping[str, Any]],
        options: Optional[DownloadOptions] = None,
    ) -> ZosFilesResponse:
        """
        Download data sets returned by a data set listing.

        Each entry needs ``dsname`` and ``dsorg``; partitioned data sets are
        downloaded member by member, other organizations are skipped.
        With ``fail_fast`` the first failure is raised; otherwise failures are
        collected and reported with ``success=False``.
        """
        if not data_sets:
            raise ZoweError(messages.NO_DATA_SETS_MATCHING, retryable=False)
        options = options or DownloadOptions()

        downloaded: List[str] = []
        skipped: List[str] = []
        failures: List[str] = []
        for entry in data_sets:
            dsname = entry["dsname"]
            dsorg = entry.get("dsorg")
            if entry.get("migr") in ("YES", True) or dsorg not in PARTITIONED_DSORGS + SEQUENTIAL_DSORGS:
                skipped.append(dsname)
                continue
            extension = extension_for(dsname, options.extension, options.extension_map)
            base = get_dirs_from_data_set(dsname, options.preserve_original_letter_case)
            try:
                if dsorg in PARTITIONED_DSORGS:
                    directory = str(Path(options.directory) / base) if options.directory else base
                    self.all_members(dsname, DownloadOptions(
                        directory=directory,
                        extension=extension,
                        binary=options.binary,
                        record=options.record,
                        encoding=options.encoding,
                        volume=options.volume,
                        preserve_original_letter_case=options.preserve_original_letter_case,
                    ))
                else:
                    target = data_set_local_file(
                        dsname,
                        extension=extension,
                        directory=options.directory,
                        preserve_case=options.preserve_original_letter_case,
                    )
                    self._fetch(data_set_endpoint(dsname, options.volume), target, options)
                downloaded.append(dsname)
            except ZoweError as exc:
                if options.fail_fast:
                    raise
                self.logger.warning("data_set_download_failed", extra=self.log_extra(data_set=dsname, error=str(exc)))
                failures.append(f"{dsname}: {exc}")

        message = messages.DATA_SETS_DOWNLOADED.format(count=len(downloaded), directory=options.directory or "./")
        if failures:
            message += "\n" + messages.DATA_SETS_DOWNLOAD_FAILED.format(
                count=len(failures), failures="\n".join(failures)
            )
        return ZosFilesResponse(
            not failures,
            message,
            {"downloaded": downloaded, "skipped": skipped, "failed": failures},
        )

    def uss_file(self, uss_path: str, options: Optional[DownloadOptions] = None) -> ZosFilesResponse:
        expect_non_blank(uss_path, messages.MISSING_USS_FILE_NAME)
        options = options or DownloadOptions()
        if options.record:
            raise ValidationError(f"{EXPECT_PREFIX}{messages.UNSUPPORTED_DATA_TYPE}")

        binary = options.binary
        if not binary and not options.encoding:
            binary = Utilities(self.client).is_file_tagged_binary_or_ascii(uss_path)

        if options.stream is not None:
            destination = None
        elif options.file:
            destination = Path(options.file)
        else:
            destination = Path(options.directory or ".") / posixpath.basename(uss_path.rstrip("/"))

        self.logger.info("uss_download", extra=self.log_extra(path=uss_path, binary=binary))
        etag = self._fetch(uss_endpoint(uss_path), destination, options, binary=binary)
        if destination is None:
            message = messages.USS_FILE_STREAMED
        else:
            message = messages.USS_FILE_DOWNLOADED.format(destination=destination)
        api: Dict[str, Any] = {"destination": str(destination) if destination else None, "binary": binary}
        if options.return_etag:
            api["etag"] = etag
        return ZosFilesResponse(True, message, api)

    def uss_dir(
        self,
        uss_dir_name: str,
        options: Optional[DownloadOptions] = None,
        list_options: Optional[UssListOptions] = None,
    ) -> ZosFilesResponse:
        """
        Download a USS directory tree.

        Directories are recreated locally; existing local files are left
        alone unless ``overwrite`` is set. Symbolic links are downloaded with
        their target contents unless the listing reports them (``symlinks``).
        """
        expect_non_blank(uss_dir_name, messages.MISSING_USS_DIR_NAME)
        options = options or DownloadOptions()
        root = uss_dir_name.rstrip("/") or "/"
        local_root = Path(options.directory or ".")
        items = ListApi(self.client).uss_files(root, list_options).api_response.get("items") or []

        local_root.mkdir(parents=True, exist_ok=True)
        downloaded: List[str] = []
        skipped: List[str] = []
        for item in items:
            name = item.get("name", "")
            if name in (".", ".."):
                continue
            mode = item.get("mode", "")
            local_path = local_root / name
            if mode.startswith("d"):
                local_path.mkdir(parents=True, exist_ok=True)
                continue
            if mode.startswith("l") and list_options is not None and list_options.symlinks:
                skipped.append(name)
                continue
            if local_path.exists() and not options.overwrite:
                skipped.append(name)
                continue
            self.uss_file(
                posixpath.join(root, name),
                DownloadOptions(file=str(local_path), binary=options.binary, encoding=options.encoding),
            )
            downloaded.append(str(local_path))

        self.logger.info(
            "uss_dir_downloaded",
            extra=self.log_extra(path=root, count=len(downloaded), skipped=len(skipped)),
        )
        return ZosFilesResponse(
            True,
            messages.USS_DIR_DOWNLOADED.format(count=len(downloaded), destination=local_root),
            {"downloaded": downloaded, "skipped": skipped},
        )
