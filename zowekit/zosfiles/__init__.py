"""
Zowekit z/OS files

Data set, USS file and file system operations over the z/OSMF files REST API.
"""

from zowekit.zosfiles.create import Create, DataSetType, generate_zosmf_options
from zowekit.zosfiles.delete import Delete
from zowekit.zosfiles.download import Download, DownloadOptions
from zowekit.zosfiles.invoke import Invoke
from zowekit.zosfiles.list import List, UssListOptions
from zowekit.zosfiles.mount import Mount, Unmount
from zowekit.zosfiles.response import ZosFilesResponse
from zowekit.zosfiles.upload import Upload, UploadOptions
from zowekit.zosfiles.utilities import Tag, Utilities

__all__ = [
    "Create",
    "DataSetType",
    "Delete",
    "Download",
    "DownloadOptions",
    "Invoke",
    "List",
    "Mount",
    "Tag",
    "Unmount",
    "Upload",
    "UploadOptions",
    "UssListOptions",
    "Utilities",
    "ZosFilesResponse",
    "generate_zosmf_options",
]
