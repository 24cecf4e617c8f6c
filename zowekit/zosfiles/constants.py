"""z/OSMF files REST endpoints and header values."""

RESOURCE = "/zosmf/restfiles"
RES_DS_FILES = "/ds"
RES_DS_MEMBERS = "/member"
RES_USS_FILES = "/fs"
RES_MFS = "/mfs"
RES_ZFS_FILES = "/mfs/zfs"
RES_AMS = "/ams"

MAX_AMS_LINE = 255
MAX_ALLOC_QUANTITY = 16777215

HEADER_DATA_TYPE = "X-IBM-Data-Type"
HEADER_ATTRIBUTES = "X-IBM-Attributes"
HEADER_MAX_ITEMS = "X-IBM-Max-Items"
HEADER_OPTION = "X-IBM-Option"
HEADER_RETURN_ETAG = "X-IBM-Return-Etag"
HEADER_MIGRATED_RECALL = "X-IBM-Migrated-Recall"

DEFAULT_EXTENSION = ".txt"
