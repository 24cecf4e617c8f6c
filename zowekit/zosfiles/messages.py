"""User-facing messages of the z/OS files API."""

DATA_SET_CREATED = "Data set created successfully."
DATA_SET_DELETED = "Data set deleted successfully."
DATA_SET_DOWNLOADED = "Data set downloaded successfully.\nDestination: {destination}"
MEMBERS_DOWNLOADED = "Member(s) downloaded successfully.\nDestination: {destination}"
DATA_SETS_DOWNLOADED = "{count} data set(s) downloaded successfully to {directory}"
DATA_SETS_DOWNLOAD_FAILED = "{count} data set(s) failed to download:\n{failures}"
NO_MEMBERS_FOUND = "No members found!"
NO_DATA_SETS_MATCHING = "There are no data sets that match the provided pattern(s)."
DATA_SET_UPLOADED = "Data set uploaded successfully."
USS_FILE_CREATED = "USS file or directory created successfully."
USS_FILE_DELETED = "USS file or directory deleted successfully."
USS_FILE_DOWNLOADED = "USS file downloaded successfully.\nDestination: {destination}"
USS_FILE_STREAMED = "USS file downloaded successfully."
USS_DIR_DOWNLOADED = "{count} file(s) downloaded successfully.\nDestination: {destination}"
USS_FILE_UPLOADED = "USS file uploaded successfully."
ZFS_CREATED = "Successfully created file system."
ZFS_DELETED = "z/OS file system deleted successfully."
FS_MOUNTED = "File system mounted successfully."
FS_UNMOUNTED = "File system unmounted successfully."
AMS_EXECUTED = "AMS command executed successfully."
DATA_SET_LISTED = "Data set list returned successfully."
MEMBERS_LISTED = "Member list returned successfully."
USS_LISTED = "USS directory listed successfully."
FS_LISTED = "File system list returned successfully."
TAG_SET = "File tagged successfully."

# Validation (prefixed with "Expect Error: " when raised)
MISSING_DATA_SET_NAME = "Specify the input data set name."
MISSING_DATA_SET_TYPE = "Specify the data set type."
INVALID_DATA_SET_TYPE = "Invalid data set type."
MISSING_USS_FILE_NAME = "Specify the USS file name."
MISSING_USS_DIR_NAME = "Specify the USS directory name."
MISSING_USS_PATH = "Specify the USS path."
MISSING_FILE_SYSTEM_NAME = "Specify the file system name."
MISSING_MOUNT_POINT = "Specify the mount point."
MISSING_STATEMENTS = "Missing AMS statements to be submitted."
LONG_AMS_STATEMENT = "The following statement is longer than {max} characters: {statement}"
UNSUPPORTED_DATA_TYPE = "Unsupported data type 'record' specified for USS file operation."
MISSING_INPUT_FILE = "Specify the input file path."
MISSING_INPUT_DIRECTORY = "Specify the input directory path."
INVALID_USS_TYPE = "Specify either 'file' or 'directory' as the USS object type."
INVALID_FS_TYPE = "The file system type '{fs_type}' is not supported."
INVALID_MOUNT_MODE = "The mount mode must be either 'rdonly' or 'rdwr'."
INVALID_BINARY_AND_RECORD = "Binary and record modes cannot be used together."
INVALID_ENCODING_WITH_BINARY = "An encoding cannot be combined with binary or record mode."
INVALID_TAG = "The tag must be one of: text, binary, mixed."
MISSING_CODESET = "A codeset is required when tagging a file as text or mixed."
INVALID_DSORG = "Invalid data set organization (dsorg) option: {value}."
INVALID_ALCUNIT = "Invalid allocation unit (alcunit) option: {value}."
INVALID_PRIMARY = "Specify a primary space allocation (primary) between 1 and {max}."
INVALID_SECONDARY = "Specify a secondary space allocation (secondary) between 0 and {max}."
INVALID_DIRBLK = "Specify a positive number of directory blocks (dirblk) for a partitioned data set."
INVALID_RECFM = "Invalid record format (recfm) option: {value}."
MISSING_LRECL = "Specify the record length (lrecl)."
INVALID_BLKSIZE = "Specify the block size (blksize) as a number."
INVALID_SIZE = "Invalid size option: {value}."
