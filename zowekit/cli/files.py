"""zos-files commands: data sets, USS files and file systems."""

import click

from zowekit.cli.common import AliasedGroup, emit, get_client, handle_errors
from zowekit.zosfiles import (
    Create,
    DataSetType,
    Delete,
    Download,
    DownloadOptions,
    Invoke,
    List,
    Mount,
    Unmount,
    Upload,
    UploadOptions,
    UssListOptions,
    generate_zosmf_options,
)


def _emit_response(ctx, response) -> None:
    emit(ctx, response.to_dict(), response.command_response)


def _require_for_sure(for_sure: bool) -> None:
    if not for_sure:
        raise click.UsageError("Missing option '--for-sure' / '-f'. Deletion is permanent; confirm with --for-sure.")


@click.group("zos-files")
def files():
    """Manage z/OS data sets and USS files."""
    pass


# =============================================================================
# Create
# =============================================================================

@files.group(cls=AliasedGroup)
def create():
    """Create data sets, USS files and file systems."""
    pass


def _data_set_options(func):
    options = [
        click.option("--size", "--sz", help="Primary space with unit, e.g. 5CYL"),
        click.option("--secondary-space", "--ss", type=int, help="Secondary space allocation"),
        click.option("--directory-blocks", "--db", type=int, help="Number of directory blocks"),
        click.option("--record-format", "--rf", help="Record format, e.g. FB"),
        click.option("--block-size", "--bs", type=int, help="Block size"),
        click.option("--record-length", "--rl", type=int, help="Logical record length"),
        click.option("--volume-serial", "--vs", help="Volume serial"),
        click.option("--device-type", "--dt", help="Device type (unit)"),
        click.option("--data-class", "--dc", help="SMS data class"),
        click.option("--storage-class", "--sc", help="SMS storage class"),
        click.option("--management-class", "--mc", help="SMS management class"),
        click.option("--data-set-type", "--dst", help="Data set type, e.g. LIBRARY"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _make_create_command(name: str, data_set_type: DataSetType, summary: str) -> click.Command:
    @click.command(name, help=summary)
    @click.argument("data_set_name")
    @_data_set_options
    @click.pass_context
    @handle_errors
    def command(ctx, data_set_name, **arguments):
        with get_client(ctx) as client:
            response = Create(client).data_set(data_set_type, data_set_name, generate_zosmf_options(arguments))
        _emit_response(ctx, response)

    return command


create.add_command(_make_create_command("data-set-partitioned", DataSetType.PARTITIONED,
                                        "Create a partitioned data set (PDS)."))
create.add_command(_make_create_command("data-set-sequential", DataSetType.SEQUENTIAL,
                                        "Create a physical sequential data set (PS)."))
create.add_command(_make_create_command("data-set-classic", DataSetType.CLASSIC,
                                        "Create a classic PDS with 25 directory blocks."))
create.add_command(_make_create_command("data-set-c", DataSetType.C,
                                        "Create a PDS for C code (VB 260)."))
create.add_command(_make_create_command("data-set-binary", DataSetType.BINARY,
                                        "Create a PDS for executables (U 27998)."))
for _alias, _name in (("pds", "data-set-partitioned"), ("ps", "data-set-sequential"),
                      ("classic", "data-set-classic"), ("c", "data-set-c"), ("binary", "data-set-binary")):
    create.add_alias(_alias, _name)


@create.command("uss")
@click.argument("path")
@click.option("--type", "-t", "kind", type=click.Choice(["file", "directory"]), required=True, help="Object type")
@click.option("--mode", "-m", help="Permissions, e.g. rwxr-xr-x")
@click.pass_context
@handle_errors
def create_uss(ctx, path, kind, mode):
    """Create a USS file or directory."""
    with get_client(ctx) as client:
        response = Create(client).uss(path, kind, mode)
    _emit_response(ctx, response)


@create.command("zfs")
@click.argument("file_system_name")
@click.option("--perms", "-p", type=int, default=755, show_default=True, help="Permissions of the root directory")
@click.option("--cyls-pri", type=int, default=10, show_default=True, help="Primary cylinders")
@click.option("--cyls-sec", type=int, default=2, show_default=True, help="Secondary cylinders")
@click.option("--volumes", "-v", multiple=True, help="Volume serial (repeatable)")
@click.option("--storage-class", "--sc", help="SMS storage class")
@click.option("--management-class", "--mc", help="SMS management class")
@click.option("--data-class", "--dc", help="SMS data class")
@click.option("--timeout", "-t", type=int, default=20, show_default=True, help="Seconds to wait for creation")
@click.pass_context
@handle_errors
def create_zfs(ctx, file_system_name, perms, cyls_pri, cyls_sec, volumes, storage_class,
               management_class, data_class, timeout):
    """Create a z/OS file system (zFS)."""
    with get_client(ctx) as client:
        response = Create(client).zfs(
            file_system_name,
            perms=perms,
            cyls_pri=cyls_pri,
            cyls_sec=cyls_sec,
            volumes=list(volumes) or None,
            storage_class=storage_class,
            management_class=management_class,
            data_class=data_class,
            timeout=timeout,
        )
    _emit_response(ctx, response)


# =============================================================================
# Delete
# =============================================================================

@files.group()
def delete():
    """Delete data sets, USS files and file systems."""
    pass


@delete.command("data-set")
@click.argument("data_set_name")
@click.option("--volume", "--vol", help="Volume holding an uncataloged data set")
@click.option("--for-sure", "-f", is_flag=True, help="Confirm the deletion")
@click.pass_context
@handle_errors
def delete_data_set(ctx, data_set_name, volume, for_sure):
    """Delete a data set or member permanently."""
    _require_for_sure(for_sure)
    with get_client(ctx) as client:
        response = Delete(client).data_set(data_set_name, volume)
    _emit_response(ctx, response)


@delete.command("uss-file")
@click.argument("path")
@click.option("--recursive", "-r", is_flag=True, help="Delete directories and their contents")
@click.option("--for-sure", "-f", is_flag=True, help="Confirm the deletion")
@click.pass_context
@handle_errors
def delete_uss_file(ctx, path, recursive, for_sure):
    """Delete a USS file or directory permanently."""
    _require_for_sure(for_sure)
    with get_client(ctx) as client:
        response = Delete(client).uss_file(path, recursive)
    _emit_response(ctx, response)


@delete.command("zfs")
@click.argument("file_system_name")
@click.option("--for-sure", "-f", is_flag=True, help="Confirm the deletion")
@click.pass_context
@handle_errors
def delete_zfs(ctx, file_system_name, for_sure):
    """Delete a z/OS file system permanently."""
    _require_for_sure(for_sure)
    with get_client(ctx) as client:
        response = Delete(client).zfs(file_system_name)
    _emit_response(ctx, response)


# =============================================================================
# Download
# =============================================================================

@files.group()
def download():
    """Download data sets and USS files to local files."""
    pass


def _transfer_options(func):
    options = [
        click.option("--binary", "-b", is_flag=True, help="Transfer without data conversion"),
        click.option("--record", "-r", is_flag=True, help="Transfer in record mode"),
        click.option("--encoding", "--ec", help="Remote codepage, e.g. IBM-1047"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@download.command("data-set")
@click.argument("data_set_name")
@click.option("--file", "-f", "file_", help="Local file to write")
@click.option("--extension", "-e", help="File extension (default .txt)")
@click.option("--volume-serial", "--vs", help="Volume of an uncataloged data set")
@click.option("--preserve-original-letter-case", "--po", is_flag=True, help="Keep upper case names")
@click.option("--return-etag", "--etag", is_flag=True, help="Report the ETag of the data set")
@_transfer_options
@click.pass_context
@handle_errors
def download_data_set(ctx, data_set_name, file_, extension, volume_serial, preserve_original_letter_case,
                      return_etag, binary, record, encoding):
    """Download a sequential data set or member."""
    options = DownloadOptions(
        file=file_, extension=extension, volume=volume_serial, binary=binary, record=record,
        encoding=encoding, preserve_original_letter_case=preserve_original_letter_case,
        return_etag=return_etag,
    )
    with get_client(ctx) as client:
        response = Download(client).data_set(data_set_name, options)
    _emit_response(ctx, response)


@download.command("all-members")
@click.argument("data_set_name")
@click.option("--directory", "-d", help="Local directory for the members")
@click.option("--extension", "-e", help="File extension (default .txt)")
@click.option("--volume-serial", "--vs", help="Volume of an uncataloged data set")
@click.option("--preserve-original-letter-case", "--po", is_flag=True, help="Keep upper case names")
@_transfer_options
@click.pass_context
@handle_errors
def download_all_members(ctx, data_set_name, directory, extension, volume_serial, preserve_original_letter_case,
                         binary, record, encoding):
    """Download every member of a partitioned data set."""
    options = DownloadOptions(
        directory=directory, extension=extension, volume=volume_serial, binary=binary, record=record,
        encoding=encoding, preserve_original_letter_case=preserve_original_letter_case,
    )
    with get_client(ctx) as client:
        response = Download(client).all_members(data_set_name, options)
    _emit_response(ctx, response)


@download.command("data-set-matching")
@click.argument("pattern")
@click.option("--directory", "-d", help="Local directory for the data sets")
@click.option("--extension", "-e", help="File extension (default .txt)")
@click.option("--extension-map", "--em", help="Extensions per last qualifier, e.g. cobol=cbl,jcl=jcl")
@click.option("--fail-fast/--no-fail-fast", default=True, show_default=True, help="Stop at the first failure")
@click.option("--preserve-original-letter-case", "--po", is_flag=True, help="Keep upper case names")
@_transfer_options
@click.pass_context
@handle_errors
def download_data_set_matching(ctx, pattern, directory, extension, extension_map, fail_fast,
                               preserve_original_letter_case, binary, record, encoding):
    """Download all data sets matching a pattern."""
    mapping = None
    if extension_map:
        mapping = dict(pair.split("=", 1) for pair in extension_map.split(",") if "=" in pair)
    options = DownloadOptions(
        directory=directory, extension=extension, extension_map=mapping, binary=binary, record=record,
        encoding=encoding, preserve_original_letter_case=preserve_original_letter_case, fail_fast=fail_fast,
    )
    with get_client(ctx) as client:
        listing = List(client).data_sets(pattern, attributes=True)
        response = Download(client).all_data_sets(listing.api_response.get("items") or [], options)
    _emit_response(ctx, response)
    if not response.success:
        ctx.exit(1)


@download.command("uss-file")
@click.argument("path")
@click.option("--file", "-f", "file_", help="Local file to write")
@click.option("--return-etag", "--etag", is_flag=True, help="Report the ETag of the file")
@_transfer_options
@click.pass_context
@handle_errors
def download_uss_file(ctx, path, file_, return_etag, binary, record, encoding):
    """Download a USS file."""
    options = DownloadOptions(file=file_, binary=binary, record=record, encoding=encoding, return_etag=return_etag)
    with get_client(ctx) as client:
        response = Download(client).uss_file(path, options)
    _emit_response(ctx, response)


@download.command("uss-dir")
@click.argument("path")
@click.option("--directory", "-d", help="Local directory to download into")
@click.option("--depth", type=int, help="Levels of subdirectories to include")
@click.option("--filesys", is_flag=True, help="Include other mounted file systems")
@click.option("--symlinks", is_flag=True, help="Skip symbolic links instead of following them")
@click.option("--overwrite", "--ow", is_flag=True, help="Replace local files that already exist")
@click.option("--binary", "-b", is_flag=True, help="Transfer without data conversion")
@click.option("--encoding", "--ec", help="Remote codepage, e.g. IBM-1047")
@click.pass_context
@handle_errors
def download_uss_dir(ctx, path, directory, depth, filesys, symlinks, overwrite, binary, encoding):
    """Download a USS directory tree."""
    options = DownloadOptions(directory=directory, overwrite=overwrite, binary=binary, encoding=encoding)
    list_options = UssListOptions(depth=depth, filesys=filesys, symlinks=symlinks)
    with get_client(ctx) as client:
        response = Download(client).uss_dir(path, options, list_options)
    _emit_response(ctx, response)


# =============================================================================
# Upload
# =============================================================================

@files.group()
def upload():
    """Upload local content to data sets and USS files."""
    pass


@upload.command("file-to-data-set")
@click.argument("input_file")
@click.argument("data_set_name")
@click.option("--volume-serial", "--vs", help="Volume of an uncataloged data set")
@click.option("--return-etag", "--etag", is_flag=True, help="Report the ETag after the upload")
@_transfer_options
@click.pass_context
@handle_errors
def upload_file_to_data_set(ctx, input_file, data_set_name, volume_serial, return_etag, binary, record, encoding):
    """Upload a local file to a data set or member."""
    options = UploadOptions(binary=binary, record=record, encoding=encoding, volume=volume_serial,
                            return_etag=return_etag)
    with get_client(ctx) as client:
        response = Upload(client).file_to_data_set(input_file, data_set_name, options)
    _emit_response(ctx, response)


@upload.command("dir-to-pds")
@click.argument("input_dir")
@click.argument("data_set_name")
@_transfer_options
@click.pass_context
@handle_errors
def upload_dir_to_pds(ctx, input_dir, data_set_name, binary, record, encoding):
    """Upload the files of a local directory as PDS members."""
    options = UploadOptions(binary=binary, record=record, encoding=encoding)
    with get_client(ctx) as client:
        response = Upload(client).dir_to_pds(input_dir, data_set_name, options)
    _emit_response(ctx, response)


@upload.command("stdin-to-data-set")
@click.argument("data_set_name")
@_transfer_options
@click.pass_context
@handle_errors
def upload_stdin_to_data_set(ctx, data_set_name, binary, record, encoding):
    """Upload standard input to a data set or member."""
    buffer = click.get_binary_stream("stdin").read()
    options = UploadOptions(binary=binary, record=record, encoding=encoding)
    with get_client(ctx) as client:
        response = Upload(client).buffer_to_data_set(buffer, data_set_name, options)
    _emit_response(ctx, response)


@upload.command("file-to-uss")
@click.argument("input_file")
@click.argument("uss_path")
@click.option("--binary", "-b", is_flag=True, help="Transfer without data conversion")
@click.option("--encoding", "--ec", help="Remote codepage, e.g. IBM-1047")
@click.pass_context
@handle_errors
def upload_file_to_uss(ctx, input_file, uss_path, binary, encoding):
    """Upload a local file to a USS file."""
    with get_client(ctx) as client:
        response = Upload(client).file_to_uss_file(input_file, uss_path, UploadOptions(binary=binary, encoding=encoding))
    _emit_response(ctx, response)


# =============================================================================
# List
# =============================================================================

@files.group("list")
def list_group():
    """List data sets, members, USS files and file systems."""
    pass


@list_group.command("data-set")
@click.argument("pattern")
@click.option("--attributes", "-a", is_flag=True, help="Include data set attributes")
@click.option("--max-length", "--max", type=int, help="Maximum number of items")
@click.option("--start", "-s", help="First data set name to return")
@click.option("--volume-serial", "--vs", help="Restrict to a volume")
@click.pass_context
@handle_errors
def list_data_set(ctx, pattern, attributes, max_length, start, volume_serial):
    """List data sets matching a pattern."""
    with get_client(ctx) as client:
        response = List(client).data_sets(
            pattern, attributes=attributes, volume=volume_serial, start=start, max_length=max_length
        )
    items = response.api_response.get("items") or []
    emit(ctx, response.to_dict(), "\n".join(_describe(item, "dsname", attributes) for item in items))


@list_group.command("all-members")
@click.argument("data_set_name")
@click.option("--pattern", "-p", help="Member name pattern, e.g. ABC*")
@click.option("--attributes", "-a", is_flag=True, help="Include member statistics")
@click.option("--max-length", "--max", type=int, help="Maximum number of items")
@click.pass_context
@handle_errors
def list_all_members(ctx, data_set_name, pattern, attributes, max_length):
    """List the members of a partitioned data set."""
    with get_client(ctx) as client:
        response = List(client).all_members(data_set_name, pattern=pattern, attributes=attributes,
                                            max_length=max_length)
    items = response.api_response.get("items") or []
    emit(ctx, response.to_dict(), "\n".join(_describe(item, "member", attributes) for item in items))


@list_group.command("uss-files")
@click.argument("path")
@click.option("--depth", type=int, help="Levels of subdirectories to include")
@click.option("--filesys", is_flag=True, help="Include other mounted file systems")
@click.option("--symlinks", is_flag=True, help="Report symbolic links instead of following them")
@click.option("--name", "-n", help="File name pattern")
@click.option("--max-length", "--max", type=int, help="Maximum number of items")
@click.pass_context
@handle_errors
def list_uss_files(ctx, path, depth, filesys, symlinks, name, max_length):
    """List the files of a USS directory."""
    options = UssListOptions(depth=depth, filesys=filesys, symlinks=symlinks, name=name, max_length=max_length)
    with get_client(ctx) as client:
        response = List(client).uss_files(path, options)
    items = response.api_response.get("items") or []
    emit(ctx, response.to_dict(), "\n".join(f"{item.get('mode', ''):<11} {item.get('name', '')}" for item in items))


@list_group.command("fs")
@click.option("--fsname", "-f", help="File system name")
@click.option("--path", "-p", help="Path inside a mounted file system")
@click.pass_context
@handle_errors
def list_fs(ctx, fsname, path):
    """List mounted file systems."""
    with get_client(ctx) as client:
        response = List(client).file_systems(fsname=fsname, path=path)
    items = response.api_response.get("items") or []
    emit(ctx, response.to_dict(), "\n".join(f"{item.get('name', '')}  {item.get('mountpoint', '')}" for item in items))


def _describe(item, key, attributes) -> str:
    if not attributes:
        return str(item.get(key, ""))
    extras = "  ".join(f"{k}={v}" for k, v in item.items() if k != key)
    return f"{item.get(key, '')}  {extras}"


# =============================================================================
# Invoke / Mount / Unmount
# =============================================================================

@files.group()
def invoke():
    """Run IDCAMS control statements."""
    pass


@invoke.command("ams-statements")
@click.argument("statements", nargs=-1, required=True)
@click.pass_context
@handle_errors
def invoke_ams_statements(ctx, statements):
    """Submit AMS statements given on the command line."""
    with get_client(ctx) as client:
        response = Invoke(client).ams(list(statements))
    output = (response.api_response or {}).get("output") if isinstance(response.api_response, dict) else None
    emit(ctx, response.to_dict(), "\n".join(output) if output else response.command_response)


@invoke.command("ams-file")
@click.argument("control_statements_file")
@click.pass_context
@handle_errors
def invoke_ams_file(ctx, control_statements_file):
    """Submit AMS statements read from a local file."""
    with get_client(ctx) as client:
        response = Invoke(client).ams(control_statements_file)
    output = (response.api_response or {}).get("output") if isinstance(response.api_response, dict) else None
    emit(ctx, response.to_dict(), "\n".join(output) if output else response.command_response)


@files.group()
def mount():
    """Mount file systems."""
    pass


@mount.command("fs")
@click.argument("file_system_name")
@click.argument("mount_point")
@click.option("--fs-type", "--ft", default="ZFS", show_default=True, help="File system type")
@click.option("--mode", "-m", type=click.Choice(["rdonly", "rdwr"]), default="rdonly", show_default=True,
              help="Mount mode")
@click.pass_context
@handle_errors
def mount_fs(ctx, file_system_name, mount_point, fs_type, mode):
    """Mount a UNIX file system on a mount point."""
    with get_client(ctx) as client:
        response = Mount(client).fs(file_system_name, mount_point, fs_type, mode)
    _emit_response(ctx, response)


@files.group()
def unmount():
    """Unmount file systems."""
    pass


@unmount.command("fs")
@click.argument("file_system_name")
@click.pass_context
@handle_errors
def unmount_fs(ctx, file_system_name):
    """Unmount a UNIX file system."""
    with get_client(ctx) as client:
        response = Unmount(client).fs(file_system_name)
    _emit_response(ctx, response)

