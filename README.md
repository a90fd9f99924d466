# limatools

Building blocks for tools that create and manage Linux virtual machine
instances. The package is a library of plain functions and dataclasses; it
needs nothing beyond the standard library.

## Modules

- `limatools.identifiers` – `validate()` checks instance, user and disk names
  and raises `InvalidIdentifierError` (a `ValueError`) for bad ones.
- `limatools.guessarg` – tells what an instance argument refers to:
  `seems_template_url()`, `seems_http_url()`, `seems_file_url()`,
  `seems_yaml_path()`, and derives instance names with `inst_name_from_url()`
  and `inst_name_from_yaml_path()`.
- `limatools.editflags` – `yq_expressions()` turns edit flags (`cpus`, `dns`,
  `memory`, `mount`, `mount-type`, `mount-writable`, `network`, `rosetta`,
  `set`, `video`, and for new instances only `arch`, `containerd`, `disk`,
  `vm-type`, `plain`) into yq expressions; `complete_cpus()` and
  `complete_memory_gib()` suggest values for shell completion.
- `limatools.shell` – builds the script run over ssh for an interactive shell:
  `strip_double_dash()`, `build_change_dir_cmd()`, `build_shell_script()`,
  `is_env()` and `quote_env()`.
- `limatools.cidata` – cloud-init data: dataclasses for the template arguments
  (`TemplateArgs`, `Mount`, `Disk`, `Network`, `CACerts`, `Cert`, `BootCmds`,
  `Containerd`, `Provision`, `Entry`), `validate_template_args()`,
  `setup_env()` for the guest proxy environment, `get_cert()`,
  `get_boot_cmds()`, `disk_device_name_from_order()` and `write_cidata_dir()`.
- `limatools.disk` – `ram_in_bytes()`, `bytes_size()`, `validate_disk_format()`,
  `disk_matches()`, `force_delete_command()` and `check_resize()`.
- `limatools.listing` – `instance_matches()`, `select_names()` and
  `resolve_list_format()` for choosing what to list and how.
- `limatools.snapshot` – `snapshot_tags()` reads tags from a snapshot listing
  and raises `UnknownHeaderError` on an unexpected header.
- `limatools.editorcmd` – `detect()` finds a text editor ($VISUAL, $EDITOR,
  then `editor`, `vim`, `vi`, `emacs`).
- `limatools.editutil` – `open_editor()` lets the user edit content below a
  header; `file_warning()` and `generate_editor_warning_header()` build that header.
- `limatools.executil` – `run_utf16le_command()` runs a command whose output is
  UTF-16LE and returns it decoded; `decode_utf16le()` does the decoding.
- `limatools.bicopy` – `bicopy()` copies between two sockets or binary streams
  in both directions, then closes both and returns the byte counts.

## Installation

Install it with pip from a checkout of this project, adding the `test` extra
if you want to run the test suite with pytest.

## Examples

Guess what an argument means:

```python
from limatools import guessarg

guessarg.seems_http_url("https://example.com/templates/alpine.yaml")  # True
guessarg.seems_yaml_path("fedora.yaml")                               # True
guessarg.inst_name_from_yaml_path("/tmp/ubuntu.lts.yaml")             # "ubuntu-lts"
```

```python
from limatools import identifiers

identifiers.validate("default")   # accepted
identifiers.validate("bad name")  # raises InvalidIdentifierError
```

Edit flags as yq expressions; flags only valid for new instances are skipped
with a warning otherwise:

```python
from limatools import editflags

editflags.yq_expressions({"cpus": 2, "memory": 4}, new_instance=False)
# ['.cpus = 2', '.memory = "4GiB"']

editflags.complete_cpus(20)               # [1, 2, 4, 8, 16, 20]
editflags.complete_memory_gib(20 << 30)   # [1.0, 2.0, 4.0, 8.0, 10.0]
```

Build the remote shell script:

```python
from limatools import shell

cd = shell.build_change_dir_cmd("", True, "/home/me", "/home/me")
shell.build_shell_script(cd, "", ["FOO=1", "ls", "-l"])
# 'cd /home/me || cd /home/me ; exec "$SHELL" --login -c \'FOO=1 ls -l\''

shell.quote_env("FOO=bar baz")  # "FOO='bar baz'"
```

Proxy settings for the guest, with loopback hosts replaced by the gateway:

```python
from limatools import cidata

env = cidata.setup_env(
    {"http_proxy": "http://localhost:8080"},
    False,
    "192.168.5.2",
    environ={},
    lookup_ip=lambda host: ["127.0.0.1"],
)
env["http_proxy"]  # "http://192.168.5.2:8080"
env["HTTP_PROXY"]  # "http://192.168.5.2:8080"

cidata.disk_device_name_from_order(0)  # "vdb"
```

Disk sizes, listing and snapshots:

```python
from limatools import disk, listing, snapshot

disk.ram_in_bytes("10GiB")          # 10737418240
disk.bytes_size(10737418240)        # "10GiB"
disk.force_delete_command("data")   # "limactl disk delete --force data"

listing.resolve_list_format("table", False, True, False, False)  # "json"

snapshot.snapshot_tags("ID TAG VM SIZE\n1 snap1 1.2G\n")  # ["snap1"]
```

## What it does not do

The package has no command-line program of its own and does not start, stop
or run virtual machines. It does not download or cache images, render the
cloud-init templates or write an ISO image: `cidata` prepares template
arguments, the environment and a data directory from entries you supply.
It does not keep a store of instances or disks; the listing, disk and
snapshot helpers work on names, sizes and text you pass in.