"""Cloud-init data for an instance: template arguments, environment and layout."""

from __future__ import annotations

import ipaddress
import logging
import os
import posixpath
import shutil
import socket
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import BinaryIO
from urllib.parse import SplitResult, urlsplit

from limatools.identifiers import validate

log = logging.getLogger(__name__)

PROVISION_MODE_SYSTEM = "system"
PROVISION_MODE_USER = "user"
PROVISION_MODE_BOOT = "boot"
PROVISION_MODE_DEPENDENCY = "dependency"

_LOWER_PROXY_VARS = ("ftp_proxy", "http_proxy", "https_proxy", "no_proxy")
_UPPER_PROXY_VARS = tuple(name.upper() for name in _LOWER_PROXY_VARS)


@dataclass
class Cert:
    """A certificate, as its non-empty lines."""

    lines: list[str] = field(default_factory=list)


@dataclass
class CACerts:
    """CA certificates to trust in the guest."""

    remove_defaults: bool | None = None
    trusted: list[Cert] = field(default_factory=list)


@dataclass
class Containerd:
    """Which containerd instances to run."""

    system: bool = False
    user: bool = False


@dataclass
class Network:
    """A guest network interface."""

    mac_address: str = ""
    interface: str = ""


@dataclass
class Mount:
    """A host directory mounted in the guest."""

    tag: str = ""
    mount_point: str = ""
    type: str = ""
    options: str = ""


@dataclass
class BootCmds:
    """Commands run at each boot, one per line."""

    lines: list[str] = field(default_factory=list)


@dataclass
class Disk:
    """An additional disk attached to the guest."""

    name: str = ""
    device: str = ""
    format: bool = True
    fs_type: str = ""
    fs_args: list[str] = field(default_factory=list)


@dataclass
class TemplateArgs:
    """Values the cloud-init templates are rendered with."""

    name: str = ""
    iid: str = ""
    user: str = ""
    home: str = ""
    uid: int = 0
    ssh_pub_keys: list[str] = field(default_factory=list)
    mounts: list[Mount] = field(default_factory=list)
    mount_type: str = ""
    disks: list[Disk] = field(default_factory=list)
    guest_install_prefix: str = ""
    containerd: Containerd = field(default_factory=Containerd)
    networks: list[Network] = field(default_factory=list)
    slirp_nic_name: str = ""
    slirp_gateway: str = ""
    slirp_dns: str = ""
    slirp_ip_address: str = ""
    udp_dns_local_port: int = 0
    tcp_dns_local_port: int = 0
    env: dict[str, str] = field(default_factory=dict)
    dns_addresses: list[str] = field(default_factory=list)
    ca_certs: CACerts = field(default_factory=CACerts)
    host_home_mount_point: str = ""
    boot_cmds: list[BootCmds] = field(default_factory=list)
    rosetta_enabled: bool = False
    rosetta_bin_fmt: bool = False
    skip_default_dependency_resolution: bool = False
    vm_type: str = ""
    vsock_port: int = 0
    plain: bool = False


@dataclass
class Provision:
    """A provisioning script and the mode it runs in."""

    mode: str
    script: str = ""
    skip_default_dependency_resolution: bool = False


@dataclass
class Entry:
    """A file of the cloud-init layout: its relative path and a binary reader."""

    path: str
    reader: BinaryIO


def validate_template_args(args: TemplateArgs) -> None:
    """Raise ValueError if *args* cannot be used to render the templates."""
    validate(args.name)
    validate(args.user)
    if args.user == "root":
        raise ValueError('field User must not be "root"')
    if args.uid == 0:
        raise ValueError("field UID must not be 0")
    if not args.home:
        raise ValueError("field Home must be set")
    if not args.ssh_pub_keys:
        raise ValueError("field SSHPubKeys must be set")
    for index, mount in enumerate(args.mounts):
        if not posixpath.isabs(mount.mount_point):
            raise ValueError(
                f"field mounts[{index}] must be absolute, got {mount.mount_point!r}"
            )


def _default_lookup_ip(host: str) -> list[str]:
    try:
        infos = socket.getaddrinfo(host, None)
    except (OSError, UnicodeError) as exc:
        log.debug("lookup %s: %s", host, exc)
        return []
    return [info[4][0] for info in infos]


def _parse_proxy_url(value: str) -> SplitResult:
    if value.startswith(":"):
        raise ValueError("missing protocol scheme")
    parsed = urlsplit(value)
    if not parsed.scheme and ":" in parsed.path.split("/", 1)[0]:
        raise ValueError("first path segment in URL cannot contain colon")
    parsed.port  # raises ValueError on an invalid port
    return parsed


def _is_loopback(ip: object) -> bool:
    try:
        return ipaddress.ip_address(str(ip).split("%", 1)[0]).is_loopback
    except ValueError:
        return False


def _join_host_port(host: str, port: str) -> str:
    if ":" in host:
        host = f"[{host}]"
    return f"{host}:{port}" if port else host


def _replace_loopback(
    value: str, gateway: str, lookup_ip: Callable[[str], Iterable[object]]
) -> str:
    parsed = _parse_proxy_url(value)
    port = "" if parsed.port is None else str(parsed.port)
    userinfo, at, _ = parsed.netloc.rpartition("@")
    for ip in lookup_ip(parsed.hostname or ""):
        if _is_loopback(ip):
            netloc = (userinfo + at) + _join_host_port(gateway, port)
            value = parsed._replace(netloc=netloc).geturl()
    return value


def setup_env(
    env: Mapping[str, str] | None,
    propagate_proxy_env: bool,
    slirp_gateway: str,
    *,
    proxy_settings: Mapping[str, str] | None = None,
    environ: Mapping[str, str] | None = None,
    lookup_ip: Callable[[str], Iterable[object]] | None = None,
) -> dict[str, str]:
    """Compute the guest environment, with proxy settings adapted to the guest.

    System *proxy_settings* are overridden by *env*, which is overridden by the
    proxy variables of *environ* when *propagate_proxy_env* is set. Empty proxy
    values are dropped, loopback proxy hosts are replaced by *slirp_gateway*,
    and upper- and lower-case variants are made equal (lower case wins).
    """
    if environ is None:
        environ = os.environ
    if lookup_ip is None:
        lookup_ip = _default_lookup_ip
    result = dict(proxy_settings or {})
    result.update(env or {})
    all_vars = _LOWER_PROXY_VARS + _UPPER_PROXY_VARS

    if propagate_proxy_env:
        for name in all_vars:
            if name in environ:
                value = environ[name]
                if name in result and result[name] != value:
                    log.info(
                        "Overriding %r value %r with %r from limactl process environment",
                        name,
                        result[name],
                        value,
                    )
                result[name] = value

    for name in all_vars:
        if name not in result:
            continue
        value = result[name]
        if value == "":
            del result[name]
            continue
        if name.lower() == "no_proxy":
            continue
        try:
            new_value = _replace_loopback(value, slirp_gateway, lookup_ip)
        except ValueError as exc:
            log.warning("Ignoring invalid proxy %r=%s: %s", name, value, exc)
            continue
        if new_value != value:
            log.info("Replacing %r value %r with %r", name, value, new_value)
            result[name] = new_value

    for lower in _LOWER_PROXY_VARS:
        upper = lower.upper()
        if lower in result:
            if upper in result and result[upper] != result[lower]:
                log.warning(
                    "Changing %r value from %r to %r to match %r",
                    upper,
                    result[upper],
                    result[lower],
                    lower,
                )
            result[upper] = result[lower]
        elif upper in result:
            result[lower] = result[upper]
    return result


def _script_lines(content: str) -> list[str]:
    return [line.strip() for line in content.split("\n") if line != ""]


def get_cert(content: str) -> Cert:
    """Split a PEM certificate into its non-empty, stripped lines."""
    return Cert(lines=_script_lines(content))


def get_boot_cmds(provisions: Iterable[Provision]) -> list[BootCmds]:
    """Return the boot commands of the provisions in boot mode."""
    return [
        BootCmds(lines=_script_lines(p.script))
        for p in provisions
        if p.mode == PROVISION_MODE_BOOT
    ]


def disk_device_name_from_order(order: int) -> str:
    """Return the guest device name of the additional disk at *order* (0 is "vdb")."""
    return "vd" + chr(ord("b") + order)


def write_cidata_dir(root_path: str | os.PathLike, layout: Iterable[Entry]) -> None:
    """Write *layout* as files under *root_path*, replacing what was there."""
    entries = sorted(layout, key=lambda e: e.path.lower())
    root = os.fspath(root_path)
    if os.path.isdir(root) and not os.path.islink(root):
        shutil.rmtree(root)
    elif os.path.lexists(root):
        os.remove(root)
    for entry in entries:
        directory = posixpath.dirname(entry.path) or "."
        if directory != "/":
            os.makedirs(os.path.join(root, directory), mode=0o700, exist_ok=True)
        fd = os.open(os.path.join(root, entry.path), os.O_CREAT | os.O_RDWR, 0o700)
        with os.fdopen(fd, "wb") as handle:
            shutil.copyfileobj(entry.reader, handle)