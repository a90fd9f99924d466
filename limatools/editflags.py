"""Turning instance-editing flags into yq expressions, and flag completions."""

from __future__ import annotations

import ipaddress
import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

log = logging.getLogger(__name__)


def _quote(value: Any) -> str:
    return json.dumps(str(value), ensure_ascii=False)


def _format_bool(value: Any) -> str:
    return "true" if value else "false"


def _format_number(value: Any) -> str:
    if isinstance(value, bool):
        return _format_bool(value)
    if isinstance(value, int):
        return str(value)
    number = float(value)
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return repr(number)


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item for item in value.split(",") if item]
    return [str(item) for item in value]


def _flag_string(value: Any) -> str:
    if isinstance(value, bool):
        return _format_bool(value)
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(str(item) for item in value) + "]"
    return str(value)


def _dns(value: Any) -> str:
    addresses = []
    for item in _as_list(value):
        try:
            addresses.append(str(ipaddress.ip_address(item.strip())))
        except ValueError as exc:
            raise ValueError(f"invalid IP address {item!r}") from exc
    log.warning(
        "Disabling HostResolver, as custom DNS addresses (%s) are specified", addresses
    )
    joined = ",".join(_quote(addr) for addr in addresses)
    return f".dns += [{joined}] | .dns |= unique | .hostResolver.enabled=false"


def _mount(value: Any) -> str:
    entries = []
    for item in _as_list(value):
        writable = item.endswith(":w")
        location = item.removesuffix(":w")
        entries.append(
            f'{{"location": {_quote(location)}, "writable": {_format_bool(writable)}}}'
        )
    return ".mounts += [" + ",".join(entries) + "] | .mounts |= unique_by(.location)"


def _network(value: Any) -> str:
    entries = []
    for item in _as_list(value):
        if item == "vzNAT":
            entries.append('{"vzNAT": true}')
        elif item.startswith("lima:"):
            entries.append(f'{{"lima": {_quote(item.removeprefix("lima:"))}}}')
        else:
            raise ValueError(f'network name must be "vzNAT" or "lima:*", got {item!r}')
    return ".networks += [" + ",".join(entries) + "] | .networks |= unique_by(.lima)"


def _rosetta(value: Any) -> str:
    b = _format_bool(value)
    return f".rosetta.enabled = {b} | .rosetta.binfmt = {b}"


def _video(value: Any) -> str:
    return '.video.display = "default"' if value else '.video.display = "none"'


_CONTAINERD = {
    "user": ".containerd.user = true | .containerd.system = false",
    "system": ".containerd.user = false | .containerd.system = true",
    "user+system": ".containerd.user = true | .containerd.system = true",
    "system+user": ".containerd.user = true | .containerd.system = true",
    "none": ".containerd.user = false | .containerd.system = false",
}


def _containerd(value: Any) -> str:
    try:
        return _CONTAINERD[str(value)]
    except KeyError:
        raise ValueError(
            f'expected one of ["user", "system", "user+system", "none"], got {value!r}'
        ) from None


@dataclass(frozen=True)
class _Def:
    flag_name: str
    expr: Callable[[Any], str]
    only_new_instances: bool = False
    experimental: bool = False


_DEFS = (
    _Def("cpus", lambda v: f".cpus = {_format_number(v)}"),
    _Def("dns", _dns),
    _Def("memory", lambda v: f'.memory = "{_format_number(v)}GiB"'),
    _Def("mount", _mount),
    _Def("mount-type", lambda v: f".mountType = {_quote(v)}"),
    _Def("mount-writable", lambda v: f".mounts[].writable = {_format_bool(v)}"),
    _Def("network", _network),
    _Def("rosetta", _rosetta, experimental=True),
    _Def("set", str),
    _Def("video", _video),
    _Def("arch", lambda v: f".arch = {_quote(v)}", only_new_instances=True),
    _Def("containerd", _containerd, only_new_instances=True),
    _Def("disk", lambda v: f'.disk= "{_format_number(v)}GiB"', only_new_instances=True),
    _Def("vm-type", lambda v: f".vmType = {_quote(v)}", only_new_instances=True),
    _Def("plain", lambda v: f".plain = {_format_bool(v)}", only_new_instances=True),
)


def yq_expressions(flags: Mapping[str, Any], new_instance: bool) -> list[str]:
    """Return yq expressions for the flags that were set.

    *flags* maps the names of the flags given on the command line to their
    values. Flags that only apply to new instances are skipped, with a
    warning, when *new_instance* is false.
    """
    exprs = []
    for definition in _DEFS:
        if definition.flag_name not in flags:
            continue
        value = flags[definition.flag_name]
        name = definition.flag_name
        if definition.experimental:
            log.warning("`--%s` is experimental", name)
        if definition.only_new_instances and not new_instance:
            log.warning(
                "`--%s` is not applicable to an existing instance "
                "(Hint: create a new instance with `limactl create --%s=%s --name=NAME`)",
                name,
                name,
                _flag_string(value),
            )
            continue
        try:
            exprs.append(definition.expr(value))
        except ValueError as exc:
            raise ValueError(f"error while processing flag {name!r}: {exc}") from exc
    return exprs


def _is_power_of_two(x: int) -> bool:
    return x > 0 and x & (x - 1) == 0


def _powers_of_two_up_to(limit: int) -> list[int]:
    result = []
    i = 1
    while i <= limit:
        result.append(i)
        i *= 2
    return result


def complete_cpus(host_cpus: int) -> list[int]:
    """Return CPU counts to offer: powers of two up to *host_cpus*, then *host_cpus*."""
    result = _powers_of_two_up_to(host_cpus)
    if not _is_power_of_two(host_cpus):
        result.append(host_cpus)
    return result


def complete_memory_gib(host_memory: int) -> list[float]:
    """Return memory sizes in GiB to offer, up to half of *host_memory* bytes."""
    half_gib = host_memory // 2 // 1024 // 1024 // 1024
    result: list[float] = []
    if half_gib < 1:
        result.append(0.5)
    result.extend(float(i) for i in _powers_of_two_up_to(half_gib))
    if half_gib > 1 and not _is_power_of_two(half_gib):
        result.append(float(half_gib))
    return result