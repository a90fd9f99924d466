"""Guess what kind of thing a command-line argument names."""

from __future__ import annotations

import os
from urllib.parse import SplitResult, urlsplit

from limatools.identifiers import InvalidIdentifierError, validate


def _parse(arg: str) -> SplitResult | None:
    try:
        return urlsplit(arg)
    except ValueError:
        return None


def _base(path: str, separators: str = "/") -> str:
    """Return the last element of *path*, ignoring trailing separators."""
    if not path:
        return "."
    stripped = path.rstrip(separators)
    if not stripped:
        return separators[0]
    last = stripped
    for sep in separators:
        last = last.rsplit(sep, 1)[-1]
    return last


def seems_template_url(arg: str) -> tuple[bool, SplitResult | None]:
    """Return whether *arg* is a ``template://`` URL, with the parsed URL."""
    parsed = _parse(arg)
    return (parsed is not None and parsed.scheme == "template", parsed)


def seems_http_url(arg: str) -> bool:
    """Return whether *arg* is an http or https URL."""
    parsed = _parse(arg)
    return parsed is not None and parsed.scheme in ("http", "https")


def seems_file_url(arg: str) -> bool:
    """Return whether *arg* is a ``file://`` URL."""
    parsed = _parse(arg)
    return parsed is not None and parsed.scheme == "file"


def seems_yaml_path(arg: str) -> bool:
    """Return whether *arg* looks like a path to a YAML file."""
    if "/" in arg:
        return True
    lower = arg.lower()
    return lower.endswith(".yml") or lower.endswith(".yaml")


def inst_name_from_url(url: str) -> str:
    """Derive an instance name from the last path element of *url*."""
    parsed = urlsplit(url)
    return inst_name_from_yaml_path(_base(parsed.path))


def inst_name_from_yaml_path(yaml_path: str) -> str:
    """Derive an instance name from the file name of *yaml_path*."""
    separators = os.sep + (os.altsep or "")
    name = _base(os.fspath(yaml_path), separators).lower()
    name = name.removesuffix(".yml").removesuffix(".yaml")
    name = name.replace(".", "-")
    try:
        validate(name)
    except InvalidIdentifierError as exc:
        raise InvalidIdentifierError(f"filename {yaml_path!r} is invalid: {exc}") from exc
    return name