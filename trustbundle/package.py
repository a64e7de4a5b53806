"""Default CA packages read from JSON files on the filesystem."""

from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass, replace
from typing import IO, Union

from cryptography import x509

REQUIRED_EXT = ".json"

_FIELDS = ("name", "bundle", "version")


class PackageError(Exception):
    """A package could not be read or failed validation."""


@dataclass
class Package:
    """A named, versioned bundle of PEM-encoded certificates."""

    name: str = ""
    bundle: str = ""
    version: str = ""

    def string_id(self) -> str:
        """Return a readable ID that tells one package from another."""
        digest = hashlib.sha256(self.bundle.encode("utf-8")).digest()
        return f"{self.name}-{self.version}-{digest[:8].hex()}"

    def clone(self) -> "Package":
        """Return a copy of this package."""
        return replace(self)

    def validate(self) -> None:
        """Raise PackageError unless the package holds valid certificates, a name and a version."""
        try:
            x509.load_pem_x509_certificates(self.bundle.encode("utf-8"))
        except ValueError as exc:
            raise PackageError(f"package bundle failed validation: {exc}") from exc

        if not self.name:
            raise PackageError("package may not have an empty 'name'")
        if not self.version:
            raise PackageError("package may not have an empty 'version'")


def _decode_package(text: str) -> Package:
    try:
        document, _ = json.JSONDecoder().raw_decode(text.lstrip())
    except json.JSONDecodeError as exc:
        raise PackageError(f"failed to parse package JSON: {exc}") from exc

    if document is None:
        return Package()
    if not isinstance(document, dict):
        raise PackageError(
            f"failed to parse package JSON: cannot decode {type(document).__name__} into a package"
        )

    values = {}
    for key, value in document.items():
        field_name = key if key in _FIELDS else key.lower()
        if field_name not in _FIELDS or value is None:
            continue
        if not isinstance(value, str):
            raise PackageError(f"failed to parse package JSON: field {key!r} must be a string")
        values[field_name] = value
    return Package(**values)


def load_package(reader: IO[Union[str, bytes]]) -> Package:
    """Read and validate a package from a text or binary stream."""
    content = reader.read()
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    package = _decode_package(content)
    package.validate()
    return package


def _extension(path: str) -> str:
    base = os.path.basename(path)
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def load_package_from_file(path: Union[str, os.PathLike]) -> Package:
    """Read and validate a package from a ``.json`` file."""
    path = os.fspath(path)
    if _extension(path) != REQUIRED_EXT:
        raise PackageError(
            f"can't load package at path {path!r} since it doesn't have the required "
            f"{REQUIRED_EXT!r} extension"
        )

    try:
        handle = open(path, "rb")
    except OSError as exc:
        raise PackageError(f"failed to open package on filesystem {path!r}: {exc}") from exc

    with handle:
        try:
            return load_package(handle)
        except PackageError as exc:
            raise PackageError(f"failed to load package {path!r}: {exc}") from exc