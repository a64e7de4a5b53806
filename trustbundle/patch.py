"""Server-side apply patches for bundle status and managed-field entries."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from trustbundle.conditions import BundleCondition, BundleStatus

FIELD_MANAGER = "trust-manager"
APPLY_PATCH_TYPE = "application/apply-patch+yaml"
BUNDLE_KIND = "Bundle"
BUNDLE_API_VERSION = "trust.cert-manager.io/v1alpha1"

_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


@dataclass(frozen=True)
class ApplyPatch:
    """An apply patch carrying its already-encoded body."""

    patch: bytes

    def data(self, obj: Any = None) -> bytes:
        """Return the encoded patch body."""
        return self.patch

    def patch_type(self) -> str:
        """Return the content type of an apply patch."""
        return APPLY_PATCH_TYPE


def _text(value: Any) -> str:
    return value.value if isinstance(value, enum.Enum) else value


def _format_time(moment: Optional[datetime]) -> Optional[str]:
    if moment is None:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _condition_to_json(condition: BundleCondition) -> Dict[str, Any]:
    encoded: Dict[str, Any] = {
        "type": condition.type,
        "status": _text(condition.status),
        "lastTransitionTime": _format_time(condition.last_transition_time),
        "reason": condition.reason,
    }
    if condition.message:
        encoded["message"] = condition.message
    if condition.observed_generation:
        encoded["observedGeneration"] = condition.observed_generation
    return encoded


def _status_to_json(status: BundleStatus) -> Dict[str, Any]:
    encoded: Dict[str, Any] = {}
    if status.conditions:
        encoded["conditions"] = [_condition_to_json(c) for c in status.conditions]
    if status.default_ca_package_version is not None:
        encoded["defaultCAVersion"] = status.default_ca_package_version
    return encoded


def _encode(document: Dict[str, Any]) -> bytes:
    text = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
    for char, escaped in _ESCAPES.items():
        text = text.replace(char, escaped)
    return text.encode("utf-8")


def generate_bundle_status_patch(name: str, status: Optional[BundleStatus]) -> ApplyPatch:
    """Build an apply patch that sets the status of the named bundle."""
    document: Dict[str, Any] = {
        "kind": BUNDLE_KIND,
        "apiVersion": BUNDLE_API_VERSION,
        "metadata": {"name": name},
    }
    if status is not None:
        document["status"] = _status_to_json(status)
    return ApplyPatch(_encode(document))


def managed_field_entries(
    fields: Iterable[str], data_fields: Iterable[str]
) -> List[Dict[str, Any]]:
    """Return the managed-field entry owning the given ``data`` and ``binaryData`` keys."""
    groups = {"data": set(fields), "binaryData": set(data_fields)}
    field_set = {
        f"f:{group}": {f"f:{key}": {} for key in sorted(keys)}
        for group, keys in sorted(groups.items())
        if keys
    }
    return [
        {
            "manager": FIELD_MANAGER,
            "operation": "Apply",
            "fieldsV1": field_set,
        }
    ]