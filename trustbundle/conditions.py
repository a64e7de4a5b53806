"""Bundle status conditions and the default CA version recorded in a bundle's status."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable, List, Optional

Clock = Callable[[], datetime]


class ConditionStatus(str, enum.Enum):
    """The status of a condition."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class BundleCondition:
    """One condition reported on a bundle's status."""

    type: str = ""
    status: str = ""
    reason: str = ""
    message: str = ""
    last_transition_time: Optional[datetime] = None
    observed_generation: int = 0


@dataclass
class BundleStatus:
    """The observed state of a bundle."""

    conditions: List[BundleCondition] = field(default_factory=list)
    default_ca_package_version: Optional[str] = None


def _now() -> datetime:
    return datetime.now(timezone.utc)


def bundle_has_condition(
    existing_conditions: List[BundleCondition],
    search_condition: BundleCondition,
) -> bool:
    """Return True if a condition of the same type matches in every field but the transition time."""
    for existing in existing_conditions:
        if existing.type == search_condition.type:
            return (
                existing.status == search_condition.status
                and existing.reason == search_condition.reason
                and existing.message == search_condition.message
                and existing.observed_generation == search_condition.observed_generation
            )
    return False


def set_bundle_condition(
    existing_conditions: List[BundleCondition],
    patch_conditions: List[BundleCondition],
    new_condition: BundleCondition,
    clock: Optional[Clock] = None,
) -> BundleCondition:
    """Put ``new_condition`` into ``patch_conditions``, replacing one of the same type.

    The transition time is the clock's current time, unless an existing
    condition of the same type already has the same status, in which case
    its transition time is kept.
    """
    transition_time = (clock or _now)()
    for existing in existing_conditions:
        if existing.type == new_condition.type and existing.status == new_condition.status:
            transition_time = existing.last_transition_time

    condition = replace(new_condition, last_transition_time=transition_time)

    for idx, existing in enumerate(patch_conditions):
        if existing.type == condition.type:
            patch_conditions[idx] = condition
            return condition

    patch_conditions.append(condition)
    return condition


def set_bundle_status_default_ca_version(status: BundleStatus, required_id: str) -> bool:
    """Make the status reflect ``required_id``; return True if the status changed."""
    current = status.default_ca_package_version

    if not required_id:
        if current is None:
            return False
        status.default_ca_package_version = None
        return True

    if current is None or current != required_id:
        status.default_ca_package_version = required_id
        return True

    return False