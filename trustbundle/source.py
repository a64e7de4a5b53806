"""Reading certificate data from ConfigMap and Secret sources."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

SECRET_TYPE_TLS = "kubernetes.io/tls"


class SourceError(Exception):
    """A bundle source could not be read."""


class NotFoundError(SourceError):
    """The referenced object or key does not exist."""


class SelectsNothingError(SourceError):
    """A label selector matched no objects; not a failure in itself."""


class InvalidSecretSourceError(SourceError):
    """A Secret cannot be used as a source in the way requested."""


class Operator(str, enum.Enum):
    IN = "In"
    NOT_IN = "NotIn"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"


@dataclass(frozen=True)
class LabelSelector:
    """Selects objects by exact labels and set-based expressions."""

    match_labels: Mapping[str, str] = field(default_factory=dict)
    match_expressions: Sequence[Tuple[str, str, Sequence[str]]] = ()

    def __post_init__(self) -> None:
        for key, op, values in self.match_expressions:
            operator = Operator(op)
            if operator in (Operator.IN, Operator.NOT_IN) and not values:
                raise SourceError(f"values: Invalid value: {operator.value} requires values")
            if operator in (Operator.EXISTS, Operator.DOES_NOT_EXIST) and values:
                raise SourceError(f"values: Invalid value: {operator.value} forbids values")

    def matches(self, labels: Mapping[str, str]) -> bool:
        """Return True if the labels satisfy every requirement."""
        for key, value in self.match_labels.items():
            if labels.get(key) != value:
                return False
        for key, op, values in self.match_expressions:
            operator = Operator(op)
            present = key in labels
            if operator is Operator.IN and not (present and labels[key] in values):
                return False
            if operator is Operator.NOT_IN and present and labels[key] in values:
                return False
            if operator is Operator.EXISTS and not present:
                return False
            if operator is Operator.DOES_NOT_EXIST and present:
                return False
        return True

    def __str__(self) -> str:
        parts = [f"{k}={v}" for k, v in self.match_labels.items()]
        for key, op, values in self.match_expressions:
            operator = Operator(op)
            joined = ",".join(sorted(values))
            if operator is Operator.IN:
                parts.append(f"{key} in ({joined})")
            elif operator is Operator.NOT_IN:
                parts.append(f"{key} notin ({joined})")
            elif operator is Operator.EXISTS:
                parts.append(key)
            else:
                parts.append(f"!{key}")
        return ",".join(sorted(parts))


@dataclass
class ConfigMap:
    name: str
    namespace: str
    data: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)


@dataclass
class Secret:
    name: str
    namespace: str
    data: Dict[str, bytes] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    type: str = "Opaque"


@dataclass
class SourceObjectKeySelector:
    """Refers to objects by name or selector, and to a key or all keys in them."""

    name: str = ""
    selector: Optional[LabelSelector] = None
    key: str = ""
    include_all_keys: bool = False


class SourceReader:
    """Reads bundle data from the objects held in the trust namespace."""

    def __init__(
        self,
        namespace: str,
        config_maps: Sequence[ConfigMap] = (),
        secrets: Sequence[Secret] = (),
    ) -> None:
        self.namespace = namespace
        self.config_maps = list(config_maps)
        self.secrets = list(secrets)

    def _select(self, objects, ref: SourceObjectKeySelector, kind: str):
        if ref.name:
            for obj in objects:
                if obj.namespace == self.namespace and obj.name == ref.name:
                    return [obj]
            raise NotFoundError(f'{kind.lower()}s "{ref.name}" not found')
        selector = ref.selector or LabelSelector()
        found = [
            obj
            for obj in objects
            if obj.namespace == self.namespace and selector.matches(obj.labels)
        ]
        if not found:
            raise SelectsNothingError(
                f"label selector {selector} for {kind} didn't match any resources"
            )
        return found

    def config_map_bundle(self, ref: SourceObjectKeySelector) -> str:
        """Return the joined data of the referenced ConfigMaps."""
        pieces: List[str] = []
        for cm in self._select(self.config_maps, ref, "ConfigMap"):
            if ref.key:
                if ref.key not in cm.data:
                    raise NotFoundError(
                        f"no data found in ConfigMap {cm.namespace}/{cm.name} at key {ref.key!r}"
                    )
                pieces.append(cm.data[ref.key] + "\n")
            elif ref.include_all_keys:
                pieces.extend(value + "\n" for value in cm.data.values())
        return "".join(pieces)

    def secret_bundle(self, ref: SourceObjectKeySelector) -> str:
        """Return the joined data of the referenced Secrets."""
        pieces: List[str] = []
        for secret in self._select(self.secrets, ref, "Secret"):
            if ref.key:
                if ref.key not in secret.data:
                    raise NotFoundError(
                        f"no data found in Secret {secret.namespace}/{secret.name} "
                        f"at key {ref.key!r}"
                    )
                pieces.append(secret.data[ref.key].decode("utf-8", errors="replace") + "\n")
            elif ref.include_all_keys:
                if secret.type == SECRET_TYPE_TLS:
                    raise InvalidSecretSourceError(
                        "includeAllKeys is not supported for TLS Secrets such as "
                        f"{secret.namespace}/{secret.name}"
                    )
                pieces.extend(
                    value.decode("utf-8", errors="replace") + "\n"
                    for value in secret.data.values()
                )
        return "".join(pieces)