from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

_PLAIN_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass
class SanityOptions:
    project_id: str
    dataset: str
    token: Optional[str] = None
    use_cdn: bool = False
    api_version: str = "1"
    timeout_s: float = 30.0

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.project_id:
            raise ValueError("project_id must be a non-empty string")
        if not self.dataset:
            raise ValueError("dataset must be a non-empty string")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")


def _camel(name: str) -> str:
    if name.startswith("_") or "_" not in name:
        return name
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


@dataclass
class SerializerConfig:
    """
    Controls how document payloads are turned into JSON-compatible values.

    Defaults mirror what the remote API expects: camelCase keys (system keys
    starting with ``_`` are left alone) and no explicit nulls.
    """

    camel_case: bool = True
    drop_none: bool = True

    def encode(self, value: Any) -> Any:
        """
        Recursively encode a document (dataclass, mapping, sequence or scalar).
        """
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            value = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        if isinstance(value, Mapping):
            return self._encode_mapping(value)
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self.encode(item) for item in value]
        return value

    def encode_key(self, key: str) -> str:
        return _camel(key) if self.camel_case else key

    def encode_path(self, path: str) -> str:
        """
        Encode each plain-name segment of a dotted attribute path (``unset``,
        ``inc``, ``dec``). Segments with array filters are left as written.
        """
        return ".".join(
            self.encode_key(segment) if _PLAIN_NAME.match(segment) else segment
            for segment in path.split(".")
        )

    def _encode_mapping(self, value: Mapping[str, Any]) -> dict[str, Any]:
        encoded: dict[str, Any] = {}
        for key, item in value.items():
            if item is None and self.drop_none:
                continue
            out_key = self.encode_key(key)
            encoded[out_key] = self.encode(item)
        return encoded
