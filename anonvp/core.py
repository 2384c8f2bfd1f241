"""Core primitives for anonvp.

- JSON / YAML loading with consistent encoding
- Canonical JSON serialization (sorted keys, compact, UTF-8)
- SHA-256 digests of canonical bytes

Pure functions, no global mutable state.
"""

from __future__ import annotations

import hashlib
import json
import pathlib
from typing import Any, Union

import yaml

PathLike = Union[str, pathlib.Path]


def sha256_bytes(data: bytes) -> str:
    """Compute SHA-256 hash of bytes, returning lowercase hex string."""
    return hashlib.sha256(data).hexdigest()


def load_yaml(path: PathLike) -> Any:
    """Load YAML file with UTF-8 encoding."""
    return yaml.safe_load(pathlib.Path(path).read_text(encoding="utf-8"))


def load_json(path: PathLike) -> Any:
    """Load JSON file with UTF-8 encoding."""
    return json.loads(pathlib.Path(path).read_text(encoding="utf-8"))


def load_structured(path: PathLike) -> Any:
    """Load a `.json` file as JSON, anything else as YAML.

    YAML is a superset of JSON, but JSON files go through `json` so that
    duplicate-key and number handling match what downstream verifiers see.
    """
    p = pathlib.Path(path)
    if p.suffix.lower() == ".json":
        return load_json(p)
    return load_yaml(p)


def compact_json(obj: Any) -> str:
    """Serialize keeping insertion order, no insignificant whitespace."""
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def canonical_json_bytes(obj: Any) -> bytes:
    """Serialize object to canonical JSON bytes (JCS/RFC8785 subset).

    Properties:
    - Keys sorted lexicographically
    - No whitespace
    - UTF-8 encoded
    - Floats rejected
    """
    def _reject_floats(o: Any, path: str = "") -> None:
        if isinstance(o, float):
            raise ValueError(f"Float not allowed in canonical JSON at {path}")
        if isinstance(o, dict):
            for k, v in o.items():
                _reject_floats(v, f"{path}.{k}")
        if isinstance(o, list):
            for i, v in enumerate(o):
                _reject_floats(v, f"{path}[{i}]")

    _reject_floats(obj)
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")
