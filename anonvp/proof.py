"""Anonymous-credential proof data model.

Only the part of the proof the presentation mapper reads is modelled: the
ordered `identifiers` list, each carrying the credential definition id. The
rest of the proof material (sub-proofs, aggregated proof, requested proof) is
kept as opaque JSON so nothing is lost when a proof passes through.

The mapper itself depends on `HasIdentifiers`, not on `Proof`, so any object
exposing `identifiers[*].cred_def_id` can be presented.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from jsonschema import Draft202012Validator

from anonvp.core import PathLike, load_json
from anonvp.errors import ProofFormatError

logger = logging.getLogger(__name__)


class CredentialIdentifier(Protocol):
    cred_def_id: str


class HasIdentifiers(Protocol):
    """Narrow capability surface consumed by the presentation mapper."""

    @property
    def identifiers(self) -> Sequence[CredentialIdentifier]: ...


@dataclass(frozen=True)
class Identifier:
    """Ledger identifiers of one credential used in a proof."""
    schema_id: str
    cred_def_id: str
    rev_reg_id: Optional[str] = None
    timestamp: Optional[int] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Identifier":
        return cls(
            schema_id=d["schema_id"],
            cred_def_id=d["cred_def_id"],
            rev_reg_id=d.get("rev_reg_id"),
            timestamp=d.get("timestamp"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_id": self.schema_id,
            "cred_def_id": self.cred_def_id,
            "rev_reg_id": self.rev_reg_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class Proof:
    """A decoded anonymous-credential proof.

    `proof` and `requested_proof` are carried verbatim; this package never
    inspects the cryptographic material.
    """
    identifiers: List[Identifier]
    proof: Dict[str, Any] = field(default_factory=dict)
    requested_proof: Dict[str, Any] = field(default_factory=dict)

    def sub_proof_count(self) -> int:
        proofs = self.proof.get("proofs")
        return len(proofs) if isinstance(proofs, list) else 0


# Schema for the fields read from the proof JSON. Cryptographic members are
# only required to be objects.
PROOF_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["identifiers"],
    "properties": {
        "proof": {"type": "object"},
        "requested_proof": {"type": "object"},
        "identifiers": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["schema_id", "cred_def_id"],
                "properties": {
                    "schema_id": {"type": "string", "minLength": 1},
                    "cred_def_id": {"type": "string", "minLength": 1},
                    "rev_reg_id": {"type": ["string", "null"]},
                    "timestamp": {"type": ["integer", "null"], "minimum": 0},
                },
            },
        },
    },
}

_PROOF_VALIDATOR = Draft202012Validator(PROOF_SCHEMA)


def proof_from_json(obj: Any) -> Proof:
    """Decode a proof JSON object.

    Raises ProofFormatError listing every schema violation (not just the
    first) when the object does not have the expected shape.
    """
    errors = sorted(
        f"{error.json_path}: {error.message}"
        for error in _PROOF_VALIDATOR.iter_errors(obj)
    )
    if errors:
        raise ProofFormatError("Invalid proof JSON", errors)

    identifiers = [Identifier.from_dict(i) for i in obj["identifiers"]]
    proof = Proof(
        identifiers=identifiers,
        proof=dict(obj.get("proof") or {}),
        requested_proof=dict(obj.get("requested_proof") or {}),
    )
    logger.debug(
        f"Decoded proof with {len(identifiers)} identifier(s) and "
        f"{proof.sub_proof_count()} sub-proof(s)"
    )
    return proof


def load_proof(path: PathLike) -> Proof:
    """Load and decode a proof JSON file."""
    return proof_from_json(load_json(path))
