"""anonvp.presentation

Maps an anonymous-credential proof onto a W3C Verifiable Presentation
envelope.

Profile / invariants:
- `@context` is `[BASE_CREDENTIALS_CONTEXT, identifiers[0].cred_def_id]`; the
  credential definition id is embedded verbatim as a context string, it is not
  a resolvable JSON-LD context.
- `type` is always `VerifiablePresentation` and `proof.type` is always
  `AnonCredPresentationProofv1`. These literals and the wire keys `@context`,
  `type`, `verifiableCredential`, `proof` are consumed by external verifiers.
- Exactly one derived credential is emitted, however many sub-proofs the
  source proof carries.

Only the envelope shape is produced here. The proof bytes are neither copied
nor checked, so the output is not verifiable by a generic W3C VP verifier.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from anonvp.core import canonical_json_bytes, compact_json
from anonvp.errors import PreconditionViolation, SerializationFailure
from anonvp.proof import HasIdentifiers

logger = logging.getLogger(__name__)

BASE_CREDENTIALS_CONTEXT = "https://www.w3.org/2018/credentials/v1"
PRESENTATION_TYPE = "VerifiablePresentation"
CREDENTIAL_TYPE = "VerifiableCredential"
PRESENTATION_PROOF_TYPE = "AnonCredPresentationProofv1"


@dataclass(frozen=True)
class W3cProof:
    type: str = PRESENTATION_PROOF_TYPE

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type}


@dataclass(frozen=True)
class DerivedCredential:
    context: Tuple[str, ...] = (BASE_CREDENTIALS_CONTEXT,)
    type: Tuple[str, ...] = (CREDENTIAL_TYPE,)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "@context": list(self.context),
            "type": list(self.type),
        }


@dataclass(frozen=True)
class VerifiablePresentation:
    context: Tuple[str, ...]
    type: str = PRESENTATION_TYPE
    verifiable_credential: Tuple[DerivedCredential, ...] = field(default_factory=tuple)
    proof: W3cProof = field(default_factory=W3cProof)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form. Key order is part of the output format."""
        return {
            "@context": list(self.context),
            "type": self.type,
            "verifiableCredential": [vc.to_dict() for vc in self.verifiable_credential],
            "proof": self.proof.to_dict(),
        }


def build_presentation(proof: HasIdentifiers) -> VerifiablePresentation:
    """Build the presentation object for `proof`.

    Precondition: `proof.identifiers` is non-empty. This is checked up front
    and a violation raises PreconditionViolation; callers are expected to
    prevent it, it is not an input-validation path.
    """
    identifiers = proof.identifiers
    if not identifiers:
        raise PreconditionViolation("proof.identifiers must contain at least one entry")

    cred_def_id = identifiers[0].cred_def_id

    sub_proofs = getattr(proof, "sub_proof_count", None)
    n = sub_proofs() if callable(sub_proofs) else len(identifiers)
    if n > 1:
        logger.debug(f"Proof has {n} sub-proofs; presenting a single derived credential")

    return VerifiablePresentation(
        context=(BASE_CREDENTIALS_CONTEXT, cred_def_id),
        type=PRESENTATION_TYPE,
        verifiable_credential=(
            DerivedCredential(
                context=(BASE_CREDENTIALS_CONTEXT,),
                type=(CREDENTIAL_TYPE,),
            ),
        ),
        proof=W3cProof(type=PRESENTATION_PROOF_TYPE),
    )


def to_vp(
    proof: HasIdentifiers,
    *,
    indent: Optional[int] = None,
    canonical: bool = False,
) -> str:
    """Map `proof` to Verifiable Presentation JSON text.

    Default output keeps the wire key order with no insignificant whitespace
    and is byte-identical across calls for the same proof. `canonical=True`
    emits sorted-key canonical JSON instead; `indent` pretty-prints.

    Raises:
        PreconditionViolation: `proof.identifiers` is empty.
        SerializationFailure: the presentation could not be encoded (for
            example a non-string `cred_def_id` on a duck-typed proof).
    """
    preso = build_presentation(proof).to_dict()
    logger.debug(f"Presenting credential definition {preso['@context'][1]!r}")

    try:
        if canonical:
            return canonical_json_bytes(preso).decode("utf-8")
        if indent is not None:
            return json.dumps(preso, indent=indent, ensure_ascii=False, allow_nan=False)
        return compact_json(preso)
    except (TypeError, ValueError) as ex:
        raise SerializationFailure(f"Cannot serialize presentation: {ex}") from ex


def presentation_dict(proof: HasIdentifiers) -> Dict[str, Any]:
    """Convenience: the presentation as a plain dict (not serialized)."""
    return build_presentation(proof).to_dict()


__all__: List[str] = [
    "BASE_CREDENTIALS_CONTEXT",
    "PRESENTATION_TYPE",
    "CREDENTIAL_TYPE",
    "PRESENTATION_PROOF_TYPE",
    "W3cProof",
    "DerivedCredential",
    "VerifiablePresentation",
    "build_presentation",
    "presentation_dict",
    "to_vp",
]
