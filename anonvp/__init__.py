"""anonvp: anonymous-credential proofs as W3C Verifiable Presentations.

Architecture:
    anonvp/
    ├── __init__.py      # Package entry, version, public API
    ├── core.py          # JSON/YAML loading, canonical JSON, sha256
    ├── errors.py        # Error taxonomy
    ├── proof.py         # Proof data model and decoding
    ├── presentation.py  # Proof -> Verifiable Presentation mapping
    ├── structure.py     # Path-addressed structural assertions
    ├── config.py        # Configuration (defaults, YAML, ANONVP_* env)
    └── cli.py           # Command-line interface

Typical use:

    from anonvp import load_proof, to_vp, validate_presentation

    vp = to_vp(load_proof("proof.json"))
    assert validate_presentation(json.loads(vp)) == []
"""

__version__ = "0.1.0"

from anonvp.errors import (
    AnonVPError,
    ConfigError,
    MalformedExpectationSpec,
    MappingError,
    PreconditionViolation,
    ProofFormatError,
    SerializationFailure,
)

from anonvp.proof import (
    HasIdentifiers,
    Identifier,
    Proof,
    load_proof,
    proof_from_json,
)

from anonvp.presentation import (
    BASE_CREDENTIALS_CONTEXT,
    CREDENTIAL_TYPE,
    PRESENTATION_PROOF_TYPE,
    PRESENTATION_TYPE,
    DerivedCredential,
    VerifiablePresentation,
    W3cProof,
    build_presentation,
    to_vp,
)

from anonvp.structure import (
    Expectation,
    check_derived_credential,
    check_structure,
    check_structures,
    load_expectations,
    validate_presentation,
)

__all__ = [
    "__version__",
    "AnonVPError",
    "ConfigError",
    "MalformedExpectationSpec",
    "MappingError",
    "PreconditionViolation",
    "ProofFormatError",
    "SerializationFailure",
    "HasIdentifiers",
    "Identifier",
    "Proof",
    "load_proof",
    "proof_from_json",
    "BASE_CREDENTIALS_CONTEXT",
    "CREDENTIAL_TYPE",
    "PRESENTATION_PROOF_TYPE",
    "PRESENTATION_TYPE",
    "DerivedCredential",
    "VerifiablePresentation",
    "W3cProof",
    "build_presentation",
    "to_vp",
    "Expectation",
    "check_derived_credential",
    "check_structure",
    "check_structures",
    "load_expectations",
    "validate_presentation",
]
