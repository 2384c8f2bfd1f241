import copy
import json
import pathlib
import sys

import pytest


# Ensure repo root is on PYTHONPATH for direct package imports (e.g. `import anonvp`).
_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

DATA_DIR = pathlib.Path(__file__).resolve().parent / "data"

# Structure of a real proof; numbers are wrong and strings shortened, so it
# decodes but would not verify.
FAKE_PROOF_PATH = DATA_DIR / "proof.json"
FAKE_CRED_DEF_ID = "NcYxi...cYDi1e:2:gvt:1.0:TAG_1"


@pytest.fixture
def fake_proof_path() -> pathlib.Path:
    return FAKE_PROOF_PATH


@pytest.fixture
def fake_proof_json() -> dict:
    return json.loads(FAKE_PROOF_PATH.read_text(encoding="utf-8"))


@pytest.fixture
def fake_proof(fake_proof_json):
    from anonvp.proof import proof_from_json

    return proof_from_json(fake_proof_json)


@pytest.fixture
def two_credential_proof_json(fake_proof_json) -> dict:
    """Fake proof with a second sub-proof and identifier."""
    obj = copy.deepcopy(fake_proof_json)
    obj["proof"]["proofs"].append(copy.deepcopy(obj["proof"]["proofs"][0]))
    obj["identifiers"].append({
        "schema_id": "V4SGRU86Z58d6TV7PBUe6f:2:xyz:2.0",
        "cred_def_id": "V4SGRU86Z58d6TV7PBUe6f:3:CL:42:TAG_2",
        "rev_reg_id": None,
        "timestamp": 1577836800,
    })
    return obj


@pytest.fixture
def presentation_doc(fake_proof) -> dict:
    from anonvp.presentation import to_vp

    return json.loads(to_vp(fake_proof))
