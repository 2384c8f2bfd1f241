"""Path-addressed structural assertions over parsed JSON.

A check is a `(path, expectation)` pair evaluated against a JSON value. The
expectation grammar, matched case-sensitively in this order:

    is array | is object | is number | is string
    HAS <literal>     value is an array with an element whose JSON text
                      (one pair of enclosing double quotes removed) equals
                      <literal> exactly
    LIKE <regex>      value is a string and <regex> matches anywhere in it
                      (re.search; anchor the regex to match the whole value)

Anything else raises MalformedExpectationSpec. A bad expectation is a bug in
the checks, never a pass and never a violation.

Path addressing is single-level: only the segment after the last `/` is used,
as a key looked up directly on the document passed in. `"a/b/c"` reads key
`"c"` of that document; `a` and `b` only appear in violation messages. To check
nested values, pass the nested object as the document and keep the full path
for the message (see `check_derived_credential`).

Failed checks append `"Expected <path> <expectation>"` to the caller's error
list. Batches never stop at the first failure.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple, Union

import yaml

from anonvp.core import PathLike, load_structured
from anonvp.errors import MalformedExpectationSpec
from anonvp.presentation import (
    BASE_CREDENTIALS_CONTEXT,
    CREDENTIAL_TYPE,
    PRESENTATION_PROOF_TYPE,
    PRESENTATION_TYPE,
)

logger = logging.getLogger(__name__)

IS_ARRAY = "is array"
IS_OBJECT = "is object"
IS_NUMBER = "is number"
IS_STRING = "is string"
HAS_PREFIX = "HAS "
LIKE_PREFIX = "LIKE "


@dataclass(frozen=True)
class Expectation:
    path: str
    expected: str

    def __str__(self) -> str:
        return f"{self.path} {self.expected}"


ExpectationLike = Union[Expectation, Tuple[str, str]]


def _is_array(v: Any) -> bool:
    return isinstance(v, list)


def _is_object(v: Any) -> bool:
    return isinstance(v, dict)


def _is_number(v: Any) -> bool:
    # bool is an int subclass but a JSON boolean is not a number
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _is_string(v: Any) -> bool:
    return isinstance(v, str)


_KIND_CHECKS = {
    IS_ARRAY: _is_array,
    IS_OBJECT: _is_object,
    IS_NUMBER: _is_number,
    IS_STRING: _is_string,
}


def _json_text(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def array_has_value(candidate: Any, value: str) -> bool:
    """True when `candidate` is a list holding an element equal to `value`.

    Elements are compared by their JSON text. When that text is wrapped in
    double quotes (a string element) the quotes are dropped first, so `HAS 7`
    matches both the number 7 and the string "7", while escaped
    characters inside strings are compared in their escaped form.

    Numbers use Python's JSON rendering, so exponent floats read `1e-07`
    (not `1e-7`) and `HAS 1e-7` does not match `[1e-7]`.
    """
    if not isinstance(candidate, list):
        return False
    for item in candidate:
        txt = _json_text(item)
        if len(txt) >= 2 and txt[0] == '"' and txt[-1] == '"':
            txt = txt[1:-1]
        if txt == value:
            return True
    return False


def text_matches_regex(candidate: Any, pattern: Union[str, "re.Pattern[str]"]) -> bool:
    if not isinstance(candidate, str):
        return False
    if isinstance(pattern, str):
        pattern = _compile(pattern)
    return pattern.search(candidate) is not None


def _compile(regex: str) -> "re.Pattern[str]":
    try:
        return re.compile(regex)
    except re.error as ex:
        raise MalformedExpectationSpec(f"Invalid regular expression {regex!r}: {ex}") from ex


def parse_expectation(expected: str):
    """Return a predicate for `expected`, or raise MalformedExpectationSpec."""
    if not isinstance(expected, str):
        raise MalformedExpectationSpec(f"Expectation must be a string, got {type(expected).__name__}")

    kind = _KIND_CHECKS.get(expected)
    if kind is not None:
        return kind
    if expected.startswith(HAS_PREFIX):
        literal = expected[len(HAS_PREFIX):]
        return lambda v: array_has_value(v, literal)
    if expected.startswith(LIKE_PREFIX):
        pattern = _compile(expected[len(LIKE_PREFIX):])
        return lambda v: text_matches_regex(v, pattern)
    raise MalformedExpectationSpec(f"Unrecognized expectation: {expected!r}")


def select_child(container: Any, path: str) -> Any:
    """Value of the last path segment on `container`, or None.

    Absent keys, JSON null and non-object containers all yield None.
    """
    key = path.rsplit("/", 1)[-1]
    if not isinstance(container, dict):
        return None
    return container.get(key)


def check_structure(container: Any, path: str, expected: str, errors: List[str]) -> bool:
    """Check one expectation; record a violation in `errors` on failure.

    Returns whether the expectation held.
    """
    predicate = parse_expectation(expected)
    item = select_child(container, path)
    ok = item is not None and predicate(item)
    if not ok:
        errors.append(f"Expected {path} {expected}")
    return ok


def check_structures(document: Any, expectations: Iterable[ExpectationLike]) -> List[str]:
    """Evaluate every expectation against `document`; return all violations."""
    errors: List[str] = []
    for exp in expectations:
        path, expected = (exp.path, exp.expected) if isinstance(exp, Expectation) else exp
        check_structure(document, path, expected, errors)
    return errors


def check_derived_credential(vc: Any, index: int, errors: List[str]) -> None:
    prefix = f"verifiableCredential[{index}]"
    check_structure(vc, f"{prefix}/type", f"{HAS_PREFIX}{CREDENTIAL_TYPE}", errors)
    check_structure(vc, f"{prefix}/@context", f"{HAS_PREFIX}{BASE_CREDENTIALS_CONTEXT}", errors)


def validate_presentation(document: Any) -> List[str]:
    """Run the standard presentation shape checks.

    Returns violation messages (empty list means conformant).
    """
    errors: List[str] = []
    check_structure(document, "@context", f"{HAS_PREFIX}{BASE_CREDENTIALS_CONTEXT}", errors)
    check_structure(document, "type", f"{LIKE_PREFIX}{PRESENTATION_TYPE}", errors)
    if check_structure(document, "verifiableCredential", IS_ARRAY, errors):
        for i, vc in enumerate(document["verifiableCredential"]):
            check_derived_credential(vc, i, errors)
    if check_structure(document, "proof", IS_OBJECT, errors):
        check_structure(
            document["proof"],
            "proof/type",
            f"{LIKE_PREFIX}^{re.escape(PRESENTATION_PROOF_TYPE)}$",
            errors,
        )
    if errors:
        logger.debug(f"Presentation has {len(errors)} structural violation(s)")
    return errors


def expectations_from_obj(obj: Any) -> List[Expectation]:
    """Build expectations from a decoded rules document.

    Accepted shapes:

      - [{"path": "@context", "expect": "is array"}, ...]
      - {"@context": "is array", "type": ["is string", "LIKE ^Verifiable"]}

    Every expectation string is parsed up front so a bad rules file fails
    before any document is checked.
    """
    out: List[Expectation] = []
    if isinstance(obj, dict):
        for path, expected in obj.items():
            for e in (expected if isinstance(expected, list) else [expected]):
                out.append(Expectation(str(path), e))
    elif isinstance(obj, list):
        for i, rule in enumerate(obj):
            if not isinstance(rule, dict) or "path" not in rule or "expect" not in rule:
                raise MalformedExpectationSpec(f"Rule #{i} must be a mapping with 'path' and 'expect'")
            out.append(Expectation(str(rule["path"]), rule["expect"]))
    else:
        raise MalformedExpectationSpec("Rules must be a list of {path, expect} or a mapping of path -> expectation")

    for e in out:
        parse_expectation(e.expected)
    return out


def load_expectations(path: PathLike) -> List[Expectation]:
    """Load expectations from a YAML or JSON rules file.

    A file that does not parse raises MalformedExpectationSpec, like any other
    malformed rules document. Note that `@` cannot start a plain YAML key, so
    `"@context"` must be quoted.
    """
    try:
        obj = load_structured(path)
    except (yaml.YAMLError, json.JSONDecodeError) as ex:
        raise MalformedExpectationSpec(f"Invalid rules file {path}: {ex}") from ex
    return expectations_from_obj(obj)


def parse_expectation_arg(arg: str) -> Expectation:
    """Parse a `PATH=EXPECTATION` command-line argument."""
    path, sep, expected = arg.partition("=")
    if not sep or not path:
        raise MalformedExpectationSpec(f"Expected PATH=EXPECTATION, got {arg!r}")
    parse_expectation(expected)
    return Expectation(path, expected)


def violations_report(violations: List[str]) -> Dict[str, Any]:
    return {"ok": not violations, "violations": list(violations)}
