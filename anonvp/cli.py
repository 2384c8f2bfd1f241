"""anonvp command line

    anonvp map PROOF_JSON [--out PATH] [--pretty] [--canonical] [--digest]
    anonvp check DOCUMENT_JSON [--rules RULES] [--expect PATH=EXPECTATION]... [--json]

Exit codes: 0 ok, 2 invalid input / structural violations, 3 malformed
expectations or configuration.
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from typing import List, Optional

from anonvp.config import LOG_LEVELS, AnonVPConfig, load_config
from anonvp.core import canonical_json_bytes, load_json, sha256_bytes
from anonvp.errors import ConfigError, MalformedExpectationSpec, MappingError, ProofFormatError
from anonvp.presentation import presentation_dict, to_vp
from anonvp.proof import load_proof
from anonvp.structure import (
    Expectation,
    check_structures,
    load_expectations,
    parse_expectation_arg,
    validate_presentation,
    violations_report,
)

logger = logging.getLogger(__name__)


def cmd_map(args: argparse.Namespace, cfg: AnonVPConfig) -> int:
    """Map a proof JSON file to a Verifiable Presentation."""
    try:
        proof = load_proof(args.proof)
        if args.digest:
            print(sha256_bytes(canonical_json_bytes(presentation_dict(proof))))
            return 0
        pretty = args.pretty or cfg.pretty.get()
        text = to_vp(
            proof,
            indent=cfg.indent.get() if pretty else None,
            canonical=args.canonical or cfg.canonical.get(),
        )
    except json.JSONDecodeError as ex:
        print(f"FAIL: {args.proof} is not valid JSON: {ex}", file=sys.stderr)
        return 2
    except OSError as ex:
        print(f"FAIL: {ex}", file=sys.stderr)
        return 2
    except ProofFormatError as ex:
        print(f"FAIL: {ex}", file=sys.stderr)
        return 2
    except MappingError as ex:
        logger.error(f"Mapping failed for {args.proof}: {ex}")
        print(f"FAIL: {ex}", file=sys.stderr)
        return 2

    if args.out:
        out_path = pathlib.Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
        print("Wrote presentation to", out_path)
    else:
        print(text)
    return 0


def cmd_check(args: argparse.Namespace, cfg: AnonVPConfig) -> int:
    """Check a JSON document against presentation rules or custom expectations."""
    try:
        document = load_json(args.document)
    except json.JSONDecodeError as ex:
        print(f"FAIL: {args.document} is not valid JSON: {ex}", file=sys.stderr)
        return 2
    except OSError as ex:
        print(f"FAIL: {ex}", file=sys.stderr)
        return 2

    try:
        expectations: List[Expectation] = []
        if args.rules:
            expectations.extend(load_expectations(args.rules))
        expectations.extend(parse_expectation_arg(a) for a in args.expect)

        if expectations:
            violations = check_structures(document, expectations)
        else:
            violations = validate_presentation(document)
    except MalformedExpectationSpec as ex:
        print(f"ERROR: {ex}", file=sys.stderr)
        return 3
    except OSError as ex:
        print(f"FAIL: {ex}", file=sys.stderr)
        return 2

    for v in violations:
        logger.warning(f"{args.document}: {v}")

    if args.json:
        print(json.dumps(violations_report(violations), indent=2, ensure_ascii=False))
    elif violations:
        for v in violations:
            print("FAIL", v)
    else:
        print("OK")
    return 2 if violations else 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="anonvp")
    ap.add_argument("--config", default="", help="YAML configuration file (default: $ANONVP_CONFIG)")
    ap.add_argument("--log-level", default="", choices=("",) + LOG_LEVELS, help="Override configured log level")
    sub = ap.add_subparsers(dest="cmd", required=True)

    m = sub.add_parser("map", help="Map a proof JSON to a Verifiable Presentation")
    m.add_argument("proof", help="Path to a proof JSON")
    m.add_argument("--out", default="", help="Write to this path instead of stdout")
    m.add_argument("--pretty", action="store_true", help="Indent the output")
    m.add_argument("--canonical", action="store_true", help="Sorted-key canonical JSON")
    m.add_argument("--digest", action="store_true", help="Print sha256 of the canonical presentation only")
    m.set_defaults(func=cmd_map)

    c = sub.add_parser("check", help="Check a JSON document's structure")
    c.add_argument("document", help="Path to a JSON document")
    c.add_argument("--rules", default="", help="YAML/JSON rules file")
    c.add_argument(
        "--expect",
        action="append",
        default=[],
        metavar="PATH=EXPECTATION",
        help="Additional expectation (repeatable), e.g. 'type=is string'",
    )
    c.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    c.set_defaults(func=cmd_check)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config(args.config or None)
        errors = cfg.validate()
        if args.log_level:
            errors = [e for e in errors if not e.startswith("log_level:")]
        if errors:
            raise ConfigError("; ".join(errors))
        level = getattr(logging, args.log_level.upper()) if args.log_level else cfg.logging_level()
    except ConfigError as ex:
        print(f"ERROR: {ex}", file=sys.stderr)
        return 3

    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return args.func(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
