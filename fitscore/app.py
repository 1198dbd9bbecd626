import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from . import __version__
from .batch import score_batch
from .classify import classify
from .collaborator import NarrativeClient
from .config import DEFAULT_THRESHOLD, validate_threshold
from .env import load_env
from .errors import ContractViolation, InsufficientCandidates
from .logger import get_logger
from .matching import evaluate
from .models import CandidateProfile, RequirementProfile
from .pool import JobPool
from .schema import require_valid, validate_candidate, validate_requirement


def _load_json(path_str: str) -> Dict[str, Any]:
    path = Path(path_str)
    if not path.exists():
        raise SystemExit(f"Input file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Invalid JSON in {path}: {e}")


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _load_requirement(path_str: str) -> RequirementProfile:
    data = _load_json(path_str)
    try:
        require_valid(data, "requirement")
    except ContractViolation as e:
        raise SystemExit(str(e))
    return RequirementProfile.from_dict(data)


def _threshold(value: str) -> int:
    try:
        return validate_threshold(int(value))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _client(args: argparse.Namespace):
    return NarrativeClient() if getattr(args, "explain", False) else None


def cmd_validate(args: argparse.Namespace) -> None:
    data = _load_json(args.input)
    if args.kind == "requirement":
        errors = validate_requirement(data)
    else:
        errors = validate_candidate(data)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_score(args: argparse.Namespace) -> None:
    requirement = _load_requirement(args.requirement)
    data = _load_json(args.candidate)
    try:
        require_valid(data, "candidate")
    except ContractViolation as e:
        raise SystemExit(str(e))

    result = evaluate(requirement, CandidateProfile.from_dict(data), client=_client(args))
    output = result.as_dict()
    output["classification"] = classify(result.scores.total, args.threshold)
    _print_json(output)


def _scored_pool(args: argparse.Namespace) -> JobPool:
    requirement = _load_requirement(args.requirement)
    pool = JobPool(job_id=Path(args.requirement).stem, requirement=requirement, threshold=args.threshold)
    items = [(Path(p).stem, _load_json(p)) for p in args.candidates]
    outcome = score_batch(
        pool,
        items,
        client=_client(args),
        max_workers=args.workers,
        explain_results=getattr(args, "explain", False),
    )
    for err in outcome.errors:
        print(f"[error] {err['candidate_id']} -> {err['error']}", file=sys.stderr)
    return pool


def cmd_rank(args: argparse.Namespace) -> None:
    pool = _scored_pool(args)
    ranked: List[Dict[str, Any]] = [r.as_dict() for r in pool.ranked(classification=args.only)]
    _print_json({"job_id": pool.job_id, "candidates": ranked, "stats": pool.stats()})


def cmd_compare(args: argparse.Namespace) -> None:
    pool = _scored_pool(args)
    ids = [Path(p).stem for p in args.candidates]
    try:
        comparison = pool.compare(ids)
    except InsufficientCandidates as e:
        raise SystemExit(str(e))
    _print_json(comparison.as_dict())


def main():
    load_env()
    parser = argparse.ArgumentParser(prog="fitscore", description="Candidate/role fitness scoring")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    val = subparsers.add_parser("validate", help="Check a profile JSON against the input contract")
    val.add_argument("--kind", required=True, choices=["requirement", "candidate"], help="Profile type")
    val.add_argument("input", help="Path to profile JSON")
    val.set_defaults(func=cmd_validate)

    sco = subparsers.add_parser("score", help="Score one candidate against a requirement profile")
    sco.add_argument("requirement", help="Requirement profile JSON")
    sco.add_argument("candidate", help="Candidate profile JSON")
    sco.add_argument("--threshold", type=_threshold, default=DEFAULT_THRESHOLD, help="Shortlist threshold (0-100)")
    sco.add_argument("--explain", action="store_true", help="Ask the narrative collaborator for an explanation")
    sco.set_defaults(func=cmd_score)

    rnk = subparsers.add_parser("rank", help="Score and rank several candidates")
    rnk.add_argument("requirement", help="Requirement profile JSON")
    rnk.add_argument("candidates", nargs="+", help="Candidate profile JSON files, in creation order")
    rnk.add_argument("--threshold", type=_threshold, default=DEFAULT_THRESHOLD, help="Shortlist threshold (0-100)")
    rnk.add_argument("--only", choices=["shortlisted", "borderline", "rejected"], help="Filter by classification")
    rnk.add_argument("--workers", type=int, default=4, help="Parallel scoring workers")
    rnk.add_argument("--explain", action="store_true", help="Attach collaborator explanations")
    rnk.set_defaults(func=cmd_rank)

    cmp_ = subparsers.add_parser("compare", help="Compare two or more candidates dimension by dimension")
    cmp_.add_argument("requirement", help="Requirement profile JSON")
    cmp_.add_argument("candidates", nargs="+", help="Candidate profile JSON files")
    cmp_.add_argument("--threshold", type=_threshold, default=DEFAULT_THRESHOLD, help="Shortlist threshold (0-100)")
    cmp_.add_argument("--workers", type=int, default=4, help="Parallel scoring workers")
    cmp_.set_defaults(func=cmd_compare)

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        get_logger().log_metrics_summary()
        return

    parser.print_help()


if __name__ == "__main__":
    main()
