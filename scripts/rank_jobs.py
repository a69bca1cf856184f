from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ai.factory import get_ai_client  # noqa: E402
from app.core.errors import MatchingError  # noqa: E402
from app.matching.keywords import process_resume_text  # noqa: E402
from app.matching.orchestrator import JobRanker  # noqa: E402
from app.matching.scoring_client import ScoringClient  # noqa: E402
from app.matching.session import validate_postings  # noqa: E402
from app.parsing.resume_upload import extract_pdf_text  # noqa: E402
from app.services.matching_service import build_resume_profile  # noqa: E402


def _read_resume(path: Path) -> str:
    if path.suffix.lower() == ".pdf":
        return extract_pdf_text(path.read_bytes())
    return path.read_text(encoding="utf-8", errors="replace")


def main() -> None:
    parser = argparse.ArgumentParser(description="Rank job postings against a resume.")
    parser.add_argument("--resume", required=True, help="Resume file (.pdf or plain text)")
    parser.add_argument("--jobs", required=True, help="JSON file with an array of job postings")
    parser.add_argument(
        "--languages",
        default="en",
        help="Comma-separated languages you speak, as codes or names (default: en)",
    )
    parser.add_argument("--top", type=int, default=10, help="Number of results to print")
    parser.add_argument("--out", default=None, help="Optional path for the full ranking as JSON")
    parser.add_argument("--verbose", action="store_true", help="Log batch progress")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING, format="%(message)s")

    try:
        processed = process_resume_text(_read_resume(Path(args.resume)))
    except OSError as exc:
        raise SystemExit(f"Cannot read resume: {exc}") from exc
    except MatchingError as exc:
        raise SystemExit(f"Resume not usable: {exc}") from exc
    profile = build_resume_profile(processed, args.languages.split(","))
    try:
        raw_jobs = json.loads(Path(args.jobs).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SystemExit(f"Cannot load job postings: {exc}") from exc
    if not isinstance(raw_jobs, list):
        raise SystemExit("--jobs must contain a JSON array of postings")
    postings = validate_postings(raw_jobs)
    if not postings:
        raise SystemExit("No valid job postings (each needs an id and a title)")

    ranker = JobRanker(ScoringClient(ai_client=get_ai_client()))
    rankings = asyncio.run(ranker.rank(profile, postings))

    for position, result in enumerate(rankings[: max(0, args.top)], start=1):
        languages = ",".join(result.language_requirements)
        print(f"{position:>3}. {result.match_percentage:>4}  {result.title} @ {result.company} [{languages}]")

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(
            json.dumps([r.model_dump(mode="json", by_alias=True) for r in rankings], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )


if __name__ == "__main__":
    main()
