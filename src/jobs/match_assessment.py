"""Match assessment job - scores answers and recommends communities."""
import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import pandas as pd
from pydantic import ValidationError

from src.assessment.session import AssessmentSession, SessionStore
from src.config import settings
from src.entity.communities import load_communities, load_communities_file
from src.geo.zip_index import format_distance, format_zip_code, lookup_zip
from src.models import MatchedCommunity
from src.utils.io import write_csv

# Setup structured JSON logging
log_dir = Path("./logs")
log_dir.mkdir(exist_ok=True)
log_file = log_dir / "match_assessment.log"


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName
        }
        if hasattr(record, "duration"):
            log_entry["duration_seconds"] = record.duration
        return json.dumps(log_entry)


# Setup file handler with JSON formatter
file_handler = logging.FileHandler(log_file)
file_handler.setFormatter(JSONFormatter())

# Setup console handler with standard format
console_handler = logging.StreamHandler()
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

# Configure root logger
root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)
root_logger.addHandler(file_handler)
root_logger.addHandler(console_handler)

logger = logging.getLogger(__name__)


def matches_to_frame(matches: List[MatchedCommunity]) -> pd.DataFrame:
    """Flatten matched communities into one row each."""
    return pd.DataFrame([
        {
            "rank": i + 1,
            "community_id": m.community.id,
            "name": m.community.name,
            "care_types": ", ".join(m.community.care_types),
            "rating": m.community.rating,
            "rank_score": m.rank_score,
            "distance_miles": m.distance_miles,
            "reason_text": m.reason_text,
        }
        for i, m in enumerate(matches)
    ])


def print_results(session: AssessmentSession):
    band = session.recommendation
    print(f"\nScore: {session.score}")
    print(f"Recommendation: {band.title}")
    print(f"  {band.description}")
    print(f"  Typical cost: {band.cost_range}")
    for reason in band.reasons:
        print(f"  - {reason}")

    if not session.matched_communities:
        print("\nNo matching communities found.")
        return

    print("\nTop matches:")
    for i, match in enumerate(session.matched_communities, start=1):
        distance = f" ({format_distance(match.distance_miles)})" if match.distance_miles is not None else ""
        print(f"  {i}. {match.community.name}{distance}")
        print(f"     Why this matches: {match.reason_text}")


def main(argv: Optional[List[str]] = None):
    """Main entry point for the match_assessment job."""
    start_time = datetime.now()

    parser = argparse.ArgumentParser(description="Score a care assessment and match communities")
    parser.add_argument(
        "--answers",
        type=str,
        required=True,
        help="Path to a JSON file mapping question ids to answer values"
    )
    parser.add_argument(
        "--zip",
        type=str,
        dest="user_zip",
        help="User's zip code for distances"
    )
    parser.add_argument(
        "--communities",
        type=str,
        help="CSV or XLSX community export (default: community table in DuckDB)"
    )
    parser.add_argument(
        "--top-n",
        type=int,
        help=f"Number of matches (default: {settings.match_top_n})"
    )
    parser.add_argument(
        "--out",
        type=str,
        help="Write matches to this CSV file"
    )
    parser.add_argument(
        "--session-id",
        type=str,
        help="Save the completed session under this id"
    )
    args = parser.parse_args(argv)

    answers_path = Path(args.answers)
    if not answers_path.exists():
        logger.error(f"Answers file not found: {answers_path}")
        sys.exit(1)

    try:
        with open(answers_path, "r", encoding="utf-8") as f:
            answers = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Answers file is not valid JSON: {e}")
        sys.exit(1)
    if not isinstance(answers, dict):
        logger.error("Answers file must contain a JSON object")
        sys.exit(1)

    try:
        session = AssessmentSession(answers=answers)
    except ValidationError as e:
        logger.error(f"Answers must map question ids to a value or list of values: {e}")
        sys.exit(1)

    if args.communities:
        try:
            communities = load_communities_file(args.communities)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"Could not load communities: {e}")
            sys.exit(1)
    else:
        communities = load_communities()

    user_zip = format_zip_code(args.user_zip) if args.user_zip else None
    if user_zip and lookup_zip(user_zip) is None:
        logger.warning(f"Zip {user_zip} not in coordinate table, distances unavailable")

    session.complete(communities, user_zip=user_zip, top_n=args.top_n)

    print_results(session)

    if args.out:
        write_csv(matches_to_frame(session.matched_communities), args.out)

    if args.session_id:
        SessionStore().save(args.session_id, session)
        logger.info(f"Saved session {args.session_id}")

    total_duration = (datetime.now() - start_time).total_seconds()
    logger.info(f"Match complete in {total_duration:.2f} seconds", extra={"duration": total_duration})


if __name__ == "__main__":
    main()
