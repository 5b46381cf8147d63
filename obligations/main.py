from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import date

from obligations.config import SETTINGS
from obligations.domain.catalog import group_by_category
from obligations.domain.enums import TaskCategory
from obligations.domain.errors import ComplianceError
from obligations.infra.db import init_db
from obligations.infra.logging import setup_logging
from obligations.infra.repository import ComplianceRepository
from obligations.services.compliance_scorer import ComplianceScorer
from obligations.services.compliance_service import ComplianceService
from obligations.services.task_generator import TaskGenerator

logger = logging.getLogger(__name__)


def _json_default(value: object) -> object:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def build_service() -> ComplianceService:
    generator = TaskGenerator(
        horizon_days=SETTINGS.generation_horizon_days,
        strict=SETTINGS.strict_generation,
    )
    scorer = ComplianceScorer(
        window_days=SETTINGS.scoring_window_days,
        recent_days=SETTINGS.recent_activity_days,
    )
    return ComplianceService(ComplianceRepository(), generator=generator, scorer=scorer)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="obligations")
    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="create tasks from applicable templates")
    generate.add_argument("--user", required=True)
    generate.add_argument("--start", type=date.fromisoformat)
    generate.add_argument("--end", type=date.fromisoformat)
    generate.add_argument("--template", type=int)

    score = commands.add_parser("score", help="print the compliance report")
    score.add_argument("--user", required=True)
    score.add_argument("--as-of", dest="as_of", type=date.fromisoformat)

    templates = commands.add_parser("templates", help="list active templates")
    templates.add_argument("--user")
    templates.add_argument("--category", type=TaskCategory)
    templates.add_argument("--personalized", action="store_true")
    return parser


def run(args: argparse.Namespace, service: ComplianceService) -> dict:
    if args.command == "generate":
        result = service.generate_tasks(args.user, args.start, args.end, args.template)
        payload = asdict(result)
        payload["count"] = result.count
        return payload
    if args.command == "score":
        report = service.get_compliance_report(args.user, args.as_of)
        payload = asdict(report)
        payload["score"]["display"] = report.score.display
        return payload
    listing = service.list_templates(args.user, args.category, args.personalized)
    return {
        "count": len(listing.templates),
        "personalized": listing.personalized,
        "templates": [asdict(template) for template in listing.templates],
        "grouped": {
            category: [template.template_code for template in members]
            for category, members in group_by_category(listing.templates).items()
        },
    }


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging()
    init_db()

    try:
        payload = run(args, build_service())
    except ComplianceError as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(json.dumps({"error": type(exc).__name__, "message": str(exc)}))
        return 1

    print(json.dumps(payload, default=_json_default, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
