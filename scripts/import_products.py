import argparse
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running this script directly.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.exc import SQLAlchemyError

from app.core.logging import setup_logging
from app.database import Base, check_store, engine
from app.models import import_all_models
from app.services.import_service import import_workbook


def parse_args():
    parser = argparse.ArgumentParser(
        description="Create products in batch from an Excel workbook."
    )
    parser.add_argument("--path", required=True, help="Path to .xlsx workbook.")
    parser.add_argument("--sheet", default=None, help="Sheet to read. Default: first sheet.")
    parser.add_argument("--dry-run", action="store_true", help="Validate without saving.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    if not args.dry_run:
        status = check_store(engine)
        if not status.ok:
            raise SystemExit(f"Store unavailable: {status.error}")
        import_all_models()
        Base.metadata.create_all(bind=engine)

    try:
        outcome = import_workbook(args.path, sheet=args.sheet, dry_run=args.dry_run)
    except (OSError, ValueError, SQLAlchemyError, InvalidFileException) as exc:
        raise SystemExit(f"Import failed: {exc}") from exc

    print(f"{outcome['total']} rows read, {outcome['created']} accepted")
    for result in outcome["results"]:
        if result["status"] == "rejected":
            print(f"  row {result['index'] + 2}: {result['reason']}")

    if args.dry_run:
        print("Dry run complete, no changes committed.")
    else:
        print("Import complete.")


if __name__ == "__main__":
    main()
