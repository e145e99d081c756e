import argparse
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from pipedash.core.logging_config import configure_logging
from pipedash.database.db import get_db_session, init_db
from pipedash.services.sample_data import seed_sample_data


def main() -> None:
    parser = argparse.ArgumentParser(description="Load the Pipedash demo leaders and deals.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible dataset.")
    parser.add_argument("--force", action="store_true", help="Replace existing leaders and deals.")
    args = parser.parse_args()

    configure_logging()
    init_db()
    with get_db_session() as db:
        if seed_sample_data(db, seed=args.seed, force=args.force):
            print("Seeded demo client leaders and deals.")
        else:
            print("Client leaders already exist; use --force to replace them.")


if __name__ == "__main__":
    main()
