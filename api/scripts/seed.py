import argparse
import logging
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from brm.config import COLLECTIONS, TEMPLATES_SEED_PATH
from brm.services.seeding import seed_demo_data
from brm.store import get_store


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo accounts, contacts and assessments")
    parser.add_argument("--n-accounts", type=int, default=5)
    parser.add_argument("--contacts-per-account", type=int, default=2)
    parser.add_argument("--templates-path", type=str, default=str(TEMPLATES_SEED_PATH))
    parser.add_argument("--reset", action="store_true")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    get_store().init_collections(COLLECTIONS)
    summary = seed_demo_data(
        templates_path=Path(args.templates_path),
        n_accounts=args.n_accounts,
        contacts_per_account=args.contacts_per_account,
        reset=args.reset,
        seed=args.seed,
    )

    print("Seed completed")
    for k, v in summary.items():
        print(f"- {k}: {v}")


if __name__ == "__main__":
    main()
