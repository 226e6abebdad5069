from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Any

from .. import repo
from ..config import COLLECTIONS
from ..store import get_store

logger = logging.getLogger(__name__)

INDUSTRIES = ["Technology", "Manufacturing", "Healthcare", "Retail", "Finance", "Logistics"]
CITIES = [("Austin", "TX"), ("Denver", "CO"), ("Boston", "MA"), ("Seattle", "WA"), ("Chicago", "IL")]
FIRST_NAMES = ["Jo", "Sam", "Alex", "Priya", "Mateo", "Ana", "Kenji", "Lena"]
LAST_NAMES = ["Doe", "Rivera", "Patel", "Kim", "Novak", "Okafor", "Schmidt", "Haddad"]
TITLES = ["CTO", "Procurement Lead", "Operations Manager", "IT Director", "CFO"]


def load_template_definitions(path: Path) -> list[dict[str, Any]]:
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("[SEED] failed to read templates from %s: %s", str(path), exc)
        return []
    if not isinstance(data, list):
        logger.warning("[SEED] invalid templates file %s; expected list", str(path))
        return []
    return [item for item in data if isinstance(item, dict)]


def seed_templates_if_empty(path: Path) -> int:
    if repo.templates.list_all():
        return 0
    definitions = load_template_definitions(path)
    for definition in definitions:
        repo.templates.create(definition)
    if definitions:
        logger.info("[SEED] seeded %s template(s) from %s", len(definitions), str(path))
    return len(definitions)


def seed_demo_data(
    templates_path: Path,
    n_accounts: int = 5,
    contacts_per_account: int = 2,
    reset: bool = False,
    seed: int = 42,
) -> dict[str, int]:
    rng = random.Random(seed)
    store = get_store()
    if reset:
        for name in COLLECTIONS:
            store.save(name, [])

    n_templates = seed_templates_if_empty(templates_path)
    template_ids = [str(t["id"]) for t in repo.templates.list_all() if t.get("id")]

    n_contacts = 0
    n_assessments = 0
    for idx in range(n_accounts):
        city, state = rng.choice(CITIES)
        account = repo.accounts.create(
            {
                "Name": f"Demo Account {idx + 1}",
                "Industry": rng.choice(INDUSTRIES),
                "Phone": f"555-01{idx:02d}",
                "Website": f"https://account{idx + 1}.example.com",
                "BillingCity": city,
                "BillingState": state,
                "BillingCountry": "USA",
            }
        )
        for _ in range(contacts_per_account):
            first = rng.choice(FIRST_NAMES)
            last = rng.choice(LAST_NAMES)
            repo.contacts.create(
                {
                    "FirstName": first,
                    "LastName": last,
                    "Email": f"{first}.{last}@account{idx + 1}.example.com".lower(),
                    "Title": rng.choice(TITLES),
                    "AccountId": account["id"],
                }
            )
            n_contacts += 1
        if template_ids:
            repo.assessments.create(
                {
                    "name": f"Quarterly review - {account['Name']}",
                    "templateId": rng.choice(template_ids),
                    "accountId": account["id"],
                    "status": "Draft",
                    "dueDate": f"2026-12-{rng.randint(1, 28):02d}",
                }
            )
            n_assessments += 1

    return {
        "templates": n_templates,
        "accounts": n_accounts,
        "contacts": n_contacts,
        "assessments": n_assessments,
    }
