"""Synthetic row generators for demo dashboards.

Value ranges:

- sales: revenue in [1000, 11000), quantity in [1, 100], date within the
  past 30 days
- users: signupDate within the past 365 days
- generic: value in [0, 1000), timestamp within the past 7 days
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from dashpipe.core.rows import Row

PRODUCTS = ["Product A", "Product B", "Product C"]
REGIONS = ["North", "South", "East", "West"]
STATUSES = ["active", "inactive"]
PLANS = ["free", "pro", "enterprise"]


def _days_ago(rng: random.Random, now: datetime, days: int) -> datetime:
    return now - timedelta(seconds=rng.random() * days * 24 * 60 * 60)


def _iso_timestamp(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sales_row(index: int, rng: random.Random, now: datetime) -> Row:
    return {
        "id": index + 1,
        "date": _days_ago(rng, now, 30).date().isoformat(),
        "product": rng.choice(PRODUCTS),
        "revenue": rng.randrange(1000, 11000),
        "quantity": rng.randint(1, 100),
        "region": rng.choice(REGIONS),
    }


def users_row(index: int, rng: random.Random, now: datetime) -> Row:
    number = index + 1
    return {
        "id": number,
        "name": f"User {number}",
        "email": f"user{number}@example.com",
        "signupDate": _days_ago(rng, now, 365).date().isoformat(),
        "status": rng.choice(STATUSES),
        "plan": rng.choice(PLANS),
    }


def generic_row(index: int, rng: random.Random, now: datetime) -> Row:
    return {
        "id": index + 1,
        "value": rng.randrange(0, 1000),
        "category": f"Category {rng.randint(1, 5)}",
        "timestamp": _iso_timestamp(_days_ago(rng, now, 7)),
    }


RowGenerator = Callable[[int, random.Random, datetime], Row]

GENERATORS: dict[str, RowGenerator] = {
    "sales": sales_row,
    "users": users_row,
}


def generate_rows(
    data_type: str,
    count: int,
    seed: Optional[int] = None,
    now: Optional[datetime] = None,
) -> list[Row]:
    """Generate ``count`` rows for a category; unknown categories get the generic shape."""
    rng = random.Random(seed)
    moment = now or datetime.now(timezone.utc)
    make_row = GENERATORS.get(data_type, generic_row)
    return [make_row(index, rng, moment) for index in range(count)]
