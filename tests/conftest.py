from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from praise_core.db_connector import make_engine
from praise_core.schema import create_schema, period_settings, periods, praise, user_accounts, users


def _praise_rows() -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []

    def add(receiver: str, created_at: datetime, giver: str = "acc-giver") -> None:
        rows.append(
            {
                "id": f"praise-{len(rows) + 1:03d}",
                "giver_id": giver,
                "receiver_id": receiver,
                "created_at": created_at,
            }
        )

    # period p1: (epoch, 2024-01-31]
    for day in (2, 3, 4):
        add("acc-u1", datetime(2024, 1, day, 12))
    for day in (5, 6):
        add("acc-u2", datetime(2024, 1, day, 12))
    add("acc-u3", datetime(2024, 1, 31))  # exactly on the period end
    for day in (7, 8):
        add("acc-r", datetime(2024, 1, day, 12))

    # period p2: (2024-01-31, 2024-02-29]
    add("acc-u1", datetime(2024, 2, 2, 12))
    add("acc-r", datetime(2024, 2, 3, 12))
    add("acc-r", datetime(2024, 2, 29))

    # after every period
    add("acc-u2", datetime(2024, 3, 5, 12))
    return rows


@pytest.fixture
def praise_db_url(tmp_path: Path) -> str:
    db_url = f"sqlite+pysqlite:///{tmp_path / 'praise.db'}"
    engine = make_engine(db_url)
    create_schema(engine)

    with engine.begin() as conn:
        conn.execute(
            periods.insert(),
            [
                {"id": "p1", "name": "January", "end_date": datetime(2024, 1, 31)},
                {"id": "p2", "name": "February", "end_date": datetime(2024, 2, 29)},
            ],
        )
        conn.execute(
            period_settings.insert(),
            [
                {"period_id": "p1", "key": "PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER", "value": "2"},
                {"period_id": "p1", "key": "PRAISE_QUANTIFIERS_ASSIGN_EVENLY", "value": "false"},
                {"period_id": "p1", "key": "PRAISE_PER_QUANTIFIER", "value": "3"},
                {"period_id": "p2", "key": "PRAISE_QUANTIFIERS_PER_PRAISE_RECEIVER", "value": "2"},
                {"period_id": "p2", "key": "PRAISE_QUANTIFIERS_ASSIGN_EVENLY", "value": "true"},
            ],
        )
        conn.execute(
            users.insert(),
            [
                {"id": "u1", "username": "alice", "is_quantifier": True},
                {"id": "u2", "username": "bob", "is_quantifier": True},
                {"id": "u3", "username": "carol", "is_quantifier": True},
                {"id": "u4", "username": "dave", "is_quantifier": False},
            ],
        )
        conn.execute(
            user_accounts.insert(),
            [
                {"id": "acc-u1", "user_id": "u1", "name": "alice#discord"},
                {"id": "acc-u1-alt", "user_id": "u1", "name": "alice.eth"},
                {"id": "acc-u2", "user_id": "u2", "name": "bob#discord"},
                {"id": "acc-u3", "user_id": "u3", "name": "carol#discord"},
                {"id": "acc-u4", "user_id": "u4", "name": "dave#discord"},
            ],
        )
        conn.execute(praise.insert(), _praise_rows())

    engine.dispose()
    return db_url
