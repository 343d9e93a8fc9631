from __future__ import annotations

# houserules/services/utils.py
import datetime as dt


def utc_now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds")


def row_to_dict(row) -> dict | None:
    return dict(row) if row is not None else None


def nested_chore(row) -> dict:
    """Pull the chore_* columns of a joined row into a nested chore object."""
    return {
        "id": row["chore_id"],
        "name": row["chore_name"],
        "difficulty": row["chore_difficulty"],
        "recurrence_days": row["chore_recurrence_days"],
    }
