from __future__ import annotations

# projects/services/seed_svc.py
import pandas as pd

from ..db import get_conn, transaction
from ..logs import LogContext


def seed_load(categories_csv: str, log: LogContext) -> dict:
    """Import categories from CSV (column: category_name). Existing names are skipped."""
    # names are taken literally: "NaN" or "N/A" are real category names here
    cat_df = pd.read_csv(categories_csv, dtype=str, keep_default_na=False)
    if "category_name" not in cat_df.columns:
        raise ValueError("categories csv needs a category_name column")

    created_cat = 0
    with get_conn() as conn, transaction(conn):
        for _, r in cat_df.iterrows():
            name = str(r["category_name"]).strip()
            if not name:
                continue
            cur = conn.execute(
                "INSERT OR IGNORE INTO category(category_name) VALUES(?)", (name,)
            )
            created_cat += cur.rowcount

    log.set_entity("CATEGORY", "seed")
    log.set_after({"created_category": created_cat})
    return {"created_category": created_cat}
