"""
This script imports normalized transaction and budget tables (exported from
spreadsheets kept over the year) into the finance tracker database.

Expected files in the source folder:
- transactions*.csv   columns: date (YYYY-MM-DD), description, amount, type, [category]
- budgets*.csv        columns: category, month, year, amount

Every row goes through the same validation as the JSON API. Invalid rows are
skipped and logged; budgets are applied as upserts, so re-running the script
with the same budget files is safe.

Usage:
    python data-migration/script.py [folder]
"""


from __future__ import annotations

import logging
import sys
from pathlib import Path

import pandas as pd

# Allow running as a plain script from the project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import get_settings  # noqa: E402
from db import Database  # noqa: E402
import models  # noqa: E402,F401
from app.schemas import BudgetIn, TransactionIn, validate_payload  # noqa: E402
from app.services.import_helpers import build_transaction_from_dict  # noqa: E402
from app.services.storage import set_budget  # noqa: E402

logger = logging.getLogger("data_migration")

NORMALIZED_DIR = Path("data-migration/normalized")


def _none_if_nan(x):
    if pd.isna(x):
        return None
    s = str(x).strip()
    return None if s == "" or s.lower() == "nan" else s


def _number_or_none(x):
    return None if pd.isna(x) else float(x)


def _read_normalized(path: Path, required: set[str]) -> pd.DataFrame:
    df = pd.read_csv(path)

    # normalize headers
    df.columns = df.columns.str.strip().str.lower()

    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"{path.name}: missing required columns: {sorted(missing)}")

    # drop fully empty rows
    return df.dropna(how="all").copy()


def _transaction_rows(df: pd.DataFrame):
    if "category" not in df.columns:
        df["category"] = None

    # parse amount (handle decimal commas just in case)
    df["amount"] = pd.to_numeric(
        df["amount"].astype(str).str.replace(" ", "", regex=False).str.replace(",", ".", regex=False),
        errors="coerce",
    )

    for row in df.itertuples(index=False):
        yield {
            "date": _none_if_nan(getattr(row, "date")),
            "description": _none_if_nan(getattr(row, "description")),
            "amount": _number_or_none(getattr(row, "amount")),
            "type": (_none_if_nan(getattr(row, "type")) or "").lower(),
            "category": _none_if_nan(getattr(row, "category")) or "Other",
        }


def _budget_rows(df: pd.DataFrame):
    for column in ("month", "year", "amount"):
        df[column] = pd.to_numeric(df[column], errors="coerce")

    for row in df.itertuples(index=False):
        # floats: fractional months/years fail validation
        yield {
            "category": _none_if_nan(getattr(row, "category")),
            "month": _number_or_none(getattr(row, "month")),
            "year": _number_or_none(getattr(row, "year")),
            "amount": _number_or_none(getattr(row, "amount")),
        }


def import_normalized_csvs_to_db(
    database: Database,
    folder: Path = NORMALIZED_DIR,
    batch_size: int = 1000,
) -> dict:
    """
    Import every transactions*.csv and budgets*.csv in `folder`.

    Returns {"transactions": <inserted>, "budgets": <upserted>, "skipped": <invalid rows>}.
    """
    folder = Path(folder)
    tx_files = sorted(folder.glob("transactions*.csv"))
    budget_files = sorted(folder.glob("budgets*.csv"))
    if not tx_files and not budget_files:
        raise FileNotFoundError(f"No CSV files found in: {folder.resolve()}")

    database.init()
    database.create_tables()

    session = database.session()
    counts = {"transactions": 0, "budgets": 0, "skipped": 0}

    try:
        for f in tx_files:
            df = _read_normalized(f, {"date", "description", "amount", "type"})

            objs = []
            for i, raw in enumerate(_transaction_rows(df), start=1):
                result = validate_payload(TransactionIn, raw)
                if not result.ok:
                    counts["skipped"] += 1
                    logger.warning("[import] %s row %d skipped: %s", f.name, i, result.errors_as_dicts())
                    continue
                objs.append(build_transaction_from_dict(result.value.model_dump()))

            # insert in batches
            for start in range(0, len(objs), batch_size):
                session.add_all(objs[start : start + batch_size])
                session.commit()

            counts["transactions"] += len(objs)
            logger.info("[import] %d transactions from %s", len(objs), f.name)

        for f in budget_files:
            df = _read_normalized(f, {"category", "month", "year", "amount"})

            applied = 0
            for i, raw in enumerate(_budget_rows(df), start=1):
                result = validate_payload(BudgetIn, raw)
                if not result.ok:
                    counts["skipped"] += 1
                    logger.warning("[import] %s row %d skipped: %s", f.name, i, result.errors_as_dicts())
                    continue
                b = result.value
                set_budget(session, b.category, b.month, b.year, b.amount)
                applied += 1

            counts["budgets"] += applied
            logger.info("[import] %d budgets from %s", applied, f.name)

    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    return counts


if __name__ == "__main__":
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    source = Path(sys.argv[1]) if len(sys.argv) > 1 else NORMALIZED_DIR
    result = import_normalized_csvs_to_db(Database(settings.database_url), source)
    print(f"\nDONE. {result}")
