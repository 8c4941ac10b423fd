"""
import_restaurants.py — bulk import of exported restaurant files.

Accepts CSV or JSON (records) exports with at least name, lat, lng columns.
Rows are matched on google_place_id when present: known ids are updated,
everything else is inserted.

Usage:
    python scripts/import_restaurants.py --file data/restaurants.csv            # import
    python scripts/import_restaurants.py --file data/restaurants.json --dry-run # parse, no DB writes
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import pandas as pd

sys.path.insert(0, str(Path(__file__).parent.parent))

from viraleats.database import engine, session_scope
from viraleats.models import Base  # noqa: F401
from viraleats.schemas.restaurant import CATEGORIES, PRICE_TIERS
from viraleats.services.halal_classifier import HalalClassifier
from viraleats.services.stores import SqlRestaurantStore
from viraleats.services.viral_score import seed_trending_score

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "lat", "lng")

_classifier = HalalClassifier()


# ── Column parsers ───────────────────────────────────────────────────────────


def _missing(val: object) -> bool:
    if isinstance(val, (list, dict)):
        return False
    return val is None or bool(pd.isna(val)) or str(val).strip() == ""


def _text(val: object) -> Optional[str]:
    return None if _missing(val) else str(val).strip()


def _float(val: object) -> Optional[float]:
    if _missing(val):
        return None
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def _int(val: object) -> int:
    """Counts like '1,234'; 0 on failure."""
    if _missing(val):
        return 0
    try:
        return int(float(str(val).replace(",", "").strip()))
    except ValueError:
        return 0


def _bool(val: object) -> Optional[bool]:
    if _missing(val):
        return None
    if isinstance(val, bool):
        return val
    return str(val).strip().lower() in ("true", "1", "yes", "y", "t")


def _json_value(val: object, expected: type) -> Optional[Any]:
    """Decode a JSON cell; values already decoded (JSON exports) pass through."""
    if isinstance(val, expected):
        return val
    if _missing(val):
        return None
    try:
        parsed = json.loads(str(val))
    except (TypeError, ValueError):
        return None
    return parsed if isinstance(parsed, expected) else None


def _parse_photos(val: object) -> list[str]:
    """JSON list, or a comma-separated string of URLs."""
    parsed = _json_value(val, list)
    if parsed is not None:
        return [str(p) for p in parsed if p]
    text_ = _text(val)
    if not text_:
        return []
    return [p.strip() for p in text_.split(",") if p.strip()]


def _parse_hours(val: object) -> dict[str, str]:
    parsed = _json_value(val, dict)
    if not parsed:
        return {}
    return {str(day).lower(): str(hours) for day, hours in parsed.items()}


def normalise_row(row: dict[str, Any]) -> dict[str, Any]:
    """
    Map one exported row onto restaurant columns.
    Raises ValueError when name or coordinates are unusable.
    """
    name = _text(row.get("name"))
    lat = _float(row.get("lat"))
    lng = _float(row.get("lng"))
    if not name or lat is None or lng is None:
        raise ValueError("row needs name, lat and lng")

    address = _text(row.get("address")) or ""
    cuisine = _text(row.get("cuisine"))
    category = (_text(row.get("category")) or "").lower()
    price_range = _text(row.get("price_range"))
    google_rating = _float(row.get("google_rating"))
    tripadvisor_rating = _float(row.get("tripadvisor_rating"))
    viral_mentions = _int(row.get("viral_mentions"))

    is_halal = _bool(row.get("is_halal"))
    if is_halal is None:
        is_halal = _classifier.classify_place(name, [cuisine or "", category], address)

    trending_score = _float(row.get("trending_score"))
    if trending_score is None:
        trending_score = seed_trending_score(google_rating, viral_mentions)

    record = {
        "name": name,
        "address": address,
        "lat": lat,
        "lng": lng,
        "category": category if category in CATEGORIES else "hawker",
        "cuisine": cuisine,
        "google_rating": google_rating,
        "tripadvisor_rating": tripadvisor_rating,
        "aggregate_rating": _float(row.get("aggregate_rating")) or google_rating or tripadvisor_rating,
        "must_try_dish": _text(row.get("must_try_dish")),
        "price_range": price_range if price_range in PRICE_TIERS else "$$",
        "operating_hours": _parse_hours(row.get("operating_hours")),
        "viral_mentions": viral_mentions,
        "trending_score": trending_score,
        "photos": _parse_photos(row.get("photos")),
        "is_halal": is_halal,
        "halal_cert_number": _text(row.get("halal_cert_number")),
    }
    record["halal_certified"] = bool(record["halal_cert_number"])

    place_id = _text(row.get("google_place_id"))
    if place_id:
        record["google_place_id"] = place_id
    return record


def load_frame(path: str) -> pd.DataFrame:
    """CSV by default; .json files are read as a list of records."""
    if Path(path).suffix.lower() == ".json":
        df = pd.read_json(path, orient="records")
    else:
        df = pd.read_csv(path, low_memory=False)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")

    before = len(df)
    subset = ["google_place_id"] if "google_place_id" in df.columns else ["name", "lat", "lng"]
    df = df.drop_duplicates(subset=subset)
    logger.info("After dedup on %s: %d rows (removed %d).", subset, len(df), before - len(df))
    return df


# ── Main import logic ────────────────────────────────────────────────────────


async def run_import(file_path: str, dry_run: bool = False) -> None:
    logger.info("Loading file: %s", file_path)
    try:
        df = load_frame(file_path)
    except ValueError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    records: list[dict[str, Any]] = []
    skipped = 0
    for idx, row in enumerate(df.to_dict(orient="records")):
        try:
            records.append(normalise_row(row))
        except ValueError as exc:
            logger.warning("Skipping row %d (%s): %s", idx, row.get("name"), exc)
            skipped += 1

    if dry_run:
        halal = sum(1 for r in records if r["is_halal"])
        logger.info(
            "Dry run complete: %d ok (%d halal), %d skipped.", len(records), halal, skipped
        )
        return

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    inserted = updated = 0
    for record in records:
        try:
            async with session_scope() as session:
                store = SqlRestaurantStore(session)
                existing_id = None
                if record.get("google_place_id"):
                    existing_id = await store.find_id_by_place_id(record["google_place_id"])
                if existing_id:
                    await store.update_fields(existing_id, record)
                    updated += 1
                else:
                    await store.insert(record)
                    inserted += 1
        except Exception as exc:
            logger.warning("Error importing %s: %s", record["name"], exc)
            skipped += 1

    logger.info(
        "Import complete. Inserted: %d, Updated: %d, Skipped: %d",
        inserted, updated, skipped,
    )
    await engine.dispose()


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Import exported restaurants into the Viral Eats database.")
    parser.add_argument("--file", required=True, help="Path to a .csv or .json export")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, no DB writes")
    args = parser.parse_args()

    asyncio.run(run_import(file_path=args.file, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
