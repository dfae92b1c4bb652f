"""Load hazard records from CSV exports of the collection stage."""

import math
import pandas as pd
from pathlib import Path
from typing import Dict, List

from ..core.models import HazardRecord
from ..scoring.criteria import CATEGORY_NAMES
from ..zones.normalizer import ZONE_KINDS

REQUIRED_COLUMNS = ['category', 'lat', 'lon']

# Columns mapped onto HazardRecord fields; everything else becomes an attribute
RECORD_COLUMNS = {
    'category', 'kind', 'lat', 'lon', 'distance_from_start_km',
    'risk_score', 'id',
}

BOOLEAN_STRINGS = {
    'true': True, 'yes': True,
    'false': False, 'no': False,
}


def _native(value):
    """Convert pandas/numpy scalars to plain Python values."""
    if hasattr(value, 'item'):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str) and value.strip().lower() in BOOLEAN_STRINGS:
        return BOOLEAN_STRINGS[value.strip().lower()]
    return value


def _optional_float(value):
    value = _native(value)
    return None if value is None or value == '' else float(value)


def load_hazard_records(csv_file: str) -> Dict[str, List[HazardRecord]]:
    """
    Load hazard records grouped by risk category.

    Args:
        csv_file: CSV with at least `category`, `lat` and `lon` columns

    Returns:
        Dict of category -> list of HazardRecord

    Raises:
        FileNotFoundError: If the CSV file does not exist
        ValueError: If required columns are missing or a category is unknown
    """
    csv_path = Path(csv_file)
    if not csv_path.exists():
        raise FileNotFoundError(f"Hazard records file not found: {csv_file}")

    print(f"📂 Loading hazard records from {csv_path}...")
    df = pd.read_csv(csv_path)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns in {csv_file}: {missing}")

    df['category'] = df['category'].astype(str).str.strip()
    unknown = sorted(set(df['category']) - set(CATEGORY_NAMES))
    if unknown:
        raise ValueError(
            f"Unknown categories in {csv_file}: {unknown}. "
            f"Valid options: {', '.join(CATEGORY_NAMES)}"
        )

    records: Dict[str, List[HazardRecord]] = {}
    attribute_columns = [c for c in df.columns if c not in RECORD_COLUMNS]

    for row in df.to_dict('records'):
        category = row['category']
        kind = _native(row.get('kind')) or ZONE_KINDS.get(category, category)

        attributes = {}
        for column in attribute_columns:
            value = _native(row[column])
            if value is not None:
                attributes[column] = value

        record_id = _native(row.get('id'))

        records.setdefault(category, []).append(HazardRecord(
            kind=str(kind),
            lat=float(row['lat']),
            lon=float(row['lon']),
            distance_from_start_km=_optional_float(row.get('distance_from_start_km')),
            risk_score=_optional_float(row.get('risk_score')),
            attributes=attributes,
            record_id=None if record_id is None else str(record_id),
        ))

    total = sum(len(r) for r in records.values())
    print(f"✓ Loaded {total} records in {len(records)} categories")
    return records
