# ============================================================
# 📦 src/zone_clusterization/infrastructure/place_loader.py
# ============================================================

import json
from pathlib import Path
from typing import List

import pandas as pd
from loguru import logger

from zone_clusterization.domain.entities import Place


def load_places(path) -> List[Place]:
    """
    Reads competitor places from JSON (list or {"places": [...]}) or CSV.
    CSV needs lat + lng/lon columns; empty cells become None.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Places file not found: {path}")

    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path)
        missing = {"lat"} - set(df.columns)
        if missing or not ({"lng", "lon"} & set(df.columns)):
            raise ValueError(f"CSV {path} must have lat and lng/lon columns (got {list(df.columns)}).")
        df = df.astype(object).where(pd.notna(df), None)
        records = df.to_dict(orient="records")
    else:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        records = data.get("places", []) if isinstance(data, dict) else data

    places = []
    for i, rec in enumerate(records):
        try:
            places.append(Place.from_dict(rec))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid place record #{i} in {path}: {e}") from e

    logger.info(f"📦 {len(places)} places loaded from {path.name}")
    return places
