# ============================================================
# 📦 src/zone_clusterization/domain/area_name.py
# ============================================================

import re
from collections import Counter
from typing import Iterable, Optional, Sequence

from zone_clusterization.config.region_stopwords import REGION_PRESETS
from .entities import Place

UNKNOWN_AREA = "Unknown Area"


class AreaNameResolver:
    """
    Extracts a neighbourhood label from comma-separated addresses.

    Token 0 is the street line, so tokens 1..max_tokens-1 are inspected first.
    Postal codes, the country and administrative regions are skipped; when
    nothing survives the street line itself is used.
    """

    def __init__(
        self,
        regions: Iterable[str] = (),
        country_pattern: Optional[str] = None,
        postal_code_pattern: Optional[str] = r"^\d{5}",
        max_tokens: int = 4,
    ):
        self.regions = tuple(r.strip().lower() for r in regions if r and r.strip())
        self.max_tokens = max_tokens

        self._postal = re.compile(postal_code_pattern) if postal_code_pattern else None
        self._country = re.compile(country_pattern, re.IGNORECASE) if country_pattern else None
        self._region = (
            re.compile(r"^(" + "|".join(re.escape(r) for r in self.regions) + r")", re.IGNORECASE)
            if self.regions
            else None
        )

    @classmethod
    def for_region(cls, code: str) -> "AreaNameResolver":
        preset = REGION_PRESETS.get(code.upper())
        if preset is None:
            raise ValueError(f"Unknown region preset: {code}")
        return cls(
            regions=preset["regions"],
            country_pattern=preset["country_pattern"],
            postal_code_pattern=preset["postal_code_pattern"],
        )

    def _is_stopword(self, token: str) -> bool:
        if self._postal and self._postal.search(token):
            return True
        if self._country and self._country.search(token):
            return True
        if self._region and self._region.search(token):
            return True
        return False

    def extract(self, address: Optional[str]) -> str:
        parts = [s.strip() for s in (address or "").split(",")]

        for part in parts[1:min(len(parts), self.max_tokens)]:
            if not part or self._is_stopword(part):
                continue
            return part

        return parts[0] if parts and parts[0] else UNKNOWN_AREA

    def majority(self, places: Sequence[Place]) -> str:
        """Most frequent extracted name; ties go to the first one seen."""
        if not places:
            return UNKNOWN_AREA
        counts = Counter(self.extract(p.address) for p in places)
        return counts.most_common(1)[0][0]


DEFAULT_AREA_RESOLVER = AreaNameResolver.for_region("MY")
