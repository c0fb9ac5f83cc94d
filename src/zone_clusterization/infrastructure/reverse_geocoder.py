# ============================================================
# 📦 src/zone_clusterization/infrastructure/reverse_geocoder.py
# ============================================================

import asyncio
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict

import requests
from loguru import logger

from zone_clusterization.config import settings


class ReverseGeocodingError(RuntimeError):
    pass


def cache_key(lat: float, lng: float):
    # ~0.1 m precision
    return (round(lat, 6), round(lng, 6))


class _CachedReverseGeocoder(ABC):
    """
    Base: bounded LRU cache + async call.
    Subclasses implement `_lookup(lat, lng)` with a blocking HTTP request.
    Failed lookups are never cached.
    """

    def __init__(self, timeout: int = settings.GEOCODE_TIMEOUT, cache_size: int = settings.GEOCODE_CACHE_SIZE):
        self.timeout = timeout
        self.failed = 0
        self._cached_lookup = lru_cache(maxsize=cache_size)(self._checked_lookup)

    @abstractmethod
    def _lookup(self, lat: float, lng: float) -> str:
        """Blocking remote lookup; raises ReverseGeocodingError or requests.RequestException."""

    def _checked_lookup(self, lat: float, lng: float) -> str:
        try:
            return self._lookup(lat, lng)
        except ReverseGeocodingError:
            self.failed += 1
            raise
        except requests.RequestException as e:
            self.failed += 1
            raise ReverseGeocodingError(f"HTTP error reverse geocoding ({lat:.6f}, {lng:.6f}): {e}") from e

    def reverse_geocode(self, lat: float, lng: float) -> str:
        return self._cached_lookup(*cache_key(lat, lng))

    def cache_info(self):
        return self._cached_lookup.cache_info()

    def cache_clear(self) -> None:
        self._cached_lookup.cache_clear()

    @property
    def stats(self) -> Dict[str, int]:
        info = self._cached_lookup.cache_info()
        return {"cache": info.hits, "remote": info.misses - self.failed, "failed": self.failed}

    async def __call__(self, lat: float, lng: float) -> str:
        return await asyncio.to_thread(self.reverse_geocode, lat, lng)


# ============================================================
# 🗺️ GOOGLE GEOCODING
# ============================================================
class GoogleReverseGeocoder(_CachedReverseGeocoder):

    def __init__(self, api_key: str, url: str = settings.GOOGLE_GEOCODE_URL, **kwargs):
        super().__init__(**kwargs)
        if not api_key:
            raise ValueError("GoogleReverseGeocoder requires an API key (GMAPS_API_KEY).")
        self.api_key = api_key
        self.url = url

    def _lookup(self, lat: float, lng: float) -> str:
        params = {"latlng": f"{lat},{lng}", "key": self.api_key}
        r = requests.get(self.url, params=params, timeout=self.timeout)
        if r.status_code != 200:
            raise ReverseGeocodingError(f"Google HTTP {r.status_code}")

        data = r.json()
        status = data.get("status")
        results = data.get("results") or []
        if status != "OK" or not results:
            raise ReverseGeocodingError(f"Google status={status} for ({lat:.6f}, {lng:.6f})")

        address = results[0].get("formatted_address")
        if not address:
            raise ReverseGeocodingError("Google result without formatted_address")
        return address


# ============================================================
# 🧭 NOMINATIM
# ============================================================
class NominatimReverseGeocoder(_CachedReverseGeocoder):

    def __init__(self, base_url: str = settings.NOMINATIM_URL, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip("/")

    def _lookup(self, lat: float, lng: float) -> str:
        params = {"lat": lat, "lon": lng, "format": "json", "zoom": 16}
        headers = {"User-Agent": "GapMap-ZoneClusterization/1.0"}
        r = requests.get(f"{self.base_url}/reverse", params=params, headers=headers, timeout=self.timeout)
        if r.status_code != 200:
            raise ReverseGeocodingError(f"Nominatim HTTP {r.status_code}")

        data = r.json()
        address = data.get("display_name")
        if not address:
            raise ReverseGeocodingError(data.get("error", "Nominatim returned no address"))
        return address


def build_reverse_geocoder(use_google: bool = True) -> _CachedReverseGeocoder:
    """Google when a key is configured, Nominatim otherwise."""
    if use_google and settings.GMAPS_API_KEY:
        logger.info("🗺️ Reverse geocoder: Google")
        return GoogleReverseGeocoder(api_key=settings.GMAPS_API_KEY)
    logger.info(f"🧭 Reverse geocoder: Nominatim ({settings.NOMINATIM_URL})")
    return NominatimReverseGeocoder()
