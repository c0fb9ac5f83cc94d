# ============================================================
# 📦 src/zone_clusterization/config/settings.py
# ============================================================

import os


# =====================================================
# 🌍 Reverse geocoding (external collaborator)
# =====================================================
GMAPS_API_KEY = os.getenv("GMAPS_API_KEY")
GOOGLE_GEOCODE_URL = os.getenv(
    "GOOGLE_GEOCODE_URL", "https://maps.googleapis.com/maps/api/geocode/json"
)
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
GEOCODE_TIMEOUT = int(os.getenv("ZONE_GEOCODE_TIMEOUT", "7"))
GEOCODE_CACHE_SIZE = int(os.getenv("ZONE_GEOCODE_CACHE_SIZE", "4096"))


# =====================================================
# ⚙️ Analysis defaults
# =====================================================
ZONE_THRESHOLD_M = float(os.getenv("ZONE_THRESHOLD_M", "1000"))
ZONE_TOP_GAPS = int(os.getenv("ZONE_TOP_GAPS", "3"))
ZONE_NEIGHBOR_INDEX = os.getenv("ZONE_NEIGHBOR_INDEX", "brute")


# =====================================================
# 🪵 Logging / API
# =====================================================
LOG_LEVEL = os.getenv("ZONE_LOG_LEVEL", "INFO")
API_HOST = os.getenv("ZONE_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("ZONE_API_PORT", "8010"))
