# ============================================================
# 📦 src/zone_clusterization/config/region_stopwords.py
# ============================================================
#
# Places API addresses look like "street, neighbourhood, postcode city, state, country".
# Each preset lists the tokens that never name a neighbourhood.

MALAYSIA_REGIONS = (
    "selangor",
    "kuala lumpur",
    "johor",
    "penang",
    "perak",
    "sabah",
    "sarawak",
    "kedah",
    "kelantan",
    "melaka",
    "negeri sembilan",
    "pahang",
    "perlis",
    "terengganu",
    "putrajaya",
    "labuan",
)

MALAYSIA_COUNTRY_PATTERN = r"malaysia"

# five digits at the start of the token ("50450 Kuala Lumpur")
FIVE_DIGIT_POSTAL_PATTERN = r"^\d{5}"


REGION_PRESETS = {
    "MY": {
        "regions": MALAYSIA_REGIONS,
        "country_pattern": MALAYSIA_COUNTRY_PATTERN,
        "postal_code_pattern": FIVE_DIGIT_POSTAL_PATTERN,
    },
}
