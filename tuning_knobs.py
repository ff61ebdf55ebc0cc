# tuning_knobs.py
"""
TUNING KNOBS (EDIT THIS FILE)

Default pricing factors, price grids and delay presets. The pricing store
seeds these values the first time it runs; after that the admin-edited
records win.
"""

# ============================================================
# 1) GLOBAL PRICING FACTORS
# ============================================================
# Percentages are 0-100, money is EUR excl. VAT.
PRICING_CONFIG_DEFAULTS = {
    "textile_discount_percent": "30",
    "client_provided_indexation_percent": "10",
    "express_surcharge_percent_per_day": "10",
    "individual_packaging_unit_price": "0.10",
    "new_carton_unit_price": "2.00",
    "vectorization_unit_price": "25.00",
    "carrier_carton_price": "13.65",
    "courier_price_per_km": "1.20",
    "courier_minimum_fee": "25.00",
}

BASELINE_LEAD_TIME_DAYS = 10

# ============================================================
# 2) QUANTITY TIERS (shared by all techniques)
# ============================================================
QUANTITY_RANGES = [
    {"min": 1, "max": 10, "label": "1-10"},
    {"min": 11, "max": 50, "label": "11-50"},
    {"min": 51, "max": 100, "label": "51-100"},
    {"min": 101, "max": None, "label": "101+"},
]

# ============================================================
# 3) SCREEN PRINT (quantity x color count)
# ============================================================
SCREEN_PRINT_COLOR_COUNTS = [1, 2, 3, 4, 5, 6]
SCREEN_PRINT_FIXED_FEE_PER_COLOR = "25"

SCREEN_PRINT_OPTIONS = [
    {"id": "discharge", "name": "Discharge", "surcharge_percentage": "15"},
    {"id": "stop-sublimation", "name": "Stop sublimation", "surcharge_percentage": "20"},
    {"id": "gold", "name": "Gold", "surcharge_percentage": "25"},
    {"id": "phospho", "name": "Phospho", "surcharge_percentage": "30"},
]

SCREEN_PRINT_PRICES_LIGHT = {
    "1-10":   {1: "2.50", 2: "2.20", 3: "2.00", 4: "1.90", 5: "1.80", 6: "1.70"},
    "11-50":  {1: "2.00", 2: "1.80", 3: "1.60", 4: "1.50", 5: "1.40", 6: "1.30"},
    "51-100": {1: "1.50", 2: "1.30", 3: "1.20", 4: "1.10", 5: "1.00", 6: "0.95"},
    "101+":   {1: "1.20", 2: "1.00", 3: "0.90", 4: "0.85", 5: "0.80", 6: "0.75"},
}

# Dark textiles need an underbase, so they run a bit higher
SCREEN_PRINT_PRICES_DARK = {
    "1-10":   {1: "2.70", 2: "2.40", 3: "2.20", 4: "2.10", 5: "2.00", 6: "1.90"},
    "11-50":  {1: "2.20", 2: "2.00", 3: "1.80", 4: "1.70", 5: "1.60", 6: "1.50"},
    "51-100": {1: "1.70", 2: "1.50", 3: "1.40", 4: "1.30", 5: "1.20", 6: "1.15"},
    "101+":   {1: "1.40", 2: "1.20", 3: "1.10", 4: "1.05", 5: "1.00", 6: "0.95"},
}

# ============================================================
# 4) EMBROIDERY (quantity x stitch range)
# ============================================================
EMBROIDERY_STITCH_RANGES = [
    {"min": 0, "max": 5000, "label": "0-5000"},
    {"min": 5001, "max": 10000, "label": "5001-10000"},
    {"min": 10001, "max": 20000, "label": "10001-20000"},
    {"min": 20001, "max": None, "label": "20001+"},
]

EMBROIDERY_FIXED_FEE_SMALL_DIGITIZATION = "40"
EMBROIDERY_FIXED_FEE_LARGE_DIGITIZATION = "60"
EMBROIDERY_SMALL_DIGITIZATION_THRESHOLD = 10000

# small = max 10x10 cm
EMBROIDERY_PRICES_SMALL = {
    "1-10":   {"0-5000": "3.50", "5001-10000": "4.00", "10001-20000": "4.50", "20001+": "5.00"},
    "11-50":  {"0-5000": "3.00", "5001-10000": "3.50", "10001-20000": "4.00", "20001+": "4.50"},
    "51-100": {"0-5000": "2.50", "5001-10000": "3.00", "10001-20000": "3.50", "20001+": "4.00"},
    "101+":   {"0-5000": "2.00", "5001-10000": "2.50", "10001-20000": "3.00", "20001+": "3.50"},
}

# large = max 20x25 cm
EMBROIDERY_PRICES_LARGE = {
    "1-10":   {"0-5000": "4.50", "5001-10000": "5.00", "10001-20000": "5.50", "20001+": "6.00"},
    "11-50":  {"0-5000": "4.00", "5001-10000": "4.50", "10001-20000": "5.00", "20001+": "5.50"},
    "51-100": {"0-5000": "3.50", "5001-10000": "4.00", "10001-20000": "4.50", "20001+": "5.00"},
    "101+":   {"0-5000": "3.00", "5001-10000": "3.50", "10001-20000": "4.00", "20001+": "4.50"},
}

# ============================================================
# 5) DIRECT TO FILM (quantity x print size)
# ============================================================
DTF_PRINT_SIZES = ["10x10 cm", "15x15 cm", "20x20 cm", "25x25 cm", "30x30 cm", "Custom"]

DTF_PRICES = {
    "1-10": {
        "10x10 cm": "4.50", "15x15 cm": "5.50", "20x20 cm": "6.50",
        "25x25 cm": "7.50", "30x30 cm": "8.50", "Custom": "9.00",
    },
    "11-50": {
        "10x10 cm": "3.50", "15x15 cm": "4.50", "20x20 cm": "5.50",
        "25x25 cm": "6.50", "30x30 cm": "7.50", "Custom": "8.00",
    },
    "51-100": {
        "10x10 cm": "2.50", "15x15 cm": "3.50", "20x20 cm": "4.50",
        "25x25 cm": "5.50", "30x30 cm": "6.50", "Custom": "7.00",
    },
    "101+": {
        "10x10 cm": "2.00", "15x15 cm": "3.00", "20x20 cm": "4.00",
        "25x25 cm": "5.00", "30x30 cm": "6.00", "Custom": "6.50",
    },
}

# ============================================================
# 6) DELAYS (working days) + TOGGLES
# ============================================================
DELAY_PRESET = "normal"  # "normal", "no_express", "standard_only"

MIN_WORKING_DAYS = 1
MIN_EXPRESS_DAYS = 0.5
DEFAULT_EXPRESS_DAYS = 1

DELAY_PRESETS = {
    "normal":        {"reduced": True,  "express": True},
    "no_express":    {"reduced": True,  "express": False},
    "standard_only": {"reduced": False, "express": False},
}

DELAY_ENABLED = DELAY_PRESETS.get(DELAY_PRESET, {"reduced": True, "express": True})

# ============================================================
# 7) CARTONS (pieces per carton)
# ============================================================
CARTON_CAPACITY = {
    "tshirt": 80,
    "sweat": 30,
    "totebag": 200,
}

DEFAULT_CARTON_TYPE = "tshirt"

# ============================================================
# 8) WAREHOUSE (origin for courier distance)
# ============================================================
WAREHOUSE_ADDRESS = {
    "street": "3 Rue de la maitrise",
    "city": "Nivelles",
    "postal_code": "1400",
    "country": "BE",
}
