"""Default shelf life per product category."""

DEFAULT_SHELF_LIFE_DAYS = 14

CATEGORY_SHELF_LIFE_DAYS: dict[str, int] = {
    "produce": 7,
    "dairy": 10,
    "meat": 5,
    "seafood": 3,
    "pantry": 90,
    "frozen": 60,
    "canned": 365,
    "bakery": 4,
    "beverages": 180,
    "snacks": 60,
    "household": 730,
    "other": 14,
}

# Checked in order when the category is not an exact table entry
KEYWORD_SHELF_LIFE_DAYS: list[tuple[tuple[str, ...], int]] = [
    (("vegetable", "fruit"), 7),
    (("milk", "yogurt", "cheese"), 10),
    (("meat", "chicken", "fish"), 5),
    (("bread",), 4),
]


def shelf_life_days(category: str | None) -> int:
    """Return the default shelf life in days for a category.

    Exact (case-insensitive) table match first, then keyword containment,
    then the 14 day default. Never raises.
    """
    if not category:
        return DEFAULT_SHELF_LIFE_DAYS

    normalized = category.lower().strip()
    if normalized in CATEGORY_SHELF_LIFE_DAYS:
        return CATEGORY_SHELF_LIFE_DAYS[normalized]

    for keywords, days in KEYWORD_SHELF_LIFE_DAYS:
        if any(keyword in normalized for keyword in keywords):
            return days

    return DEFAULT_SHELF_LIFE_DAYS
