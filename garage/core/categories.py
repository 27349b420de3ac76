from typing import Iterable, List

# Order matters: it is the order used when reporting missing categories.
REQUIRED_CATEGORIES = ("Power Unit", "Aero Package", "Tires", "Suspension", "Gearbox")


def category_key(category: str) -> str:
    """Normalized key for the one-part-per-category rule (exact names, no synonyms)."""
    return (category or "").strip()


def is_required_category(category: str) -> bool:
    return category_key(category) in REQUIRED_CATEGORIES


def missing_categories(keys: Iterable[str]) -> List[str]:
    present = set(keys)
    return [c for c in REQUIRED_CATEGORIES if c not in present]
