"""Static fallback catalogs.

Used whenever the generation provider is unavailable or returns
something unusable, so callers always get a list to work with.
"""

# ============================================================================
# Fallback Tables
# ============================================================================

FALLBACK_BRANDS: dict[str, list[str]] = {
    "Phone": [
        "Apple", "Samsung", "Google", "OnePlus", "Xiaomi", "Huawei", "Oppo", "Vivo",
        "LG", "Sony", "Motorola", "Nokia", "Honor", "Realme", "Nothing", "Fairphone",
    ],
    "Laptop": [
        "Apple", "Dell", "HP", "Lenovo", "Asus", "Acer", "MSI", "Razer",
        "Microsoft", "Alienware", "Thinkpad", "MacBook", "Surface", "Chromebook",
    ],
    "Desktop": [
        "Dell", "HP", "Lenovo", "Asus", "MSI", "Alienware", "Origin PC", "Corsair",
        "NZXT", "CyberPowerPC", "iBuyPower", "Falcon Northwest", "Maingear",
    ],
}

# Newest first, matching what the provider is asked for
FALLBACK_MODELS: dict[str, dict[str, list[str]]] = {
    "Phone": {
        "Apple": [
            "iPhone 15 Pro Max", "iPhone 15 Pro", "iPhone 15", "iPhone 14 Pro Max",
            "iPhone 14 Pro", "iPhone 14", "iPhone 13 Pro Max", "iPhone 13 Pro", "iPhone 13",
        ],
        "Samsung": [
            "Galaxy S24 Ultra", "Galaxy S24+", "Galaxy S24", "Galaxy S23 Ultra",
            "Galaxy S23+", "Galaxy S23", "Galaxy S22 Ultra", "Galaxy S22+", "Galaxy S22",
        ],
        "Google": ["Pixel 8 Pro", "Pixel 8", "Pixel 7 Pro", "Pixel 7", "Pixel 6 Pro", "Pixel 6"],
        "OnePlus": ["OnePlus 12", "OnePlus 11", "OnePlus 10 Pro", "OnePlus 9 Pro", "OnePlus 9"],
        "Xiaomi": ["Xiaomi 14 Ultra", "Xiaomi 14", "Xiaomi 13 Ultra", "Xiaomi 13", "Xiaomi 12 Ultra"],
    },
    "Laptop": {
        "Apple": [
            'MacBook Pro 16" M3', 'MacBook Pro 14" M3', 'MacBook Air 15" M2',
            'MacBook Air 13" M2', 'MacBook Pro 13" M2',
        ],
        "Dell": ["XPS 13 Plus", "XPS 15", "XPS 17", "Inspiron 15 3000", "Latitude 7420"],
        "HP": ["Spectre x360", "Envy 13", "Pavilion 15", "EliteBook 840", "ProBook 450"],
        "Lenovo": ["ThinkPad X1 Carbon", "ThinkPad T14", "IdeaPad 5", "Legion 5", "Yoga 9i"],
        "Asus": ["ZenBook 14", "VivoBook S15", "ROG Zephyrus G14", "TUF Gaming A15"],
    },
    "Desktop": {
        "Dell": ["Inspiron 3880", "XPS 8950", "OptiPlex 7090", "Alienware Aurora R13"],
        "HP": ["Pavilion Desktop", "OMEN 45L", "EliteDesk 800", "Workstation Z4"],
        "Lenovo": ["IdeaCentre 5", "Legion Tower 5i", "ThinkCentre M90q", "ThinkStation P340"],
        "Asus": ["VivoPC", "ROG Strix GT35", "Mini PC PN50", "ExpertCenter D5"],
        "MSI": ["Codex R", "Aegis RS 12", "Creator P100X", "Infinite S3"],
    },
}

PLACEHOLDER_MODEL_COUNT = 3


def fallback_brands(category: str) -> list[str]:
    """Get the static brand list for a category.

    Args:
        category: Device category.

    Returns:
        Copy of the fallback brands, empty for unknown categories.
    """
    return list(FALLBACK_BRANDS.get(category, []))


def fallback_models(category: str, brand: str) -> list[str]:
    """Get the static model list for a brand.

    Brands missing from the table get numbered placeholders so a
    provider failure never looks like "this brand has no models".

    Args:
        category: Device category.
        brand: Brand name.

    Returns:
        Fallback model names, never empty.
    """
    models = FALLBACK_MODELS.get(category, {}).get(brand)
    if models:
        return list(models)
    return [f"{brand} Model {n}" for n in range(1, PLACEHOLDER_MODEL_COUNT + 1)]
