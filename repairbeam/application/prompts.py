"""Prompt templates for catalog generation.

Each builder returns a (system, user) prompt pair. All prompts ask for
a single JSON object so responses can be parsed uniformly.
"""

import json

BRAND_SYSTEM_PROMPT = (
    "You are an expert in device brands and repair industry knowledge. "
    "Provide comprehensive, accurate brand lists for repair management systems."
)

MODEL_SYSTEM_PROMPT = (
    "You are an expert in device models and repair industry knowledge. "
    "Provide comprehensive, accurate model lists for repair management systems "
    "focusing on recent models."
)

VALIDATION_SYSTEM_PROMPT = (
    "You are an expert in device brands and manufacturers. "
    "Validate brand names and correct typos."
)


def brand_list_prompt(category: str, min_brands: int = 30, max_brands: int = 40) -> tuple[str, str]:
    """Build the prompt for a category's brand list."""
    user = f"""Generate a list of popular device brands for {category} devices. Include both well-known international brands and regional brands that are commonly repaired or serviced in repair shops.

Response format: {{"brands": ["Brand1", "Brand2", ...]}}

Requirements:
- Include {min_brands}-{max_brands} brands
- Mix of premium, mid-range, and budget brands
- Include both current and legacy brands that might still need repairs
- Use the manufacturer's canonical spelling
- Sort alphabetically"""
    return BRAND_SYSTEM_PROMPT, user


def model_list_prompt(
    category: str,
    brand: str,
    start_year: int,
    end_year: int,
    max_models: int,
) -> tuple[str, str]:
    """Build the prompt for one brand's model list."""
    user = f"""Generate a list of {brand} {category} models released from {start_year} to {end_year}. Focus on models that are commonly repaired or serviced in repair shops.

Response format: {{"models": ["Model1", "Model2", ...]}}

Requirements:
- Include only models released between {start_year} and {end_year}
- Use official model names as they appear on the device
- Include both consumer and professional models
- Sort chronologically from newest to oldest
- Return at most {max_models} models
- Return an empty array if {brand} makes no {category} devices"""
    return MODEL_SYSTEM_PROMPT, user


def batch_model_list_prompt(
    category: str,
    brands: list[str],
    start_year: int,
    end_year: int,
    max_models: int,
) -> tuple[str, str]:
    """Build the prompt for several brands' model lists in one request."""
    brand_names = json.dumps(brands, ensure_ascii=False)
    user = f"""For each of these {category} brands: {brand_names}

List the {category} models each brand released from {start_year} to {end_year} that are commonly repaired or serviced in repair shops.

Response format: a JSON object keyed by the exact brand name as given above, each value an array of model names:
{{"BrandA": ["Model1", "Model2"], "BrandB": []}}

Requirements:
- Include every brand listed above as a key
- Include only models released between {start_year} and {end_year}
- Use official model names, newest first
- At most {max_models} models per brand
- Use an empty array for a brand that makes no {category} devices"""
    return MODEL_SYSTEM_PROMPT, user


def brand_validation_prompt(category: str, brand_name: str) -> tuple[str, str]:
    """Build the prompt that checks a user-entered brand name."""
    user = f"""Is "{brand_name}" a real {category.lower()} brand/manufacturer?

Consider:
- Exact matches (Apple, Samsung, etc.)
- Common typos (Appel -> Apple, Samsang -> Samsung)
- Alternative spellings or abbreviations
- Regional brand names

Respond with JSON in this exact format:
{{"isValid": boolean, "correctedName": "exact brand name" or null if invalid, "confidence": number between 0-1}}

Examples:
- "Appel" -> {{"isValid": true, "correctedName": "Apple", "confidence": 0.9}}
- "xyz123" -> {{"isValid": false, "correctedName": null, "confidence": 0.1}}"""
    return VALIDATION_SYSTEM_PROMPT, user
