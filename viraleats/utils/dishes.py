"""Signature-dish name generation for synthetic trending dishes."""

from __future__ import annotations

import zlib
from typing import Iterable, Optional

# Keyword found in the restaurant name (or place types) → likely signature dishes
DISH_MAPPINGS: dict[str, list[str]] = {
    "nasi": ["Nasi Lemak Special", "Nasi Goreng Kampung", "Nasi Kerabu"],
    "mee": ["Mee Goreng Mamak", "Mee Rebus", "Mee Kari"],
    "laksa": ["Laksa Penang", "Laksa Sarawak", "Curry Laksa"],
    "satay": ["Satay Ayam", "Satay Daging", "Satay Combo"],
    "roti": ["Roti Canai Telur", "Roti Boom", "Roti Tisu"],
    "mamak": ["Maggi Goreng", "Roti Canai", "Teh Tarik"],
    "dim sum": ["Har Gow", "Siu Mai", "Char Siu Bao"],
    "cafe": ["Signature Coffee", "Buttermilk Waffle", "Eggs Benedict"],
    "kopitiam": ["Kaya Toast Set", "Hainanese Coffee", "Half Boiled Eggs"],
    "western": ["Grilled Lamb Chop", "Chicken Chop", "Fish And Chips"],
    "korean": ["Korean Fried Chicken", "Bibimbap", "Tteokbokki"],
    "japanese": ["Salmon Sashimi", "Chicken Katsu Don", "Ramen Set"],
    "thai": ["Tom Yum Soup", "Pad Thai", "Green Curry"],
    "indian": ["Banana Leaf Rice", "Tandoori Chicken", "Butter Naan"],
    "chinese": ["Salted Egg Chicken", "Claypot Chicken Rice", "Dim Sum Platter"],
    "seafood": ["Butter Prawns", "Salted Egg Crab", "Steam Fish"],
    "steak": ["Ribeye Steak", "Wagyu Beef", "Lamb Rack"],
    "burger": ["Signature Beef Burger", "Ramly Burger Special", "Chicken Burger"],
    "pizza": ["Margherita Pizza", "Pepperoni Pizza", "Hawaiian Pizza"],
    "bakery": ["Croissant", "Sourdough Bread", "Danish Pastry"],
    "dessert": ["Cendol", "Ais Kacang", "Durian Crepe"],
}

DEFAULT_DISHES = [
    "Chef Special",
    "Signature Platter",
    "House Recommendation",
    "Set Meal",
    "Daily Special",
]


def _pick(options: list[str], seed: str) -> str:
    # crc32 keeps the choice stable across processes (unlike hash())
    return options[zlib.crc32(seed.encode("utf-8")) % len(options)]


def generate_dish_name(restaurant_name: str, types: Optional[Iterable[str]] = None) -> str:
    """Pick a plausible signature dish; the same name always yields the same dish."""
    name_lower = restaurant_name.lower()
    for keyword, dishes in DISH_MAPPINGS.items():
        if keyword in name_lower:
            return _pick(dishes, restaurant_name).title()

    type_text = " ".join(types or []).lower()
    if type_text:
        for keyword, dishes in DISH_MAPPINGS.items():
            if keyword in type_text:
                return _pick(dishes, restaurant_name).title()

    return _pick(DEFAULT_DISHES, restaurant_name).title()
