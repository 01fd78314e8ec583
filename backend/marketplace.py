"""
KrishiSetu - Marketplace listing board.
Transient in-memory listings; farmers post produce, buyers browse and filter.
"""
import time
from typing import Any, Dict, List, Optional

from logger import get_logger

logger = get_logger(__name__)

DEFAULT_IMAGE = "/assets/generated/wheat-icon.dim_128x128.png"
CROP_IMAGES = {
    "rice": "/assets/generated/rice-icon.dim_128x128.png",
    "wheat": "/assets/generated/wheat-icon.dim_128x128.png",
    "corn": "/assets/generated/corn-icon.dim_128x128.png",
    "cotton": "/assets/generated/cotton-icon.dim_128x128.png",
}

SAMPLE_LISTINGS: List[Dict[str, Any]] = [
    {"id": "1", "crop_name": "Rice", "quantity": 50, "price": 2000, "location": "Punjab",
     "farmer_name": "Rajesh Kumar", "contact": "+91 98765 43210", "image": CROP_IMAGES["rice"]},
    {"id": "2", "crop_name": "Wheat", "quantity": 40, "price": 2200, "location": "Haryana",
     "farmer_name": "Suresh Patel", "contact": "+91 98765 43211", "image": CROP_IMAGES["wheat"]},
    {"id": "3", "crop_name": "Cotton", "quantity": 30, "price": 5500, "location": "Gujarat",
     "farmer_name": "Amit Shah", "contact": "+91 98765 43212", "image": CROP_IMAGES["cotton"]},
    {"id": "4", "crop_name": "Corn", "quantity": 35, "price": 1800, "location": "Karnataka",
     "farmer_name": "Ramesh Reddy", "contact": "+91 98765 43213", "image": CROP_IMAGES["corn"]},
]


class ListingError(Exception):
    pass


class Marketplace:
    def __init__(self, seed: bool = True):
        self._listings: List[Dict[str, Any]] = [dict(l) for l in SAMPLE_LISTINGS] if seed else []

    def _next_id(self) -> str:
        """Millisecond timestamp, bumped if another listing already has it."""
        taken = {l["id"] for l in self._listings}
        candidate = int(time.time() * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def add_listing(
        self,
        crop_name: str,
        quantity: float,
        price: float,
        location: str,
        farmer_name: str,
        contact: str,
    ) -> Dict[str, Any]:
        """Create a listing and put it at the top of the board."""
        text_fields = (crop_name, location, farmer_name, contact)
        if any(not (f and f.strip()) for f in text_fields) or not quantity or not price:
            raise ListingError("Please fill all fields")

        listing = {
            "id": self._next_id(),
            "crop_name": crop_name.strip(),
            "quantity": quantity,
            "price": price,
            "location": location.strip(),
            "farmer_name": farmer_name.strip(),
            "contact": contact.strip(),
            "image": CROP_IMAGES.get(crop_name.strip().lower(), DEFAULT_IMAGE),
        }
        self._listings.insert(0, listing)
        logger.info("New listing %s: %s x%s @ %s (%s)", listing["id"], listing["crop_name"],
                    quantity, price, listing["location"])
        return listing

    def list_listings(self) -> List[Dict[str, Any]]:
        return list(self._listings)

    def filter_listings(
        self,
        search: Optional[str] = None,
        crop: Optional[str] = "all",
        location: Optional[str] = "all",
    ) -> List[Dict[str, Any]]:
        """
        search: substring of crop name or location (case-insensitive)
        crop: "all" or exact crop name (case-insensitive)
        location: "all" or substring of location (case-insensitive)
        """
        term = (search or "").lower()
        crop = (crop or "all").lower()
        location = (location or "all").lower()

        out = []
        for l in self._listings:
            name = l["crop_name"].lower()
            loc = l["location"].lower()
            if term and term not in name and term not in loc:
                continue
            if crop != "all" and name != crop:
                continue
            if location != "all" and location not in loc:
                continue
            out.append(l)
        return out
