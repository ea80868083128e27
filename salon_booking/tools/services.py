"""Service catalogue and quick-prompt suggestions.

Both are immutable reference data built once at import time.
"""

import logging
from typing import Optional

from salon_booking.schemas.booking_schema import BookingMode, Category, Service

logger = logging.getLogger(__name__)

_S = BookingMode.SCHEDULED
_I = BookingMode.IMMEDIATE


def _service(
    category_id: str,
    service_id: str,
    name: str,
    duration: str,
    price: str,
    description: str,
    modes: tuple[BookingMode, ...] = (_S,),
) -> Service:
    return Service(
        id=service_id,
        name=name,
        duration=duration,
        price=price,
        description=description,
        category_id=category_id,
        modes=modes,
    )


CATEGORIES: tuple[Category, ...] = (
    Category(
        id="hair",
        name="Hair Services",
        icon="💇‍♀️",
        description="Cuts, Colour, Styling",
        services=(
            _service("hair", "haircut", "Haircut & Styling", "60 min", "£45",
                     "Professional cut and style tailored to your preferences"),
            _service("hair", "color", "Hair Colour", "120 min", "£85",
                     "Full colour treatment with premium products"),
            _service("hair", "highlights", "Highlights", "150 min", "£120",
                     "Partial or full highlights for dimensional colour"),
            _service("hair", "treatment", "Hair Treatment", "45 min", "£35",
                     "Deep conditioning and repair treatment", (_S, _I)),
        ),
    ),
    Category(
        id="nails",
        name="Nail Care",
        icon="💅",
        description="Manicure, Pedicure, Nail Art",
        services=(
            _service("nails", "manicure", "Classic Manicure", "30 min", "£25",
                     "Nail shaping, cuticle care, and polish"),
            _service("nails", "pedicure", "Luxury Pedicure", "45 min", "£35",
                     "Complete foot care with massage"),
            _service("nails", "gel", "Gel Polish", "60 min", "£40",
                     "Long-lasting gel polish application"),
            _service("nails", "nailart", "Nail Art Design", "45 min", "£30",
                     "Custom nail art and decorative elements"),
        ),
    ),
    Category(
        id="facial",
        name="Face & Skin",
        icon="✨",
        description="Facials, Treatments",
        services=(
            _service("facial", "facial", "Classic Facial", "60 min", "£65",
                     "Deep cleansing and rejuvenating facial"),
            _service("facial", "deepclean", "Deep Cleansing", "75 min", "£75",
                     "Intensive cleansing and extraction"),
            _service("facial", "antiaging", "Anti-Ageing", "90 min", "£95",
                     "Advanced anti-ageing treatment"),
            _service("facial", "microderm", "Microdermabrasion", "45 min", "£70",
                     "Exfoliating treatment for renewed skin"),
        ),
    ),
    Category(
        id="makeup",
        name="Makeup",
        icon="💄",
        description="Full Makeup, Special Occasion",
        services=(
            _service("makeup", "natural", "Natural Makeup", "45 min", "£45",
                     "Light, everyday makeup look"),
            _service("makeup", "evening", "Evening Makeup", "60 min", "£65",
                     "Full glam for evenings out"),
            _service("makeup", "bridal", "Bridal Makeup", "90 min", "£120",
                     "Long-wear bridal look with consultation"),
            _service("makeup", "lesson", "Makeup Tutorial", "60 min", "£55",
                     "One-to-one lesson with a makeup artist"),
        ),
    ),
)

QUICK_PROMPTS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Hair", (
        "I'd like to book a haircut",
        "I need a color treatment",
        "I want to book a hair styling appointment",
        "I need a root touch-up",
        "I'm interested in a hair treatment",
    )),
    ("Nails", (
        "I'd like to book a manicure",
        "I need a pedicure",
        "I want gel nails",
        "I need a nail repair",
        "I'm interested in nail art",
    )),
    ("Face & Skin", (
        "I'd like to book a facial",
        "I need a skin consultation",
        "I want to book a makeup session",
        "I'm interested in a skin treatment",
        "I need eyebrow shaping",
    )),
)


def get_categories() -> tuple[Category, ...]:
    return CATEGORIES


def get_category(category_id: str) -> Optional[Category]:
    """Look up a category by ID. Returns None if not found."""
    normalized = category_id.lower().strip()
    for category in CATEGORIES:
        if category.id == normalized:
            return category
    return None


def get_services(category_id: str, mode: BookingMode) -> list[Service]:
    """Services in a category that support the booking mode."""
    category = get_category(category_id)
    if category is None:
        return []
    return category.services_for(mode)


def get_service(service_id: str) -> Optional[Service]:
    """Look up a service by ID across all categories."""
    normalized = service_id.lower().strip()
    for category in CATEGORIES:
        for service in category.services:
            if service.id == normalized:
                return service
    return None


def count_services(mode: BookingMode) -> dict[str, int]:
    """Number of mode-compatible services per category ID."""
    return {c.id: len(c.services_for(mode)) for c in CATEGORIES}
