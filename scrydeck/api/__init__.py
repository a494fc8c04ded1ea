from scrydeck.api.decks import router as decks_router
from scrydeck.api.health import router as health_router
from scrydeck.api.printings import router as printings_router

__all__ = [
    "decks_router",
    "health_router",
    "printings_router",
]
