"""Cosmetic shop: spend focus coins on themes, stickers and titles."""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal

from urfocus_cli.models import FocusPreferences, ShopItem
from urfocus_cli.models.config_models import DEFAULT_SHOP_COSTS
from urfocus_cli.models.exceptions import (
    InsufficientCoinsError,
    NotFoundError,
    ValidationError,
)
from urfocus_cli.utils.logger import get_logger

logger = get_logger()

DEFAULT_BACKGROUND = "system"

PurchaseOutcome = Literal["purchased", "equipped", "already_owned"]

# id -> (name, description, kind, background)
_CATALOG: dict[str, tuple[str, str, str, str | None]] = {
    "midnight-theme": (
        "Focus Theme: Midnight Blue",
        "A calm dark-blue background for late-night study sessions.",
        "background",
        "midnight",
    ),
    "study-gremlins": (
        "Sticker Pack: Study Gremlins",
        "Chaotic little creatures that cheer you on.",
        "sticker",
        None,
    ),
    "library-goblin": (
        "Title: Library Goblin",
        "Show off your streak with a goofy profile title.",
        "title",
        None,
    ),
    "gradient-background": (
        "Background: Yellow-Blue Gradient",
        "A bright gradient in campus colors.",
        "background",
        "gradient",
    ),
}


def build_catalog(item_costs: dict[str, int] | None = None) -> list[ShopItem]:
    """Shop items with prices taken from configuration."""
    costs = {**DEFAULT_SHOP_COSTS, **(item_costs or {})}
    return [
        ShopItem(
            id=item_id,
            name=name,
            description=description,
            cost=costs.get(item_id, 0),
            kind=kind,
            background=background,
        )
        for item_id, (name, description, kind, background) in _CATALOG.items()
    ]


class ShopService:
    """Buys and equips shop items against the local coin balance."""

    def __init__(
        self,
        preferences: FocusPreferences,
        save_preferences: Callable[[], None],
        item_costs: dict[str, int] | None = None,
    ):
        self.preferences = preferences
        self.save_preferences = save_preferences
        self.items = build_catalog(item_costs)

    def get_item(self, item_id: str) -> ShopItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise NotFoundError(f"Shop item '{item_id}' not found")

    def is_owned(self, item_id: str) -> bool:
        return item_id in self.preferences.owned_items

    def purchase(self, item_id: str) -> PurchaseOutcome:
        """Buy an item, equipping it if it is a background.

        Owned backgrounds are equipped for free and other owned items are
        left alone.

        Raises:
            NotFoundError: If the item does not exist
            InsufficientCoinsError: If the balance is below the price
        """
        item = self.get_item(item_id)
        prefs = self.preferences

        if self.is_owned(item.id):
            if item.kind == "background" and item.background:
                prefs.background = item.background
                self.save_preferences()
                return "equipped"
            return "already_owned"

        if prefs.coins < item.cost:
            raise InsufficientCoinsError(item.cost, prefs.coins)

        prefs.coins -= item.cost
        prefs.owned_items.append(item.id)
        if item.kind == "background" and item.background:
            prefs.background = item.background
        self.save_preferences()
        logger.info("purchased %s for %s coins", item.id, item.cost)
        return "purchased"

    def equip(self, background: str) -> str:
        """Switch the active background by item id or background id.

        Raises:
            NotFoundError: If no background matches
            ValidationError: If the background is not owned
        """
        if background == DEFAULT_BACKGROUND:
            self.preferences.background = DEFAULT_BACKGROUND
            self.save_preferences()
            return DEFAULT_BACKGROUND

        for item in self.items:
            if item.kind != "background":
                continue
            if background in (item.id, item.background):
                if not self.is_owned(item.id):
                    raise ValidationError(f"'{item.name}' is not owned yet")
                self.preferences.background = item.background
                self.save_preferences()
                return item.background
        raise NotFoundError(f"Background '{background}' not found")
