"""Session-scoped shopping cart."""
import logging
import secrets
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel

from quickbite.core.config import settings
from quickbite.services.menu.base import MenuItem

logger = logging.getLogger(__name__)

# Module-level cart storage keyed by the cart_id cookie (persists across requests)
# In production, use Redis or similar
_carts: Dict[str, dict] = {}


class CartLine(BaseModel):
    """One line in a cart."""

    menu_item_id: int
    name: str
    unit_price: Decimal
    quantity: int = 1
    personalization: str = ""

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


def new_cart_id() -> str:
    """Generate a cart id for the cart cookie."""
    return secrets.token_urlsafe(16)


def prune_abandoned_carts(now: Optional[datetime] = None) -> int:
    """Drop carts untouched for longer than the cart TTL. Returns how many were dropped."""
    cutoff = (now or datetime.utcnow()) - timedelta(hours=settings.cart_ttl_hours)
    stale = [cart_id for cart_id, cart in _carts.items() if cart["touched_at"] < cutoff]
    for cart_id in stale:
        del _carts[cart_id]
    if stale:
        logger.info(f"[CART] Pruned {len(stale)} abandoned cart(s)")
    return len(stale)


class SessionCart:
    """Cart lines for one browser session."""

    def __init__(self, cart_id: str):
        self.cart_id = cart_id
        prune_abandoned_carts()

    def _lines(self) -> List[CartLine]:
        cart = _carts.setdefault(self.cart_id, {"lines": []})
        cart["touched_at"] = datetime.utcnow()
        return cart["lines"]

    def items(self) -> List[CartLine]:
        return list(self._lines())

    def add_to_cart(self, item: MenuItem, quantity: int = 1, personalization: str = "") -> CartLine:
        """
        Add an item, merging with an existing line for the same item and personalization.

        Quantities below 1 count as 1.
        """
        quantity = max(1, int(quantity))
        personalization = (personalization or "").strip()
        lines = self._lines()

        for line in lines:
            if line.menu_item_id == item.id and line.personalization == personalization:
                line.quantity += quantity
                logger.info(f"[CART] {self.cart_id[:8]}: {item.name} now x{line.quantity}")
                return line

        line = CartLine(
            menu_item_id=item.id,
            name=item.name,
            unit_price=item.price,
            quantity=quantity,
            personalization=personalization,
        )
        lines.append(line)
        logger.info(f"[CART] {self.cart_id[:8]}: added {line.quantity} x {item.name}")
        return line

    def update_quantity(self, menu_item_id: int, quantity: int) -> Optional[CartLine]:
        """Set the quantity of every line for an item; 0 or less removes it."""
        if quantity < 1:
            self.remove_from_cart(menu_item_id)
            return None
        updated = None
        for line in self._lines():
            if line.menu_item_id == menu_item_id:
                line.quantity = quantity
                updated = line
        return updated

    def remove_from_cart(self, menu_item_id: int) -> bool:
        """Remove all lines for an item. Returns False if none were present."""
        lines = self._lines()
        remaining = [line for line in lines if line.menu_item_id != menu_item_id]
        removed = len(remaining) != len(lines)
        lines[:] = remaining
        if removed:
            logger.info(f"[CART] {self.cart_id[:8]}: removed item {menu_item_id}")
        return removed

    def clear_cart(self) -> None:
        _carts.pop(self.cart_id, None)
        logger.info(f"[CART] {self.cart_id[:8]}: cleared")

    def total(self) -> Decimal:
        return sum((line.line_total for line in self._lines()), Decimal("0.00"))

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines())
