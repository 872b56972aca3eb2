"""Order-phrase and price-edit extraction from free text."""
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence

from quickbite.services.chat.constants import DEFAULT_MENU_NAMES, NUMBER_WORDS
from quickbite.services.chat.intents import normalize
from quickbite.services.chat.models import ExtractedOrderItem, PriceEditRequest

logger = logging.getLogger(__name__)

_LEAD_VERB = r"(?:order|get|add|buy|want)"
_NAME = r"([a-z][\w\-' ]*?)"

# Item names end at "to (my) cart", a list separator or the end of the message.
_END_OF_ITEM = r"(?=\s+to\s+(?:my\s+)?cart\b|\s+and\s+|\s*[,&;]|\s*[.!?]*\s*$)"
_END_OF_PHRASE = r"(?=\s+to\s+(?:my\s+)?cart\b|\s*[.!?]*\s*$)"

NUMERIC_QUANTITY_RE = re.compile(
    rf"(?:{_LEAD_VERB}\s+)?\b(\d+)\s*(?:x\b)?\s*{_NAME}{_END_OF_ITEM}"
)
WORD_QUANTITY_RE = re.compile(
    rf"(?:{_LEAD_VERB}\s+)?\b({'|'.join(NUMBER_WORDS)})\s+{_NAME}{_END_OF_ITEM}"
)
BARE_ITEM_RE = re.compile(rf"\b{_LEAD_VERB}\s+{_NAME}{_END_OF_PHRASE}")

# Splits "a burger and a coke" but leaves "fish and chip" alone.
_BARE_SEPARATOR_RE = re.compile(
    rf"\s*[,&;]\s*|\s+and\s+(?=(?:a|an|some|the|\d+|{'|'.join(NUMBER_WORDS)})\b)"
)
_LEADING_FILLER_RE = re.compile(
    r"^(?:(?:to|please)\s+)*"
    r"(?:(?:order|get|add|buy|have|try)\b\s*)?"
    r"(?:(?:me|us)\s+)?"
    r"(?:(?:a|an|the|some|of|your|more)\s+)*"
)
_TRAILING_FILLER_RE = re.compile(r"(?:\s+(?:please|pls|plz|thanks|thank you|now|too|as well))+$")
_EXCLUDED_WORDS = {"order", "cart"}

PRICE_TEMPLATE_A = re.compile(
    r"(?:modify|change|update|set)\s+(?:the\s+)?price\s+of\s+([\w\-'][\w\s\-']*?)\s+to\s+rm\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)
PRICE_TEMPLATE_B = re.compile(
    r"(?:(?:modify|change|update|set)\s+(?:the\s+)?)?([\w\-'][\w\s\-']*?)\s+price\s+to\s+rm\s*(\d+(?:\.\d+)?)",
    re.IGNORECASE,
)


def clean_item_name(candidate: str) -> str:
    """Strip filler words around a candidate item name."""
    name = candidate.strip()
    name = _LEADING_FILLER_RE.sub("", name)
    name = _TRAILING_FILLER_RE.sub("", name)
    return name.strip(" -'")


def _is_excluded(name: str) -> bool:
    return any(word in _EXCLUDED_WORDS for word in name.split())


def _quantified_items(text: str) -> List[ExtractedOrderItem]:
    items = []
    for match in NUMERIC_QUANTITY_RE.finditer(text):
        quantity = int(match.group(1))
        name = clean_item_name(match.group(2))
        if name and quantity >= 1:
            items.append(ExtractedOrderItem(name=name, quantity=quantity))
    return items


def _word_quantified_items(text: str) -> List[ExtractedOrderItem]:
    items = []
    for match in WORD_QUANTITY_RE.finditer(text):
        quantity = NUMBER_WORDS.get(match.group(1), 1)
        name = clean_item_name(match.group(2))
        if name:
            items.append(ExtractedOrderItem(name=name, quantity=quantity))
    return items


def _bare_items(text: str) -> List[ExtractedOrderItem]:
    items = []
    for match in BARE_ITEM_RE.finditer(text):
        for part in _BARE_SEPARATOR_RE.split(match.group(1)):
            name = clean_item_name(part)
            if name and not _is_excluded(name):
                items.append(ExtractedOrderItem(name=name, quantity=1))
    return items


def _menu_name_scan(text: str, menu_names: Sequence[str]) -> List[ExtractedOrderItem]:
    return [
        ExtractedOrderItem(name=name, quantity=1)
        for name in menu_names
        if name and name.lower() in text
    ]


def extract_order_items(
    text: str, menu_names: Optional[Sequence[str]] = None
) -> List[ExtractedOrderItem]:
    """
    Parse an order phrase into (name, quantity) pairs.

    Strategies run in order and the first one that yields anything wins:
    digit quantities, word quantities (one..twelve), a bare item after an
    order verb, then a scan of the text for known menu names.

    Args:
        text: Free-text chat message
        menu_names: Names scanned for by the last strategy

    Returns:
        Extracted items; names are lower-case except for menu-name hits
    """
    normalized = normalize(text)
    if not normalized:
        return []

    names = DEFAULT_MENU_NAMES if menu_names is None else menu_names
    strategies = (
        ("numeric", lambda: _quantified_items(normalized)),
        ("word", lambda: _word_quantified_items(normalized)),
        ("bare", lambda: _bare_items(normalized)),
        ("menu-scan", lambda: _menu_name_scan(normalized, names)),
    )
    for label, strategy in strategies:
        items = strategy()
        if items:
            logger.debug(f"[EXTRACT] {label} strategy found {len(items)} item(s) in '{normalized}'")
            return items
    return []


def parse_price(value: str) -> Optional[Decimal]:
    """Parse a price to two decimal places; None when invalid or not positive."""
    try:
        price = Decimal(value).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        return None
    return price if price > 0 else None


def extract_price_edit(text: str) -> Optional[PriceEditRequest]:
    """
    Parse an admin price change such as "change the price of Tiramisu to RM 12".

    Returns:
        PriceEditRequest, or None when no template matches, the item name is
        empty or the price is not a positive number
    """
    if not text:
        return None

    for template in (PRICE_TEMPLATE_A, PRICE_TEMPLATE_B):
        match = template.search(text)
        if not match:
            continue
        item_name = re.sub(r"'s$", "", match.group(1).strip()).strip()
        new_price = parse_price(match.group(2))
        if not item_name or new_price is None:
            return None
        return PriceEditRequest(item_name=item_name, new_price=new_price)
    return None
