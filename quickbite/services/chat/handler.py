"""Chat assistant entry points."""
import logging
from decimal import Decimal
from typing import List, Optional, Union

from quickbite.core.config import settings
from quickbite.services.cart.session_cart import SessionCart
from quickbite.services.chat.channel import OutboundChannel
from quickbite.services.chat.composer import ResponseComposer
from quickbite.services.chat.extractor import extract_order_items, extract_price_edit, parse_price
from quickbite.services.chat.intents import IntentClassifier, match_topic
from quickbite.services.chat.models import (
    Intent,
    OrderExtraction,
    OrderSnapshot,
    PriceEditExtraction,
    ResolvedOrderLine,
    Role,
)
from quickbite.services.menu.repository import MenuRepository
from quickbite.services.persistence.orders import OrderPersistenceService
from quickbite.services.vision.tagging import VisionClient, match_tags_to_menu

logger = logging.getLogger(__name__)

PRICE_EDIT_ACTION = "ModifyPrice"


class ChatHandler:
    """
    Handles one chat message at a time and emits replies on a channel.

    Nothing is returned to the caller and nothing is raised: any failure
    while resolving items or committing a change becomes an error reply.
    """

    def __init__(
        self,
        menu_repository: MenuRepository,
        channel: OutboundChannel,
        cart: Optional[SessionCart] = None,
        order_service: Optional[OrderPersistenceService] = None,
        vision_client: Optional[VisionClient] = None,
        classifier: Optional[IntentClassifier] = None,
        composer: Optional[ResponseComposer] = None,
        recent_orders_limit: Optional[int] = None,
    ):
        self.menu_repository = menu_repository
        self.channel = channel
        self.cart = cart
        self.order_service = order_service
        self.vision_client = vision_client
        self.classifier = classifier or IntentClassifier()
        self.composer = composer or ResponseComposer()
        self.recent_orders_limit = recent_orders_limit or settings.recent_orders_limit

    async def handle_message(self, role: Union[Role, str], user_identifier: str, text: str) -> None:
        """Classify a message, act on it and send the reply."""
        role = role if isinstance(role, Role) else Role.parse(role)
        logger.info(f"[CHAT] Message from {role.value} '{user_identifier or '-'}': '{(text or '')[:200]}'")
        try:
            await self._process_message(role, user_identifier, text or "")
        except Exception as e:
            logger.error(
                f"[CHAT] Error handling message - Role: {role.value}, User: {user_identifier}, "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            self.channel.send(self.composer.error())

    async def _process_message(self, role: Role, user_identifier: str, text: str) -> None:
        intent = self.classifier.classify(text)
        logger.info(f"[CHAT] Intent: {intent.value}")

        extraction = None
        if intent == Intent.ORDER_REQUEST and role == Role.MEMBER:
            extraction = await self._extract_order(text)
            if extraction.resolved:
                self._add_to_cart(extraction.resolved)
        elif intent == Intent.ADMIN_PRICE_EDIT and role == Role.ADMIN:
            extraction = await self._extract_price_edit(text)

        recent_orders = None
        if role == Role.MEMBER and match_topic(text) == "track":
            recent_orders = await self._recent_orders(user_identifier)

        reply = self.composer.compose(role, intent, text, extraction, recent_orders)

        if isinstance(extraction, PriceEditExtraction) and extraction.menu_item is not None:
            payload = {
                "action": PRICE_EDIT_ACTION,
                "item_name": extraction.menu_item.name,
                "new_price": str(extraction.request.new_price),
            }
            logger.info(f"[CHAT] Requesting confirmation for price edit: {payload}")
            self.channel.send_confirmation_request(reply.text, payload)
            return

        self.channel.send(reply)

    async def _extract_order(self, text: str) -> OrderExtraction:
        requested = extract_order_items(text, await self.menu_repository.get_menu_names())
        extraction = OrderExtraction(requested=requested)
        for item in requested:
            menu_item = await self.menu_repository.resolve_item_name(item.name)
            if menu_item is None:
                extraction.missing.append(item.name)
            else:
                extraction.resolved.append(ResolvedOrderLine(menu_item=menu_item, quantity=item.quantity))
        logger.info(
            f"[CHAT] Order extraction - requested: {[(i.name, i.quantity) for i in requested]}, "
            f"resolved: {[(line.menu_item.name, line.quantity) for line in extraction.resolved]}, "
            f"missing: {extraction.missing}"
        )
        return extraction

    def _add_to_cart(self, lines: List[ResolvedOrderLine]) -> None:
        if self.cart is None:
            raise RuntimeError("No cart is bound to this chat session")
        added = [self.cart.add_to_cart(line.menu_item, line.quantity, "") for line in lines]
        self.channel.send_cart_update(
            [
                {
                    "menu_item_id": line.menu_item_id,
                    "name": line.name,
                    "quantity": line.quantity,
                    "personalization": line.personalization,
                }
                for line in added
            ]
        )

    async def _extract_price_edit(self, text: str) -> Optional[PriceEditExtraction]:
        request = extract_price_edit(text)
        if request is None:
            return None
        menu_item = await self.menu_repository.resolve_item_name(request.item_name)
        return PriceEditExtraction(request=request, menu_item=menu_item)

    async def _recent_orders(self, user_identifier: str) -> List[OrderSnapshot]:
        if self.order_service is None or not user_identifier:
            return []
        orders = await self.order_service.find_recent_orders(user_identifier, self.recent_orders_limit)
        return [OrderSnapshot(id=order.id, status=order.status) for order in orders]

    async def confirm_price_edit(
        self, item_name: str, new_price: Union[Decimal, str], action: str = PRICE_EDIT_ACTION
    ) -> None:
        """
        Commit a price edit previously proposed by `handle_message`.

        The client echoes the proposed item name and price; only an exact
        (case-insensitive) name and a positive price are committed.
        """
        logger.info(f"[CHAT] Price edit confirmation - action: {action}, item: '{item_name}', price: {new_price}")
        try:
            if action != PRICE_EDIT_ACTION:
                logger.warning(f"[CHAT] Unsupported admin action '{action}'")
                self.channel.send(self.composer.unsupported_action(action))
                return

            price = parse_price(str(new_price))
            if price is None:
                self.channel.send(self.composer.price_invalid())
                return

            if await self.menu_repository.update_menu_item_price(item_name, price):
                logger.info(f"[CHAT] Price of '{item_name}' updated to {price}")
                self.channel.send(self.composer.price_updated(item_name, price))
            else:
                self.channel.send(self.composer.price_update_failed(item_name))
        except Exception as e:
            logger.error(
                f"[CHAT] Error committing price edit - item: '{item_name}', "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            self.channel.send(self.composer.error())

    async def handle_image_upload(self, role: Union[Role, str], user_identifier: str, image_ref: str) -> None:
        """Tag an uploaded image and suggest matching menu items."""
        role = role if isinstance(role, Role) else Role.parse(role)
        logger.info(f"[CHAT] Image upload from {role.value} '{user_identifier or '-'}'")
        try:
            if self.vision_client is None:
                raise RuntimeError("Image recognition is not configured")

            tags = await self.vision_client.extract_tags(image_ref)
            matches = match_tags_to_menu(tags, await self.menu_repository.list_menu_items())
            logger.info(f"[CHAT] Image tags: {tags} -> matches: {[item.name for item in matches]}")

            if not matches:
                self.channel.send(self.composer.image_not_recognized())
                return

            self.channel.send_image_results(
                [
                    {
                        "menu_item_id": item.id,
                        "name": item.name,
                        "price": str(item.price),
                        "description": item.description,
                    }
                    for item in matches
                ]
            )
            self.channel.send(self.composer.image_results(role, matches))
        except Exception as e:
            logger.error(
                f"[CHAT] Error processing image upload - Role: {role.value}, "
                f"Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            self.channel.send(self.composer.error())
