"""Reply and suggestion selection for the chat assistant."""
import random
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Union

from quickbite.core.config import settings
from quickbite.services.chat.intents import match_topic
from quickbite.services.chat.models import (
    ChatReply,
    Intent,
    OrderExtraction,
    OrderSnapshot,
    PriceEditExtraction,
    Role,
)
from quickbite.services.menu.base import MenuItem

Extraction = Union[OrderExtraction, PriceEditExtraction]

INTENT_REPLIES: Dict[Intent, List[str]] = {
    Intent.GREETING: [
        "Hello! Welcome to {restaurant}. What can I get you today?",
        "Hi there! Hungry? Ask me about the menu or tell me what you'd like to order.",
        "Hey! Great to see you at {restaurant}. How can I help?",
    ],
    Intent.FAREWELL: [
        "Goodbye! Thanks for stopping by {restaurant}.",
        "See you soon! Enjoy your meal.",
        "Bye for now! Come back whenever you're hungry.",
    ],
    Intent.THANKS: [
        "You're welcome! Anything else I can help with?",
        "Happy to help! Let me know if you need anything else.",
        "My pleasure! Enjoy your food.",
    ],
    Intent.COMPLIMENT: [
        "Thank you so much! I'll pass that on to our kitchen team.",
        "That's lovely to hear! Our chefs will be delighted.",
        "Thanks! We're glad you're enjoying {restaurant}.",
    ],
    Intent.COMPLAINT: [
        "I'm really sorry about that. Please share your order number and our support team will make it right.",
        "Sorry to hear your experience wasn't great. Our support team can help sort it out straight away.",
        "I apologise for the trouble. Let our support team know what happened and we'll follow up quickly.",
    ],
    Intent.AI_QUESTION: [
        "I'm the {restaurant} virtual assistant. I can help you browse the menu, order food and track deliveries.",
        "I'm a friendly chatbot, not a human, but I know this menu inside out!",
    ],
    Intent.JOKE_REQUEST: [
        "Why did the burger go to the gym? To get better buns!",
        "What do you call a fake noodle? An impasta!",
        "Why did the tomato blush? Because it saw the salad dressing!",
        "I told a pizza joke once. It was a bit too cheesy.",
    ],
    Intent.HELP_REQUEST: [
        "I can recommend dishes, add items to your cart (try \"add 2 Classic Burger to my cart\"), "
        "explain delivery and payment, or help you track an order.",
        "Sure! Ask me about the menu, delivery or payment, or tell me what you'd like to order.",
    ],
    Intent.WEATHER_TIME_QUERY: [
        "I can't check the weather or the clock, but I can tell you we're open daily from 10:00 AM to 10:00 PM.",
        "Rain or shine, we deliver! We're open daily from 10:00 AM to 10:00 PM.",
    ],
    Intent.CONFUSION: [
        "Sorry for the confusion! You can ask about our menu, place an order or check delivery options.",
        "Let me try to help. Pick one of the suggestions below, or tell me what you're looking for.",
    ],
}

TOPIC_REPLIES: Dict[str, str] = {
    "menu": "Our current specials include Classic Burger, Margherita Pizza, and Fish and Chip. "
            "Browse our full menu or let me know if you'd like to place an order.",
    "delivery": "We offer delivery within a 10km radius. Delivery is free for orders over {currency}50, "
                "otherwise there's a {currency}5 delivery fee. Estimated delivery time is 30-45 minutes "
                "depending on your location.",
    "payment": "We accept all major credit cards, online banking, and cash on delivery. "
               "You can choose your payment method at checkout.",
    "track": "You can track your order in real-time from the order tracking page or view your order history.",
    "cart": "You can view your current cart items, modify quantities, or proceed to checkout from your cart.",
    "hours": "We're open daily from 10:00 AM to 10:00 PM, including public holidays.",
    "location": "Our kitchen delivers across the city centre. Pickup orders are collected from our main outlet.",
    "nutrition": "Each dish on our menu comes with a description of what goes into it. Check the menu for details.",
    "allergy": "Please tell us about any allergies in your order notes. Our kitchen handles nuts, gluten and dairy, "
               "so we can't guarantee any dish is allergen-free.",
    "price": "Our dishes range from {currency}3.50 for drinks to around {currency}17 for mains. "
             "Prices are shown on the menu next to each item.",
    "jobs": "We're always looking for great people! Send your CV to our careers team to apply.",
    "reviews": "We love feedback! Sign in to rate any dish from 1 to 5 stars or leave a comment on its menu page.",
    "account": "Creating an account lets you order, save your address and track deliveries. "
               "Use the Create account or Login buttons to get started.",
}

DEFAULT_REPLIES = [
    "How can I assist you with your food order today? You can ask about our menu, place an order, "
    "or inquire about delivery options. Click on any suggestion below to get started.",
    "I'm not sure I caught that. Try asking about the menu, delivery or payment options.",
    "Tell me what you're craving and I'll help you find it on our menu.",
]

GUEST_ORDER_REPLY = ("Please login or create an account to access ordering features. "
                     "Members can add items to their cart right here in the chat.")
GUEST_ADMIN_REPLY = "Please login as an admin to access this feature."
MEMBER_ADMIN_REPLY = "You need admin privileges to perform this action."
ORDER_ADDED_REPLY = ("I've added {quantity} item(s) to your cart: {items}. Would you like to add anything else? "
                     "Click 'View cart' to see your items or 'Checkout' to proceed with your order.")
ORDER_PARTIAL_REPLY = " I couldn't find {missing} on our menu."
ORDER_NOT_FOUND_REPLY = ("I couldn't find {missing} in our menu. Could you please specify the items more clearly, "
                         "or browse the full menu?")
PRICE_EDIT_HINT_REPLY = ("Tell me which price to change, for example: "
                         "\"Change the price of Classic Burger to {currency} 14.90\".")
PRICE_EDIT_NOT_FOUND_REPLY = "I couldn't find a menu item named '{item}'. Please check the name and try again."
PRICE_EDIT_PROMPT = ("Do you really want to proceed with modifying the price of {item} "
                     "from {currency} {old:.2f} to {currency} {new:.2f}?")
PRICE_UPDATED_REPLY = "Price of {item} has been successfully updated to {currency} {new:.2f}."
PRICE_UPDATE_FAILED_REPLY = "Error: Menu item '{item}' not found."
PRICE_INVALID_REPLY = "Invalid price value. Prices must be a positive amount."
UNSUPPORTED_ACTION_REPLY = "Sorry, I can't perform the action '{action}'."
IMAGE_GUEST_REPLY = "Please login to order these items."
IMAGE_FOUND_REPLY = "This looks like {items} from our menu."
IMAGE_NOT_RECOGNIZED_REPLY = ("I couldn't recognize any food items in this image. Could you try another image "
                              "or describe what you're looking for?")
ERROR_REPLY = "Sorry, something went wrong. Please try again."
LATEST_ORDER_REPLY = " Your latest order #{id} is currently {status}."

DEFAULT_KEY = "default"

SUGGESTIONS: Dict[Role, Dict[str, List[str]]] = {
    Role.GUEST: {
        DEFAULT_KEY: ["Menu recommendations", "Create account", "Delivery options", "Payment methods"],
        Intent.ORDER_REQUEST.value: ["Create account", "Login", "Menu recommendations", "Delivery options"],
        Intent.ADMIN_PRICE_EDIT.value: ["Login", "Menu recommendations", "Delivery options", "Payment methods"],
        Intent.COMPLAINT.value: ["Contact support", "Login", "Menu recommendations", "Delivery options"],
        "image_results": ["Create account", "Login", "Menu recommendations", "Upload another image"],
    },
    Role.MEMBER: {
        DEFAULT_KEY: ["Order food", "Track my order", "Menu recommendations", "Delivery options"],
        "order_added": ["View cart", "Checkout", "Add more items", "Menu recommendations"],
        "order_not_found": ["Show menu", "Menu recommendations", "Order help", "Contact support"],
        Intent.COMPLAINT.value: ["Contact support", "Track my order", "Order food", "Menu recommendations"],
        Intent.HELP_REQUEST.value: ["Order food", "Show menu", "Track my order", "Payment methods"],
        "image_results": ["View cart", "Order food", "Menu recommendations", "Upload another image"],
    },
    Role.ADMIN: {
        DEFAULT_KEY: ["Modify prices", "Menu management", "Order statistics", "Customer feedback"],
        "price_not_found": ["Show menu items", "Modify another price", "Menu management", "Order statistics"],
        "price_updated": ["Modify another price", "Menu management", "Order statistics", "Customer feedback"],
    },
}

IMAGE_NOT_RECOGNIZED_SUGGESTIONS = ["Menu recommendations", "Upload another image", "Search by name", "Contact support"]


class ResponseComposer:
    """Selects reply text and suggestions for a role, intent and extraction.

    Variant choice within a category goes through `rng`; pass a seeded
    `random.Random` for reproducible output.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        restaurant_name: Optional[str] = None,
        currency: Optional[str] = None,
    ):
        self.rng = rng or random.Random()
        self.restaurant_name = restaurant_name or settings.restaurant_name
        self.currency = currency or settings.currency

    def _format(self, template: str, **values) -> str:
        return template.format(restaurant=self.restaurant_name, currency=self.currency, **values)

    def _pick(self, variants: Sequence[str]) -> str:
        return self._format(self.rng.choice(list(variants)))

    def suggestions_for(self, role: Role, key: Optional[str] = None) -> List[str]:
        """Suggestion list for (role, key), falling back to the role default."""
        table = SUGGESTIONS.get(role, SUGGESTIONS[Role.GUEST])
        return list(table.get(key, table[DEFAULT_KEY]) if key else table[DEFAULT_KEY])

    def _reply(self, role: Role, text: str, key: Optional[str] = None) -> ChatReply:
        return ChatReply(text=text, suggestions=self.suggestions_for(role, key))

    def compose(
        self,
        role: Role,
        intent: Intent,
        message: str = "",
        extraction: Optional[Extraction] = None,
        recent_orders: Optional[List[OrderSnapshot]] = None,
    ) -> ChatReply:
        """
        Build the reply for one message.

        Order and price-edit intents are gated by role first; anything without
        a dedicated flow falls through to the topic-based general response.
        """
        if intent == Intent.ORDER_REQUEST:
            reply = self._compose_order(role, extraction)
            if reply:
                return reply
        elif intent == Intent.ADMIN_PRICE_EDIT:
            reply = self._compose_price_edit(role, extraction)
            if reply:
                return reply
        elif intent in INTENT_REPLIES:
            return self._reply(role, self._pick(INTENT_REPLIES[intent]), intent.value)

        return self.general_response(role, message, recent_orders)

    def _compose_order(self, role: Role, extraction: Optional[Extraction]) -> Optional[ChatReply]:
        if role == Role.GUEST:
            return self._reply(role, GUEST_ORDER_REPLY, Intent.ORDER_REQUEST.value)
        if role != Role.MEMBER or not isinstance(extraction, OrderExtraction) or not extraction.requested:
            return None

        if extraction.resolved:
            items = ", ".join(f"{line.quantity} x {line.menu_item.name}" for line in extraction.resolved)
            text = self._format(ORDER_ADDED_REPLY, quantity=extraction.total_quantity, items=items)
            if extraction.missing:
                text += self._format(ORDER_PARTIAL_REPLY, missing=_quote_names(extraction.missing))
            return self._reply(role, text, "order_added")

        missing = _quote_names(extraction.missing or [item.name for item in extraction.requested])
        return self._reply(role, self._format(ORDER_NOT_FOUND_REPLY, missing=missing), "order_not_found")

    def _compose_price_edit(self, role: Role, extraction: Optional[Extraction]) -> Optional[ChatReply]:
        if role == Role.GUEST:
            return self._reply(role, GUEST_ADMIN_REPLY, Intent.ADMIN_PRICE_EDIT.value)
        if role == Role.MEMBER:
            return self._reply(role, MEMBER_ADMIN_REPLY)

        if not isinstance(extraction, PriceEditExtraction):
            return self._reply(role, self._format(PRICE_EDIT_HINT_REPLY))
        if extraction.menu_item is None:
            text = self._format(PRICE_EDIT_NOT_FOUND_REPLY, item=extraction.request.item_name)
            return self._reply(role, text, "price_not_found")
        return ChatReply(
            text=self.price_edit_prompt(extraction.menu_item, extraction.request.new_price),
            suggestions=[],
        )

    def general_response(
        self, role: Role, message: str, recent_orders: Optional[List[OrderSnapshot]] = None
    ) -> ChatReply:
        """Topic-bucket reply, or a default from the fixed pool."""
        topic = match_topic(message)
        if topic is None:
            return self._reply(role, self._pick(DEFAULT_REPLIES))

        text = self._format(TOPIC_REPLIES[topic])
        if topic == "track" and recent_orders:
            latest = recent_orders[0]
            text += self._format(LATEST_ORDER_REPLY, id=latest.id, status=latest.status)
        return self._reply(role, text, topic)

    def price_edit_prompt(self, menu_item: MenuItem, new_price: Decimal) -> str:
        return self._format(PRICE_EDIT_PROMPT, item=menu_item.name, old=menu_item.price, new=new_price)

    def price_updated(self, item_name: str, new_price: Decimal) -> ChatReply:
        return self._reply(
            Role.ADMIN, self._format(PRICE_UPDATED_REPLY, item=item_name, new=new_price), "price_updated"
        )

    def price_update_failed(self, item_name: str) -> ChatReply:
        return self._reply(Role.ADMIN, self._format(PRICE_UPDATE_FAILED_REPLY, item=item_name), "price_not_found")

    def price_invalid(self) -> ChatReply:
        return self._reply(Role.ADMIN, PRICE_INVALID_REPLY, "price_not_found")

    def unsupported_action(self, action: str) -> ChatReply:
        return self._reply(Role.ADMIN, UNSUPPORTED_ACTION_REPLY.format(action=action))

    def image_results(self, role: Role, menu_items: List[MenuItem]) -> ChatReply:
        names = ", ".join(item.name for item in menu_items)
        text = self._format(IMAGE_FOUND_REPLY, items=names)
        if role == Role.GUEST:
            text = f"{text} {IMAGE_GUEST_REPLY}"
        return self._reply(role, text, "image_results")

    def image_not_recognized(self) -> ChatReply:
        return ChatReply(text=IMAGE_NOT_RECOGNIZED_REPLY, suggestions=list(IMAGE_NOT_RECOGNIZED_SUGGESTIONS))

    def error(self) -> ChatReply:
        return ChatReply(text=ERROR_REPLY, suggestions=[])


def _quote_names(names: Sequence[str]) -> str:
    quoted = [f"'{name}'" for name in names]
    if len(quoted) <= 1:
        return "".join(quoted) or "the items you mentioned"
    return ", ".join(quoted[:-1]) + f" and {quoted[-1]}"
