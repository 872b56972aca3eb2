"""Outbound message channel for chat replies."""
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from quickbite.services.chat.models import ChatEvent, ChatReply


class OutboundChannel(ABC):
    """Fire-and-forget sink for everything the assistant says."""

    @abstractmethod
    def send_reply(self, text: str) -> None:
        pass

    @abstractmethod
    def send_suggestions(self, suggestions: List[str]) -> None:
        pass

    @abstractmethod
    def send_confirmation_request(self, text: str, payload: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def send_cart_update(self, lines: List[Dict[str, Any]]) -> None:
        pass

    @abstractmethod
    def send_image_results(self, items: List[Dict[str, Any]]) -> None:
        pass

    def send(self, reply: ChatReply) -> None:
        """Send a reply followed by its suggestions, if any."""
        self.send_reply(reply.text)
        if reply.suggestions:
            self.send_suggestions(reply.suggestions)


class BufferedChannel(OutboundChannel):
    """Collects events so an HTTP handler can return them in one response."""

    def __init__(self):
        self.events: List[ChatEvent] = []

    def send_reply(self, text: str) -> None:
        self.events.append(ChatEvent(type="reply", text=text))

    def send_suggestions(self, suggestions: List[str]) -> None:
        self.events.append(ChatEvent(type="suggestions", suggestions=list(suggestions)))

    def send_confirmation_request(self, text: str, payload: Dict[str, Any]) -> None:
        self.events.append(ChatEvent(type="confirm_admin_action", text=text, payload=payload))

    def send_cart_update(self, lines: List[Dict[str, Any]]) -> None:
        self.events.append(ChatEvent(type="cart_update", items=lines))

    def send_image_results(self, items: List[Dict[str, Any]]) -> None:
        self.events.append(ChatEvent(type="image_results", items=items))

    def of_type(self, event_type: str) -> List[ChatEvent]:
        return [event for event in self.events if event.type == event_type]

    @property
    def replies(self) -> List[str]:
        return [event.text for event in self.of_type("reply")]
