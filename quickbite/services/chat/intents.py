"""Rule-based intent classification for chat messages."""
import re
from typing import Iterable, List, Optional, Tuple

from quickbite.services.chat import constants
from quickbite.services.chat.models import Intent

_WHITESPACE_RE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """Lower-case, trim and collapse whitespace; straighten curly apostrophes."""
    text = (text or "").replace("’", "'")
    return _WHITESPACE_RE.sub(" ", text).strip().lower()


def _term_pattern(term: str) -> str:
    return r"(?<!\w)" + re.escape(term) + r"(?!\w)"


class IntentRule:
    """A predicate over normalized text that signals one intent.

    A rule matches when any of its terms occurs as a whole word or phrase,
    or when any of its regular expressions matches.
    """

    def __init__(self, intent: Intent, terms: Iterable[str] = (), patterns: Iterable[str] = ()):
        self.intent = intent
        self.terms = list(terms)
        self._regexes = [re.compile(_term_pattern(term)) for term in self.terms]
        self._regexes.extend(re.compile(pattern) for pattern in patterns)

    def matches(self, text: str) -> bool:
        return any(regex.search(text) for regex in self._regexes)

    def __repr__(self) -> str:
        return f"IntentRule({self.intent.value}, terms={len(self.terms)}, regexes={len(self._regexes)})"


# Evaluated top to bottom; the first matching rule decides the intent.
INTENT_RULES: List[IntentRule] = [
    IntentRule(Intent.GREETING, patterns=constants.GREETING_PATTERNS),
    IntentRule(Intent.FAREWELL, terms=constants.FAREWELL_INDICATORS),
    IntentRule(Intent.THANKS, terms=constants.THANKS_INDICATORS),
    IntentRule(Intent.COMPLIMENT, terms=constants.COMPLIMENT_INDICATORS),
    IntentRule(Intent.COMPLAINT, terms=constants.COMPLAINT_INDICATORS),
    IntentRule(Intent.AI_QUESTION, terms=constants.AI_QUESTION_INDICATORS),
    IntentRule(Intent.JOKE_REQUEST, terms=constants.JOKE_INDICATORS),
    IntentRule(Intent.HELP_REQUEST, terms=constants.HELP_INDICATORS),
    IntentRule(Intent.WEATHER_TIME_QUERY, terms=constants.WEATHER_TIME_INDICATORS),
    IntentRule(
        Intent.CONFUSION,
        terms=constants.CONFUSION_INDICATORS,
        patterns=constants.CONFUSION_PATTERNS,
    ),
    IntentRule(
        Intent.ORDER_REQUEST,
        terms=constants.ORDER_INDICATORS,
        patterns=constants.ORDER_PATTERNS,
    ),
    IntentRule(
        Intent.ADMIN_PRICE_EDIT,
        terms=constants.PRICE_EDIT_INDICATORS,
        patterns=constants.PRICE_EDIT_PATTERNS,
    ),
]

TOPIC_RULES: List[Tuple[str, IntentRule]] = [
    (topic, IntentRule(Intent.NONE, terms=keywords))
    for topic, keywords in constants.TOPIC_KEYWORDS
]

_ORDER_RULE = next(rule for rule in INTENT_RULES if rule.intent == Intent.ORDER_REQUEST)
_PRICE_EDIT_RULE = next(rule for rule in INTENT_RULES if rule.intent == Intent.ADMIN_PRICE_EDIT)


class IntentClassifier:
    """Maps free text to an intent using an ordered rule list."""

    def __init__(self, rules: Optional[List[IntentRule]] = None):
        self.rules = rules if rules is not None else INTENT_RULES

    def classify(self, text: str) -> Intent:
        """Return the intent of the first matching rule, or Intent.NONE."""
        normalized = normalize(text)
        if not normalized:
            return Intent.NONE
        for rule in self.rules:
            if rule.matches(normalized):
                return rule.intent
        return Intent.NONE


def classify(text: str) -> Intent:
    """Classify `text` with the default rule list."""
    return IntentClassifier().classify(text)


def match_topic(text: str) -> Optional[str]:
    """First topic bucket whose keywords occur in `text`."""
    normalized = normalize(text)
    for topic, rule in TOPIC_RULES:
        if rule.matches(normalized):
            return topic
    return None


def is_order_request(text: str) -> bool:
    return _ORDER_RULE.matches(normalize(text))


def is_price_edit_request(text: str) -> bool:
    return _PRICE_EDIT_RULE.matches(normalize(text))
