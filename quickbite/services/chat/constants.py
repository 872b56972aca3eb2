"""Keyword tables for intent classification and topic replies.

Every entry is matched as a whole word or phrase against lower-cased text.
"""

GREETING_PATTERNS = [
    r"^(?:hi|hello|hey|hiya|howdy|greetings|yo|hallo|helo)\b",
    r"^good\s+(?:morning|afternoon|evening|day)\b",
]

FAREWELL_INDICATORS = [
    "bye",
    "goodbye",
    "bye bye",
    "see you",
    "see ya",
    "cya",
    "good night",
    "talk later",
    "talk to you later",
    "have a nice day",
]

THANKS_INDICATORS = [
    "thanks",
    "thank you",
    "thank u",
    "thx",
    "ty",
    "cheers",
    "appreciate it",
    "much appreciated",
]

COMPLIMENT_INDICATORS = [
    "delicious",
    "tasty",
    "yummy",
    "great food",
    "great service",
    "love your",
    "love the",
    "love this",
    "amazing",
    "awesome",
    "excellent",
    "well done",
    "you're great",
    "you are great",
    "good job",
]

COMPLAINT_INDICATORS = [
    "complain",
    "complaint",
    "bad",
    "terrible",
    "awful",
    "horrible",
    "disgusting",
    "worst",
    "cold food",
    "food was cold",
    "wrong order",
    "wrong item",
    "missing item",
    "took too long",
    "too late",
    "refund",
    "not happy",
    "unhappy",
    "disappointed",
    "rude",
]

AI_QUESTION_INDICATORS = [
    "are you a bot",
    "are you a robot",
    "are you human",
    "are you real",
    "are you ai",
    "are you an ai",
    "who are you",
    "what are you",
    "who made you",
    "who built you",
    "chatgpt",
    "artificial intelligence",
]

JOKE_INDICATORS = [
    "joke",
    "jokes",
    "make me laugh",
    "something funny",
    "say something funny",
]

HELP_INDICATORS = [
    "help",
    "how do i",
    "how does this work",
    "what can you do",
    "assist me",
    "guide me",
]

WEATHER_TIME_INDICATORS = [
    "weather",
    "forecast",
    "raining",
    "what time is it",
    "what's the time",
    "what is the time",
    "current time",
    "what day is it",
    "today's date",
    "what's the date",
    "what is the date",
]

CONFUSION_INDICATORS = [
    "confused",
    "confusing",
    "don't understand",
    "dont understand",
    "do not understand",
    "makes no sense",
    "i'm lost",
    "im lost",
    "what do you mean",
]

CONFUSION_PATTERNS = [
    r"^(?:huh|what|hmm+|eh|\?+)[?!.]*$",
]

ORDER_INDICATORS = [
    "order",
    "buy",
    "purchase",
    "get me",
    "give me",
    "can i get",
    "can i have",
]

ORDER_PATTERNS = [
    r"\badd\b.+\bto\s+(?:my\s+)?cart\b",
    r"\bwant\b.*\b(?:get|have)\b",
    r"\b(?:i\s+want|i'd\s+like|i\s+would\s+like)\s+(?:\d+|one|two|three|four|five|six|seven|eight"
    r"|nine|ten|eleven|twelve|a|an|some|the)\b",
]

PRICE_EDIT_INDICATORS = [
    "modify price",
    "change price",
    "update price",
    "set price",
]

PRICE_EDIT_PATTERNS = [
    r"\b(?:modify|change|update|set)\s+(?:the\s+)?price\b",
    r"\bprice\b.*\bto\s+rm\b",
]

# Topic buckets for messages with no intent, checked in this order.
TOPIC_KEYWORDS = [
    ("menu", ["menu", "recommend", "recommendation", "recommendations", "special", "specials",
              "what do you have", "what do you serve", "dishes"]),
    ("delivery", ["delivery", "deliver", "shipping", "bring"]),
    ("payment", ["payment", "pay", "credit", "card", "cash", "online banking"]),
    ("track", ["track", "tracking", "status", "where is my", "my order"]),
    ("cart", ["cart", "basket", "my items", "checkout"]),
    ("hours", ["hours", "open", "opening", "close", "closing"]),
    ("location", ["location", "located", "address", "where are you", "directions", "branch"]),
    ("nutrition", ["nutrition", "nutritional", "calorie", "calories", "protein", "carbs", "healthy", "diet"]),
    ("allergy", ["allergy", "allergies", "allergic", "allergen", "gluten", "nut", "nuts", "peanut",
                 "dairy", "lactose", "halal", "vegan", "vegetarian"]),
    ("price", ["price", "prices", "cost", "how much", "expensive", "cheap"]),
    ("jobs", ["job", "jobs", "career", "careers", "hiring", "vacancy", "vacancies", "work for you"]),
    ("reviews", ["review", "reviews", "rating", "ratings", "feedback", "testimonial"]),
    ("account", ["account", "login", "log in", "sign up", "signup", "register"]),
]

# Word quantities accepted by the order extractor.
NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
}

# Names scanned for when no order phrase is recognised.
DEFAULT_MENU_NAMES = [
    "Classic Burger",
    "Margherita Pizza",
    "Caesar Salad",
    "Tiramisu",
    "Coca-Cola",
    "Fish and Chip",
    "Pudding",
    "Iced Latte",
]
