"""Scripted keyword chatbot."""

import asyncio
import logging
import string

from citizen_alerts.config import get_settings
from citizen_alerts.schemas.chat import ChatAlertCard, ChatMessage, MessageType

logger = logging.getLogger(__name__)
settings = get_settings()

WELCOME_MESSAGE = """Hello! I'm the Citizen Alert chatbot. 👋

Type "help" if you need assistance."""

HELP_MESSAGE = """Hello! I'm the Citizen Alert chatbot. How can I help you?

Available commands:
• "report" - Reporting guide
• "alerts" - View recent alerts
• "help" - Help guide
• "nearby" - View alerts near you"""

REPORT_GUIDE = """How to report:

1. Tap the 'Report' tab at the bottom
2. Select incident type (fire, traffic, emergency, etc.)
3. Choose location (auto or manual)
4. Add photos and description
5. Submit your report

For emergencies, call 999 directly!"""

ALERTS_GUIDE = """To view recent alerts:

• Map tab - View alerts on map
• Alerts tab - View as list
• Filter to see specific types

Auto-alert settings can be changed in Settings."""

EMERGENCY_MESSAGE = """⚠️ Emergency Report

For urgent situations, call immediately:

🚨 999 (Fire, Medical)
🚨 999 (Police)

Also report in the app to alert people nearby."""

WHAT_HAPPENED_MESSAGE = (
    "I can help you check recent incidents. "
    "Try asking about specific locations or types of alerts."
)

THANKS_MESSAGE = "You're welcome! Feel free to ask if you need more help. 😊"

FALLBACK_MESSAGE = """I'm sorry, I didn't understand that. 😅

Try these commands:
• "help" - Usage guide
• "report" - Reporting guide
• "alerts" - How to view alerts

Feel free to ask other questions!"""

# Words that turn a message with photos into an alert card
ALERT_KEYWORDS = ("knife", "danger", "emergency", "attack", "naked", "running")
KNOWN_LOCATIONS = ("central", "queen's road", "the center", "admiralty", "causeway bay")
DEFAULT_CARD_LOCATION = "Central, Hong Kong"

# (keywords, reply, quick replies); first match wins
_SCRIPTED_REPLIES: list[tuple[tuple[str, ...], str, list[str] | None]] = [
    (("도움말", "help"), HELP_MESSAGE, None),
    (("신고", "report"), REPORT_GUIDE, None),
    (("알림", "alerts"), ALERTS_GUIDE, None),
    (("급", "emergency"), EMERGENCY_MESSAGE, None),
]


def _contains_any(text: str, words: tuple[str, ...]) -> bool:
    return any(word in text for word in words)


def extract_location(text: str) -> str | None:
    lowered = text.lower()
    for location in KNOWN_LOCATIONS:
        if location in lowered:
            return string.capwords(location)
    return None


def extract_alert_title(text: str) -> str:
    lowered = text.lower()
    if _contains_any(lowered, ("knife", "naked", "running")):
        location = extract_location(text) or "The Center"
        return f"Man with knife spotted at {location}"
    if "fire" in lowered:
        return "Fire breakout detected"
    if "traffic" in lowered:
        return "Traffic incident reported"
    return "Incident reported"


def scripted_reply(text: str) -> tuple[str, list[str] | None]:
    """Pick the canned reply and quick replies for a text-only message."""
    lowered = text.lower()
    for keywords, reply, quick_replies in _SCRIPTED_REPLIES:
        if _contains_any(lowered, keywords):
            return reply, quick_replies
    if "what" in lowered and "happen" in lowered:
        return WHAT_HAPPENED_MESSAGE, ["Show nearby alerts", "Report an incident"]
    if _contains_any(lowered, ("감사", "고마워", "thanks")):
        return THANKS_MESSAGE, None
    return FALLBACK_MESSAGE, None


class ChatService:
    """Keyword-matched chatbot keeping an in-memory conversation."""

    def __init__(self, typing_delay: float = settings.chat_typing_delay_seconds):
        self.typing_delay = typing_delay
        self.messages: list[ChatMessage] = []
        self.is_typing = False
        self._add_welcome_message()

    def _add_welcome_message(self) -> None:
        self.messages.append(ChatMessage(content=WELCOME_MESSAGE, is_user=False))

    def build_reply(self, text: str, image_count: int = 0) -> ChatMessage:
        lowered = text.lower()

        if image_count and _contains_any(lowered, ALERT_KEYWORDS):
            title = extract_alert_title(text)
            card = ChatAlertCard(
                title=title,
                location=extract_location(text) or DEFAULT_CARD_LOCATION,
                description=text,
                severity="High",
            )
            return ChatMessage(
                content=title,
                is_user=False,
                message_type=MessageType.ALERT_CARD,
                quick_replies=["Did I get it right?", "Need more info"],
                alert_card=card,
            )

        reply, quick_replies = scripted_reply(text)
        return ChatMessage(
            content=reply,
            is_user=False,
            message_type=MessageType.QUICK_REPLY if quick_replies else MessageType.TEXT,
            quick_replies=quick_replies,
        )

    async def send_message(self, text: str, image_count: int = 0) -> ChatMessage:
        """Record a user message and return the bot's reply."""
        self.messages.append(ChatMessage(content=text, is_user=True, image_count=image_count))

        self.is_typing = True
        try:
            if self.typing_delay > 0:
                await asyncio.sleep(self.typing_delay)
            reply = self.build_reply(text, image_count)
        finally:
            self.is_typing = False

        self.messages.append(reply)
        logger.debug(f"Chat reply: {reply.message_type.value}")
        return reply

    def clear(self) -> None:
        self.messages.clear()
        self._add_welcome_message()
