"""Rule-based decision of whether a message warrants a web search."""

import logging
from datetime import date

logger = logging.getLogger(__name__)

EXPLICIT_COMMAND_PHRASES = (
    "search for",
    "look up",
    "find information on",
    "web search for",
)
TIME_SENSITIVE_KEYWORDS = (
    "latest",
    "current",
    "recent",
    "news",
    "today",
    "yesterday",
    "now",
    "breaking",
    "update",
)
DYNAMIC_FACT_PHRASES = (
    "who is the current",
    "what is the stock price",
    "weather in",
    "election results",
    "current events",
    "what's happening",
)


def _year_tokens(today: date | None = None) -> tuple[str, ...]:
    year = (today or date.today()).year
    return (str(year), str(year + 1))


def should_search(message: str, today: date | None = None) -> bool:
    lower_message = message.lower()

    if any(phrase in lower_message for phrase in EXPLICIT_COMMAND_PHRASES):
        logger.info("Search decision", extra={"should_search": True, "reason": "explicit_command"})
        return True

    time_keywords = TIME_SENSITIVE_KEYWORDS + _year_tokens(today)
    if any(keyword in lower_message for keyword in time_keywords):
        logger.info("Search decision", extra={"should_search": True, "reason": "time_sensitive"})
        return True

    if any(phrase in lower_message for phrase in DYNAMIC_FACT_PHRASES):
        logger.info("Search decision", extra={"should_search": True, "reason": "dynamic_fact"})
        return True

    logger.info("Search decision", extra={"should_search": False, "reason": "no_indicator"})
    return False
