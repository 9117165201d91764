import logging

# LINE Messaging API limits
LINE_TEXT_MAX = 5000
CAROUSEL_TITLE_MAX = 40
# column text limit when the column has an image or a title
CAROUSEL_TEXT_MAX = 60
ACTION_LABEL_MAX = 20

logger = logging.getLogger(__name__)


def truncate(text: str, limit: int = LINE_TEXT_MAX, suffix: str = '…') -> str:
    """Cut text to at most `limit` characters, ending with `suffix` when cut."""
    if not text:
        return ''
    if len(text) <= limit:
        return text
    if limit <= len(suffix):
        return text[:limit]
    return text[: limit - len(suffix)] + suffix


def safe_log_event(logger: logging.Logger, message: str, **kwargs) -> None:
    """Log an event without dumping sensitive payloads. kwargs should only contain non-sensitive tags."""
    # reply tokens and message bodies stay out of the logs
    allowed = {k: v for k, v in kwargs.items() if k in ('event_type', 'message_type', 'index', 'shops')}
    logger.info('%s %s', message, allowed)
