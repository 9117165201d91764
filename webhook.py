"""Webhook request handling shared by the Flask app and the Lambda entry point."""
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from linebot import LineBotApi
from linebot.webhook import SignatureValidator

from config import Config
from dispatcher import dispatch
from events import ParseError, parse_events
from hotpepper import ShopSearchClient
from reply import ReplySender

logger = logging.getLogger(__name__)

# body returned with a 200 so LINE does not redeliver
ERROR_BODY = '接続エラー'


class InvalidSignature(Exception):
    pass


@dataclass
class Bot:
    config: Config
    validator: SignatureValidator
    replier: ReplySender
    searcher: ShopSearchClient


def build_bot(config: Config) -> Bot:
    """Construct the LINE and HotPepper clients once per process."""
    line_bot_api = LineBotApi(config.channel_access_token)
    return Bot(
        config=config,
        validator=SignatureValidator(config.channel_secret),
        replier=ReplySender(line_bot_api, timeout=config.reply_timeout),
        searcher=ShopSearchClient(
            config.api_key,
            base_url=config.api_url,
            genre=config.genre,
            search_range=config.search_range,
            timeout=config.search_timeout,
        ),
    )


def handle_callback(bot: Optional[Bot], body: Union[bytes, str], signature: str,
                    should_abort: Optional[Callable[[], bool]] = None) -> Tuple[str, int]:
    """Verify, parse and dispatch one webhook delivery.

    Returns (response body, status). A missing configuration or an unparsable
    body answers 200 with ERROR_BODY. Raises InvalidSignature on a bad
    X-Line-Signature; search and reply failures propagate.
    """
    if bot is None:
        logger.error('webhook received but bot is not configured')
        return ERROR_BODY, 200

    if isinstance(body, bytes):
        try:
            text = body.decode('utf-8')
        except UnicodeDecodeError:
            logger.warning('webhook body is not utf-8')
            return ERROR_BODY, 200
    else:
        text = body

    if not signature or not bot.validator.validate(text, signature):
        raise InvalidSignature('invalid X-Line-Signature')

    try:
        events = parse_events(body)
    except ParseError as e:
        logger.warning('malformed webhook body: %s', e)
        return ERROR_BODY, 200

    logger.info('LINE webhook with %d events', len(events))
    dispatch(
        events,
        bot.replier,
        bot.searcher,
        max_columns=bot.config.carousel_max_columns,
        search_error_fallback=bot.config.search_error_fallback,
        should_abort=should_abort,
    )
    return text, 200
