import logging
from typing import Callable, Optional, Sequence

from linebot.models import TextSendMessage

from carousel import BuildError, build_carousel, to_template_message
from config import LINE_CAROUSEL_MAX
from events import EventType, InboundEvent, LocationMessage, OtherMessage, TextMessage
from hotpepper import SearchError, ShopSearchClient, format_coord
from reply import ReplySender
from sentry_init import capture_exception as sentry_capture_exception, set_tag as sentry_set_tag
from utils import safe_log_event

logger = logging.getLogger(__name__)

NO_SHOPS_TEXT = '近くにラーメン屋が見つかりませんでした'
SEARCH_FAILED_TEXT = 'お店の検索に失敗しました。しばらくしてからもう一度お試しください'


class DispatchCancelled(Exception):
    pass


def _check_abort(should_abort: Optional[Callable[[], bool]]):
    if should_abort is not None and should_abort():
        raise DispatchCancelled('invocation cancelled before reply')


def send_shop_list(event: InboundEvent, message: LocationMessage, replier: ReplySender, searcher: ShopSearchClient, *,
                   max_columns: int = LINE_CAROUSEL_MAX, search_error_fallback: bool = False,
                   should_abort: Optional[Callable[[], bool]] = None) -> None:
    lat = format_coord(message.latitude)
    lng = format_coord(message.longitude)

    try:
        shops = searcher.search(lat, lng)
    except SearchError as e:
        sentry_set_tag('search_status', e.status_code)
        sentry_capture_exception(e)
        if not search_error_fallback:
            raise
        logger.warning('shop search failed (status=%s), replying with fallback text', e.status_code)
        _check_abort(should_abort)
        replier.reply(event.reply_token, TextSendMessage(text=SEARCH_FAILED_TEXT))
        return

    payload = None
    if shops:
        try:
            payload = to_template_message(build_carousel(shops, max_columns=max_columns))
        except BuildError:
            logger.info('no usable shop records among %d results', len(shops))
    if payload is None:
        payload = TextSendMessage(text=NO_SHOPS_TEXT)

    _check_abort(should_abort)
    replier.reply(event.reply_token, payload)


def dispatch(events: Sequence[InboundEvent], replier: ReplySender, searcher: ShopSearchClient, *,
             max_columns: int = LINE_CAROUSEL_MAX, search_error_fallback: bool = False,
             should_abort: Optional[Callable[[], bool]] = None) -> None:
    """Reply to each message event in order.

    Text is echoed back verbatim; a location triggers a shop search and a
    carousel reply. Other events are skipped. The first ReplyError (or,
    unless `search_error_fallback` is set, SearchError) stops processing
    of the remaining events and propagates to the caller.
    """
    for index, event in enumerate(events):
        _check_abort(should_abort)
        if event.type is not EventType.MESSAGE:
            safe_log_event(logger, 'skipping non-message event', index=index, event_type=event.type.value)
            continue

        message = event.message
        if isinstance(message, TextMessage):
            safe_log_event(logger, 'echo text message', index=index, message_type='text')
            _check_abort(should_abort)
            replier.reply(event.reply_token, TextSendMessage(text=message.text))
        elif isinstance(message, LocationMessage):
            safe_log_event(logger, 'location message', index=index, message_type='location')
            send_shop_list(event, message, replier, searcher, max_columns=max_columns,
                           search_error_fallback=search_error_fallback, should_abort=should_abort)
        elif isinstance(message, OtherMessage):
            safe_log_event(logger, 'ignoring message', index=index, message_type=message.type)
        else:
            raise TypeError(f'unhandled message variant: {type(message).__name__}')
