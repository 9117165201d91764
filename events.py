import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class ParseError(Exception):
    pass


class EventType(Enum):
    MESSAGE = 'message'
    OTHER = 'other'


@dataclass(frozen=True)
class TextMessage:
    text: str


@dataclass(frozen=True)
class LocationMessage:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class OtherMessage:
    type: str


Message = Union[TextMessage, LocationMessage, OtherMessage]


@dataclass(frozen=True)
class InboundEvent:
    type: EventType
    reply_token: str
    message: Optional[Message] = None


def _coord(msg: Dict[str, Any], key: str) -> float:
    value = msg.get(key)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f'location message has invalid {key}: {value!r}')
    return float(value)


def _parse_message(msg: Any) -> Message:
    if not isinstance(msg, dict):
        raise ParseError('message must be an object')
    mtype = msg.get('type') or ''
    if mtype == 'text':
        text = msg.get('text')
        if not isinstance(text, str):
            raise ParseError('text message without text')
        return TextMessage(text=text)
    if mtype == 'location':
        return LocationMessage(latitude=_coord(msg, 'latitude'), longitude=_coord(msg, 'longitude'))
    return OtherMessage(type=str(mtype))


def _parse_event(raw: Any) -> InboundEvent:
    if not isinstance(raw, dict):
        raise ParseError('event must be an object')
    reply_token = raw.get('replyToken')
    if reply_token is None:
        reply_token = ''
    elif not isinstance(reply_token, str):
        raise ParseError(f'replyToken must be a string, got {type(reply_token).__name__}')
    if raw.get('type') != EventType.MESSAGE.value:
        return InboundEvent(type=EventType.OTHER, reply_token=reply_token)
    if 'message' not in raw:
        raise ParseError('message event without message')
    return InboundEvent(type=EventType.MESSAGE, reply_token=reply_token, message=_parse_message(raw['message']))


def parse_events(body: Union[bytes, str]) -> List[InboundEvent]:
    """Decode a webhook body into events, in arrival order.

    Raises ParseError for anything that is not ``{"events": [...]}``; no
    event is returned when any part of the envelope is malformed.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode('utf-8')
        except UnicodeDecodeError as e:
            raise ParseError('body is not utf-8') from e
    try:
        data = json.loads(body)
    except ValueError as e:
        raise ParseError('invalid json') from e

    if not isinstance(data, dict) or 'events' not in data:
        raise ParseError('body has no events field')
    raw_events = data['events']
    if not isinstance(raw_events, list):
        raise ParseError('events must be a list')

    out = [_parse_event(e) for e in raw_events]
    logger.debug('parsed %d webhook events', len(out))
    return out
