"""
AWS Lambda entrypoint (API Gateway proxy integration) for the LINE webhook.

Clients are built on cold start and reused across invocations.
"""
import base64
import binascii
import logging
import os
from typing import Any, Dict, Optional

from config import ConfigError, load_config
from sentry_init import init_sentry
from webhook import ERROR_BODY, Bot, InvalidSignature, build_bot, handle_callback

logger = logging.getLogger()
logger.setLevel(getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO))

init_sentry(flask=False)

# stop replying once less than this much invocation time is left
ABORT_MARGIN_MS = int(os.getenv('ABORT_MARGIN_MS', '1000'))

_bot: Optional[Bot] = None


def _get_bot() -> Optional[Bot]:
    global _bot
    if _bot is None:
        try:
            _bot = build_bot(load_config())
        except ConfigError as e:
            logger.error('bot disabled: %s', e)
            return None
    return _bot


def _response(body: str, status: int) -> Dict[str, Any]:
    return {'statusCode': status, 'headers': {'Content-Type': 'text/plain'}, 'body': body}


def _signature(event: Dict[str, Any]) -> str:
    headers = event.get('headers') or {}
    for k, v in headers.items():
        if k.lower() == 'x-line-signature':
            return v or ''
    return ''


def lambda_handler(event, context):
    body = event.get('body') or ''
    if event.get('isBase64Encoded'):
        try:
            body = base64.b64decode(body, validate=True)
        except binascii.Error:
            logger.warning('body is not valid base64')
            return _response(ERROR_BODY, 200)

    should_abort = None
    if context is not None and hasattr(context, 'get_remaining_time_in_millis'):
        should_abort = lambda: context.get_remaining_time_in_millis() < ABORT_MARGIN_MS  # noqa: E731

    try:
        text, status = handle_callback(_get_bot(), body, _signature(event), should_abort=should_abort)
    except InvalidSignature:
        return _response('invalid signature', 400)
    return _response(text, status)
