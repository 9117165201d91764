import logging
from typing import Optional, Union, List

import requests
from linebot import LineBotApi
from linebot.exceptions import LineBotApiError
from linebot.models import SendMessage

logger = logging.getLogger(__name__)


class ReplyError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ReplySender:
    """Sends one reply per call through LineBotApi; failures surface as ReplyError."""

    def __init__(self, line_bot_api: LineBotApi, timeout: Optional[float] = None):
        self.line_bot_api = line_bot_api
        self.timeout = timeout

    def reply(self, reply_token: str, payload: Union[SendMessage, List[SendMessage]]) -> None:
        try:
            self.line_bot_api.reply_message(reply_token, payload, timeout=self.timeout)
        except LineBotApiError as e:
            detail = e.error.message if e.error is not None else ''
            logger.error('reply rejected by LINE: status=%s message=%s', e.status_code, detail)
            raise ReplyError(f'reply rejected: {detail}', status_code=e.status_code) from e
        except requests.RequestException as e:
            logger.error('reply transport failure: %s', e)
            raise ReplyError('reply transport failure') from e
