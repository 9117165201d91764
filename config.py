import os
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://webservice.recruit.co.jp/hotpepper/gourmet/v1/'
# G013 = ramen, range 5 = 3000m
DEFAULT_GENRE = 'G013'
DEFAULT_RANGE = '5'
LINE_CAROUSEL_MAX = 10

SECRET_KEYS = [
    'LINE_CHANNEL_SECRET',
    'LINE_CHANNEL_ACCESS_TOKEN',
    'HOTPEPPER_API_KEY',
    'SENTRY_DSN',
]


class ConfigError(Exception):
    def __init__(self, message: str, missing: Optional[list] = None):
        super().__init__(message)
        self.missing = missing or []


@dataclass(frozen=True)
class Config:
    channel_secret: str
    channel_access_token: str
    api_key: str
    api_url: str = DEFAULT_API_URL
    genre: str = DEFAULT_GENRE
    search_range: str = DEFAULT_RANGE
    search_timeout: float = 5.0
    reply_timeout: float = 5.0
    carousel_max_columns: int = LINE_CAROUSEL_MAX
    search_error_fallback: bool = False


def load_secrets_from_files(keys: Iterable[str], base_path: str = '/etc/secrets'):
    """Copy Render secret files (/etc/secrets/<NAME>) into os.environ when the variable is unset."""
    for k in keys:
        if os.getenv(k) is None:
            p = os.path.join(base_path, k)
            try:
                if os.path.exists(p):
                    with open(p, 'r', encoding='utf-8') as f:
                        v = f.read().strip()
                        if v:
                            os.environ[k] = v
            except OSError:
                logger.exception('failed loading secret file %s', p)


def _first_env(*names: str) -> str:
    for n in names:
        v = os.getenv(n)
        if v and v.strip():
            return v.strip()
    return ''


def _parse_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f'{name} must be a number, got {raw!r}') from e
    if value <= 0:
        raise ConfigError(f'{name} must be positive, got {raw!r}')
    return value


def _parse_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f'{name} must be an integer, got {raw!r}') from e


def _parse_bool(name: str) -> bool:
    return os.getenv(name, '').strip().lower() in ('1', 'true', 'yes', 'on')


def load_config() -> Config:
    """Read configuration from the environment.

    Raises ConfigError naming every missing required variable. The legacy
    names used by the first Lambda deployment (LINE_BOT_CHANNEL_SECRET,
    LINE_BOT_CHANNEL_TOKEN, API_KEY) are accepted as fallbacks.
    """
    secret = _first_env('LINE_CHANNEL_SECRET', 'LINE_BOT_CHANNEL_SECRET')
    token = _first_env('LINE_CHANNEL_ACCESS_TOKEN', 'LINE_BOT_CHANNEL_TOKEN')
    api_key = _first_env('HOTPEPPER_API_KEY', 'API_KEY')

    missing = []
    if not secret:
        missing.append('LINE_CHANNEL_SECRET')
    if not token:
        missing.append('LINE_CHANNEL_ACCESS_TOKEN')
    if not api_key:
        missing.append('HOTPEPPER_API_KEY')
    if missing:
        raise ConfigError('missing required settings: ' + ', '.join(missing), missing=missing)

    max_columns = _parse_int('CAROUSEL_MAX_COLUMNS', str(LINE_CAROUSEL_MAX))
    max_columns = max(1, min(max_columns, LINE_CAROUSEL_MAX))

    return Config(
        channel_secret=secret,
        channel_access_token=token,
        api_key=api_key,
        api_url=os.getenv('HOTPEPPER_API_URL', DEFAULT_API_URL),
        genre=os.getenv('HOTPEPPER_GENRE', DEFAULT_GENRE),
        search_range=os.getenv('HOTPEPPER_RANGE', DEFAULT_RANGE),
        search_timeout=_parse_float('SEARCH_TIMEOUT_SEC', '5'),
        reply_timeout=_parse_float('REPLY_TIMEOUT_SEC', '5'),
        carousel_max_columns=max_columns,
        search_error_fallback=_parse_bool('SEARCH_ERROR_FALLBACK'),
    )
