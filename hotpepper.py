import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from config import DEFAULT_API_URL, DEFAULT_GENRE, DEFAULT_RANGE

logger = logging.getLogger(__name__)


class SearchError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, payload: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


@dataclass(frozen=True)
class ShopRecord:
    name: str
    address: str
    photo_url: str
    detail_url: str


def _dig(data: Any, *keys: str) -> str:
    cur = data
    for k in keys:
        if not isinstance(cur, dict):
            return ''
        cur = cur.get(k)
    return cur if isinstance(cur, str) else ''


def normalize_shop(raw: Dict[str, Any]) -> ShopRecord:
    """Map one HotPepper ``shop`` entry to a ShopRecord; missing fields become ''."""
    return ShopRecord(
        name=_dig(raw, 'name'),
        address=_dig(raw, 'address'),
        photo_url=_dig(raw, 'photo', 'mobile', 'l'),
        detail_url=_dig(raw, 'urls', 'pc'),
    )


def format_coord(value: float) -> str:
    """Two decimal places, e.g. 35.681236 -> '35.68'."""
    return f'{value:.2f}'


class ShopSearchClient:
    """HotPepper gourmet search restricted to one genre and radius."""

    def __init__(self, api_key: str, *, base_url: str = DEFAULT_API_URL, genre: str = DEFAULT_GENRE,
                 search_range: str = DEFAULT_RANGE, timeout: float = 5.0, session: Optional[requests.Session] = None):
        if not api_key:
            raise ValueError('api_key is required')
        self.api_key = api_key
        self.base_url = base_url
        self.genre = genre
        self.search_range = search_range
        self.timeout = timeout
        self._session = session

    def build_params(self, lat: str, lng: str) -> Dict[str, str]:
        return {
            'format': 'json',
            'genre': self.genre,
            'range': self.search_range,
            'key': self.api_key,
            'lat': lat,
            'lng': lng,
        }

    def search(self, lat: str, lng: str) -> List[ShopRecord]:
        http = self._session or requests
        try:
            resp = http.get(self.base_url, params=self.build_params(lat, lng), timeout=self.timeout)
        except requests.RequestException as e:
            raise SearchError('network error', payload=str(e)) from e

        if resp.status_code != 200:
            raise SearchError('bad status', status_code=resp.status_code, payload=resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise SearchError('invalid json', status_code=resp.status_code, payload=resp.text) from e

        results = data.get('results') if isinstance(data, dict) else None
        if not isinstance(results, dict):
            raise SearchError('unexpected response shape', status_code=resp.status_code, payload=data)
        if results.get('error'):
            # HotPepper reports bad keys/params as results.error with a 200
            raise SearchError('api error', status_code=resp.status_code, payload=results.get('error'))

        raw_shops = results.get('shop') or []
        if not isinstance(raw_shops, list):
            raise SearchError('unexpected response shape', status_code=resp.status_code, payload=data)

        shops = [normalize_shop(s) for s in raw_shops if isinstance(s, dict)]
        logger.info('hotpepper search lat=%s lng=%s returned %d shops (available=%s)',
                    lat, lng, len(shops), results.get('results_available'))
        return shops
