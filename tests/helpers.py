import base64
import hashlib
import hmac
import json

CHANNEL_SECRET = 'fake_secret'


def make_signature(body: str, secret: str = CHANNEL_SECRET) -> str:
    mac = hmac.new(secret.encode('utf-8'), body.encode('utf-8'), hashlib.sha256)
    return base64.b64encode(mac.digest()).decode('utf-8')


class DummyReplier:
    """Records replies; optionally fails on the Nth call."""

    def __init__(self, fail_on=None, error=None):
        self.replies = []
        self.fail_on = fail_on
        self.error = error

    def reply(self, reply_token, payload):
        if self.fail_on is not None and len(self.replies) + 1 == self.fail_on:
            raise self.error
        self.replies.append((reply_token, payload))


class FakeSearcher:
    def __init__(self, shops=None, error=None):
        self.shops = shops or []
        self.error = error
        self.calls = []

    def search(self, lat, lng):
        self.calls.append((lat, lng))
        if self.error is not None:
            raise self.error
        return list(self.shops)


def text_event(text, token='rt-text'):
    return {'type': 'message', 'replyToken': token, 'source': {'type': 'user', 'userId': 'U1'},
            'message': {'type': 'text', 'id': '1', 'text': text}}


def location_event(lat, lng, token='rt-loc'):
    return {'type': 'message', 'replyToken': token, 'source': {'type': 'user', 'userId': 'U1'},
            'message': {'type': 'location', 'id': '2', 'title': 'pin', 'address': 'somewhere',
                        'latitude': lat, 'longitude': lng}}


def sticker_event(token='rt-sticker'):
    return {'type': 'message', 'replyToken': token, 'source': {'type': 'user', 'userId': 'U1'},
            'message': {'type': 'sticker', 'id': '3', 'packageId': '1', 'stickerId': '1'}}


def envelope(*events):
    return json.dumps({'destination': 'Uxxx', 'events': list(events)}, ensure_ascii=False)
