"""send_test_webhook.py

Usage:
  $ LINE_CHANNEL_SECRET=your_secret python scripts/send_test_webhook.py --url https://xxxx.ngrok.io/callback
  $ LINE_CHANNEL_SECRET=your_secret python scripts/send_test_webhook.py --lat 35.681236 --lng 139.767125

Signs the sample event with LINE_CHANNEL_SECRET and POSTs it with a valid
X-Line-Signature. The reply token is fake, so the bot's reply itself fails.
"""
import os
import argparse
import hmac
import hashlib
import base64
import json
import requests


def make_signature(secret: str, body: bytes) -> str:
    mac = hmac.new(secret.encode('utf-8'), body, hashlib.sha256)
    return base64.b64encode(mac.digest()).decode('utf-8')


def build_event(text: str = None, lat: float = None, lng: float = None) -> dict:
    if lat is not None and lng is not None:
        message = {'type': 'location', 'id': '1', 'title': 'test', 'address': 'test', 'latitude': lat, 'longitude': lng}
    else:
        message = {'type': 'text', 'id': '1', 'text': text or 'hello from test script'}
    return {
        'events': [
            {
                'type': 'message',
                'message': message,
                'replyToken': '00000000000000000000000000000000',
                'source': {'userId': 'U1234567890', 'type': 'user'},
            }
        ]
    }


def main():
    p = argparse.ArgumentParser()
    p.add_argument('--url', '-u', default=os.environ.get('WEBHOOK_URL', 'http://localhost:5000/callback'))
    p.add_argument('--text', '-t', default='hello from test script')
    p.add_argument('--lat', type=float)
    p.add_argument('--lng', type=float)
    args = p.parse_args()

    secret = os.environ.get('LINE_CHANNEL_SECRET')
    if not secret:
        print('ERROR: set LINE_CHANNEL_SECRET env var first')
        return

    body = json.dumps(build_event(args.text, args.lat, args.lng)).encode('utf-8')
    sig = make_signature(secret, body)
    headers = {
        'Content-Type': 'application/json',
        'X-Line-Signature': sig
    }

    print(f'POST {args.url} with X-Line-Signature: {sig}')
    r = requests.post(args.url, headers=headers, data=body, timeout=10)
    print('status:', r.status_code)
    print('resp:', r.text)


if __name__ == '__main__':
    main()
