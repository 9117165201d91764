import os
import sys
import pathlib

import pytest

# make the workspace root modules and tests/helpers.py importable
ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(ROOT / 'tests'))


def pytest_configure(config):
    # app.py builds the bot at import time
    os.environ.setdefault('LINE_CHANNEL_ACCESS_TOKEN', 'fake_token')
    os.environ.setdefault('LINE_CHANNEL_SECRET', 'fake_secret')
    os.environ.setdefault('HOTPEPPER_API_KEY', 'fake_key')
    os.environ.pop('SENTRY_DSN', None)


@pytest.fixture
def shops():
    from hotpepper import ShopRecord
    return [
        ShopRecord(name='麺屋 一', address='東京都千代田区丸の内1-1', photo_url='https://img.example.com/1.jpg',
                   detail_url='https://www.hotpepper.jp/strJ001/'),
        ShopRecord(name='らーめん 二', address='東京都千代田区丸の内2-2', photo_url='https://img.example.com/2.jpg',
                   detail_url='https://www.hotpepper.jp/strJ002/'),
    ]
