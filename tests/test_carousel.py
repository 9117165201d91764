import pytest

from carousel import ALT_TEXT, BuildError, build_carousel, to_template_message
from hotpepper import ShopRecord


def shop(i, **overrides):
    fields = dict(name=f'店{i}', address=f'住所{i}', photo_url=f'https://img.example.com/{i}.jpg',
                  detail_url=f'https://www.hotpepper.jp/str{i}/')
    fields.update(overrides)
    return ShopRecord(**fields)


def test_build_maps_fields(shops):
    carousel = build_carousel(shops)
    assert len(carousel.cards) == 2
    card = carousel.cards[0]
    assert card.title == '麺屋 一'
    assert card.text == '東京都千代田区丸の内1-1'
    assert card.image_url == 'https://img.example.com/1.jpg'
    assert card.action.label == '詳細'
    assert card.action.uri == 'https://www.hotpepper.jp/strJ001/'


def test_build_empty_raises():
    with pytest.raises(BuildError):
        build_carousel([])


def test_build_caps_at_platform_max_keeping_order():
    carousel = build_carousel([shop(i) for i in range(15)])
    assert [c.title for c in carousel.cards] == [f'店{i}' for i in range(10)]


def test_build_respects_smaller_max():
    assert len(build_carousel([shop(i) for i in range(5)], max_columns=3).cards) == 3


def test_build_skips_incomplete_records():
    records = [shop(0, name=''), shop(1), shop(2, address=''), shop(3, detail_url=''), shop(4)]
    carousel = build_carousel(records)
    assert [c.title for c in carousel.cards] == ['店1', '店4']


def test_build_skipped_records_do_not_count_towards_cap():
    records = [shop(i, name='') for i in range(5)] + [shop(i) for i in range(5, 20)]
    carousel = build_carousel(records)
    assert len(carousel.cards) == 10
    assert carousel.cards[0].title == '店5'


def test_build_all_incomplete_raises():
    with pytest.raises(BuildError):
        build_carousel([shop(0, name=''), shop(1, address='')])


def test_build_truncates_long_fields():
    long_address = '東京都' + 'あ' * 100
    long_name = 'ラ' * 50
    card = build_carousel([shop(0, name=long_name, address=long_address)]).cards[0]
    assert len(card.text) == 60
    assert card.text.endswith('…')
    assert card.text.startswith('東京都')
    assert len(card.title) == 40


def test_template_message_json(shops):
    msg = to_template_message(build_carousel(shops))
    d = msg.as_json_dict()
    assert d['type'] == 'template'
    assert d['altText'] == ALT_TEXT
    tpl = d['template']
    assert tpl['type'] == 'carousel'
    assert tpl['imageAspectRatio'] == 'rectangle'
    assert tpl['imageSize'] == 'cover'
    col = tpl['columns'][0]
    assert col['thumbnailImageUrl'] == 'https://img.example.com/1.jpg'
    assert col['imageBackgroundColor'] == '#FFFFFF'
    assert col['title'] == '麺屋 一'
    assert col['text'] == '東京都千代田区丸の内1-1'
    assert col['actions'] == [{'type': 'uri', 'label': '詳細', 'uri': 'https://www.hotpepper.jp/strJ001/'}]


def test_template_message_drops_images_when_any_shop_lacks_one():
    msg = to_template_message(build_carousel([shop(0), shop(1, photo_url=''), shop(2)]))
    columns = msg.as_json_dict()['template']['columns']
    assert len(columns) == 3
    assert all('thumbnailImageUrl' not in col for col in columns)


def test_template_message_keeps_images_when_all_present():
    columns = to_template_message(build_carousel([shop(0), shop(1)])).as_json_dict()['template']['columns']
    assert [col['thumbnailImageUrl'] for col in columns] == ['https://img.example.com/0.jpg', 'https://img.example.com/1.jpg']
