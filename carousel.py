import logging
from dataclasses import dataclass
from typing import List, Sequence

from linebot.models import CarouselColumn, CarouselTemplate, TemplateSendMessage, URIAction

from config import LINE_CAROUSEL_MAX
from hotpepper import ShopRecord
from utils import truncate, CAROUSEL_TITLE_MAX, CAROUSEL_TEXT_MAX, ACTION_LABEL_MAX

logger = logging.getLogger(__name__)

ALT_TEXT = 'ラーメン一覧'
DETAIL_LABEL = '詳細'
IMAGE_BACKGROUND = '#FFFFFF'


class BuildError(Exception):
    pass


@dataclass(frozen=True)
class CardAction:
    label: str
    uri: str


@dataclass(frozen=True)
class CarouselCard:
    title: str
    text: str
    image_url: str
    action: CardAction


@dataclass(frozen=True)
class Carousel:
    cards: List[CarouselCard]
    alt_text: str = ALT_TEXT


def build_card(shop: ShopRecord) -> CarouselCard:
    return CarouselCard(
        title=truncate(shop.name, CAROUSEL_TITLE_MAX),
        text=truncate(shop.address, CAROUSEL_TEXT_MAX),
        image_url=shop.photo_url,
        action=CardAction(label=truncate(DETAIL_LABEL, ACTION_LABEL_MAX), uri=shop.detail_url),
    )


def build_carousel(shops: Sequence[ShopRecord], max_columns: int = LINE_CAROUSEL_MAX) -> Carousel:
    """Turn search results into at most `max_columns` cards, keeping their order.

    Records without a name, address or detail URL are skipped. Raises
    BuildError when `shops` is empty or no record is usable.
    """
    if not shops:
        raise BuildError('no shops to build a carousel from')

    cards: List[CarouselCard] = []
    skipped = 0
    for shop in shops:
        if len(cards) >= max_columns:
            break
        if not shop.name or not shop.address or not shop.detail_url:
            skipped += 1
            continue
        cards.append(build_card(shop))

    if skipped:
        logger.warning('skipped %d shop records with missing fields', skipped)
    if not cards:
        raise BuildError('every shop record was missing a required field')
    return Carousel(cards=cards)


def to_template_message(carousel: Carousel) -> TemplateSendMessage:
    # LINE rejects a carousel where only some columns carry an image
    with_images = all(card.image_url for card in carousel.cards)
    columns = [
        CarouselColumn(
            thumbnail_image_url=card.image_url if with_images else None,
            image_background_color=IMAGE_BACKGROUND,
            title=card.title,
            text=card.text,
            actions=[URIAction(label=card.action.label, uri=card.action.uri)],
        )
        for card in carousel.cards
    ]
    return TemplateSendMessage(
        alt_text=carousel.alt_text,
        template=CarouselTemplate(columns=columns, image_aspect_ratio='rectangle', image_size='cover'),
    )
