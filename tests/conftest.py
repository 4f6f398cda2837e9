import io
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from app.config import BotConfig
from app.sessions import SessionStore


ORDER_TEXT = "Новый заказ №3\niPhone 16 Pro x 1 шт.\nОбщая стоимость заказа: 100 300 ₽"


@pytest.fixture
def assets_dir(tmp_path):
    return tmp_path / "assets"


@pytest.fixture
def config(assets_dir):
    return BotConfig(
        token="123:TEST",
        manager_usernames=["manager"],
        brand_name="iGadGetGo",
        support_email="info@igadgetgo.ru",
        timezone="Europe/Moscow",
        port=3000,
        public_url="",
        webhook_secret="",
        currency_symbol="руб.",
        assets_dir=str(assets_dir),
        font_file="DejaVuSans.ttf",
        require_font=False,
        imei_min_digits=8,
        imei_max_digits=20,
    )


@pytest.fixture
def sessions():
    return SessionStore()


def image_bytes(fmt="PNG", size=(200, 100), color=(200, 30, 30)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_message(text, username="manager", chat_id=42):
    message = MagicMock()
    message.text = text
    message.chat.id = chat_id
    message.from_user.username = username
    message.answer = AsyncMock()
    message.answer_document = AsyncMock()
    return message


def answers(message):
    return [call.args[0] for call in message.answer.call_args_list]
