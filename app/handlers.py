import asyncio
import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from aiogram import F, Router
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command, CommandStart
from aiogram.types import BufferedInputFile, Message, User

from app.assets import AssetError, load_assets
from app.config import BotConfig
from app.imei import extract_imei
from app.order_parser import PendingOrder, parse_order
from app.sessions import SessionStore
from app.warranty_pdf import WarrantyData, WarrantyRenderError, format_price, render_warranty


START_TEXT = (
    "Перешлите сюда уведомление о заказе из конструктора.\n"
    "Я извлеку товар, количество и цену, затем попрошу IMEI и пришлю PDF.\n\n"
    "Подсказка: IMEI можно вводить с пробелами — я оставлю только цифры."
)

PARSE_FAILED_TEXT = (
    "Не смог распознать заказ. Перешлите сообщение как в уведомлении конструктора.\n"
    "Пример нужных строк:\n"
    "— Новый заказ №3\n"
    "— Строка с товаром и количеством: ... x 1 шт.\n"
    "— Общая стоимость заказа: 100 300 ₽"
)

IMEI_INVALID_TEXT = "IMEI должен содержать от {min_digits} до {max_digits} цифр. Отправьте ещё раз."

RENDER_FAILED_TEXT = (
    "Не удалось сформировать PDF. Проверьте файлы в assets/ "
    "(logo, stamp, signature в PNG/JPG, шрифт) и пришлите логи."
)

DELIVERY_FAILED_TEXT = "Не удалось отправить PDF. Попробуйте ещё раз: перешлите заказ и введите IMEI."

GENERIC_ERROR_TEXT = "Произошла ошибка. Пришлите текст заказа ещё раз или IMEI повторно."

CANCELLED_TEXT = "Заказ отменён. Можно переслать новое уведомление."

NOTHING_TO_CANCEL_TEXT = "Нет заказа, ожидающего IMEI."


def is_manager(user: User | None, usernames: list[str]) -> bool:
    username = user.username if user and user.username else ""
    return bool(username) and username in usernames


def check_manager(message: Message, config: BotConfig) -> bool:
    if is_manager(message.from_user, config.manager_usernames):
        return True
    username = message.from_user.username if message.from_user else None
    logging.info(f"Blocked user @{username or ''} chat={message.chat.id}")
    return False


def format_order_accepted(order: PendingOrder) -> str:
    return (
        "Заказ принят:\n"
        f"Товар: {order.product}\n"
        f"Кол-во: {order.quantity}\n"
        f"Цена: {format_price(order.price)}\n\n"
        "Введите IMEI (можно с пробелами — я оставлю только цифры)."
    )


def today(config: BotConfig) -> datetime:
    return datetime.now(ZoneInfo(config.timezone))


async def build_document(order: PendingOrder, imei: str, config: BotConfig) -> bytes:
    assets = await asyncio.to_thread(load_assets, config)
    data = WarrantyData(
        brand=config.brand_name,
        email=config.support_email,
        issued_on=today(config).date(),
        product=order.product,
        quantity=order.quantity,
        price=order.price,
        order_id=order.order_id,
        imei=imei,
    )
    return await asyncio.to_thread(
        render_warranty, data, assets, currency_symbol=config.currency_symbol
    )


async def safe_answer(message: Message, text: str) -> None:
    try:
        await message.answer(text)
    except TelegramAPIError as e:
        logging.error(f"Failed to send reply to chat {message.chat.id}: {e}")


async def issue_warranty(
    message: Message,
    order: PendingOrder,
    imei: str,
    config: BotConfig,
) -> None:
    try:
        pdf = await build_document(order, imei, config)
    except (AssetError, WarrantyRenderError):
        logging.exception("PDF generation error")
        await safe_answer(message, RENDER_FAILED_TEXT)
        return

    filename = f"warranty_{order.document_suffix}.pdf"
    try:
        await message.answer_document(BufferedInputFile(pdf, filename=filename))
    except TelegramAPIError:
        logging.exception(f"Failed to send {filename} to chat {message.chat.id}")
        await safe_answer(message, DELIVERY_FAILED_TEXT)
        return
    logging.info(f"Sent {filename} to chat {message.chat.id}")


async def process_text(message: Message, config: BotConfig, sessions: SessionStore) -> None:
    if not check_manager(message, config):
        return

    chat_id = message.chat.id
    text = (message.text or "").strip()
    parsed = parse_order(text)

    # Новое уведомление заменяет заказ, даже если ждём IMEI
    if parsed is not None:
        sessions.put(chat_id, parsed)
        logging.info(f"Order {parsed.document_suffix} pending in chat {chat_id}")
        await message.answer(format_order_accepted(parsed))
        return

    pending = sessions.get(chat_id)
    if pending is None:
        await message.answer(PARSE_FAILED_TEXT)
        return

    imei = extract_imei(text, config.imei_min_digits, config.imei_max_digits)
    if imei is None:
        await message.answer(
            IMEI_INVALID_TEXT.format(
                min_digits=config.imei_min_digits,
                max_digits=config.imei_max_digits,
            )
        )
        return

    sessions.pop(chat_id)
    await issue_warranty(message, pending, imei, config)


def create_router() -> Router:
    router = Router()

    @router.message(CommandStart())
    async def start(message: Message, config: BotConfig) -> None:
        if not check_manager(message, config):
            return
        await message.answer(START_TEXT)

    @router.message(Command("cancel"))
    async def cancel(message: Message, config: BotConfig, sessions: SessionStore) -> None:
        if not check_manager(message, config):
            return
        if sessions.pop(message.chat.id) is None:
            await message.answer(NOTHING_TO_CANCEL_TEXT)
            return
        await message.answer(CANCELLED_TEXT)

    @router.message(F.text)
    async def text_message(message: Message, config: BotConfig, sessions: SessionStore) -> None:
        try:
            await process_text(message, config, sessions)
        except Exception:
            logging.exception("Handler error")
            await safe_answer(message, GENERIC_ERROR_TEXT)

    return router
