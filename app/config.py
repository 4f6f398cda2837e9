import logging
import os
from dataclasses import dataclass
from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


@dataclass(frozen=True)
class BotConfig:
    token: str
    manager_usernames: List[str]
    brand_name: str
    support_email: str
    timezone: str
    port: int
    public_url: str
    webhook_secret: str
    currency_symbol: str
    assets_dir: str
    font_file: str
    require_font: bool
    imei_min_digits: int
    imei_max_digits: int

    @property
    def webhook_path(self) -> str:
        return f"/webhook/{self.token}"

    @property
    def webhook_url(self) -> str:
        return self.public_url.rstrip("/") + self.webhook_path


def parse_usernames(raw: str) -> List[str]:
    usernames = []
    for part in raw.split(","):
        part = part.strip().lstrip("@")
        if part:
            usernames.append(part)
    return usernames


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("true", "1", "yes")


def load_config() -> BotConfig:
    token = os.getenv("BOT_TOKEN", "").strip()
    if not token:
        raise RuntimeError("BOT_TOKEN is required")

    # Менеджеры, которым разрешено работать с ботом
    managers_str = os.getenv("MANAGER_USERNAMES", "")
    manager_usernames = parse_usernames(managers_str)
    if not manager_usernames:
        logging.warning("MANAGER_USERNAMES is empty, every message will be ignored")
    logging.info(f"Loaded manager_usernames: {manager_usernames}")

    imei_min_digits = _int_env("IMEI_MIN_DIGITS", 8)
    imei_max_digits = _int_env("IMEI_MAX_DIGITS", 20)
    if imei_min_digits < 1 or imei_min_digits > imei_max_digits:
        raise RuntimeError(
            f"Invalid IMEI digit range: {imei_min_digits}..{imei_max_digits}"
        )

    timezone = os.getenv("TIMEZONE", "Europe/Moscow").strip()
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise RuntimeError(f"Unknown TIMEZONE: {timezone!r}") from None

    return BotConfig(
        token=token,
        manager_usernames=manager_usernames,
        brand_name=os.getenv("BRAND_NAME", "iGadGetGo"),
        support_email=os.getenv("SUPPORT_EMAIL", "info@igadgetgo.ru"),
        timezone=timezone,
        port=_int_env("PORT", 3000),
        public_url=os.getenv("PUBLIC_URL", "").strip(),
        webhook_secret=os.getenv("WEBHOOK_SECRET", "").strip(),
        # Символ валюты в PDF, если шрифт его не поддерживает, можно заменить на "руб."
        currency_symbol=os.getenv("CURRENCY_SYMBOL", "₽"),
        assets_dir=os.getenv("ASSETS_DIR", "assets"),
        font_file=os.getenv("FONT_FILE", "DejaVuSans.ttf"),
        require_font=_bool_env("REQUIRE_FONT", True),
        imei_min_digits=imei_min_digits,
        imei_max_digits=imei_max_digits,
    )
