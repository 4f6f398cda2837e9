import logging
import re
from dataclasses import dataclass


ORDER_LINE_RE = re.compile(r"^Новый заказ", re.IGNORECASE)
ORDER_ID_RE = re.compile(r"[№#]\s*([A-Za-z0-9_-]+)")
# "iPhone 16 Pro x 1 шт.": латинская x, кириллическая х или знак ×, отдельным словом
QUANTITY_RE = re.compile(r"(?:^|\s+)[xх×]\s*(\d+)?\s*шт\.?", re.IGNORECASE)
PRICE_LINE_RE = re.compile(r"^Общая стоимость заказа:", re.IGNORECASE)
# Группы разрядов через пробел, точку или запятую; копейки только 1-2 цифры в конце
PRICE_RE = re.compile(r"(\d[\d\s]*(?:[.,]\d{3}(?!\d)[\d\s]*)*)(?:[.,](\d{1,2}))?(?!\d)")


@dataclass(frozen=True)
class PendingOrder:
    product: str
    quantity: int
    price: int | float
    order_id: str | None = None

    @property
    def document_suffix(self) -> str:
        return self.order_id or "manual"


def split_lines(raw: str) -> list[str]:
    return [line.strip() for line in raw.splitlines() if line.strip()]


def parse_order_id(lines: list[str]) -> str | None:
    order_line = next((line for line in lines if ORDER_LINE_RE.search(line)), None)
    if not order_line:
        return None
    match = ORDER_ID_RE.search(order_line)
    return match.group(1) if match else None


def parse_product(lines: list[str]) -> tuple[str, int]:
    for line in lines:
        match = QUANTITY_RE.search(line)
        if not match:
            continue
        quantity = int(match.group(1)) if match.group(1) else 1
        product = (line[: match.start()] + line[match.end():]).strip()
        return product, quantity
    return "", 0


def parse_price(lines: list[str]) -> int | float:
    price_line = next((line for line in lines if PRICE_LINE_RE.search(line)), None)
    if not price_line:
        return 0
    _, _, tail = price_line.partition(":")
    match = PRICE_RE.search(tail)
    if not match:
        return 0
    digits = re.sub(r"[\s.,]+", "", match.group(1))
    if match.group(2):
        return float(f"{digits}.{match.group(2)}")
    return int(digits)


def parse_order(raw: str) -> PendingOrder | None:
    lines = split_lines(raw or "")

    order_id = parse_order_id(lines)
    product, quantity = parse_product(lines)
    price = parse_price(lines)

    if not product or not quantity or not price:
        logging.info(
            f"Parse failed: product={product!r} qty={quantity} price={price} "
            f"sample={(raw or '')[:200]!r}"
        )
        return None
    return PendingOrder(product=product, quantity=quantity, price=price, order_id=order_id)
