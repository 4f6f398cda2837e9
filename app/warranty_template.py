from dataclasses import dataclass

from reportlab.lib.pagesizes import A4


@dataclass(frozen=True)
class ImageSlot:
    x: float
    y: float
    width: float


@dataclass(frozen=True)
class WarrantyLayout:
    page_size: tuple[float, float] = A4
    margin_x: float = 40
    header_top: float = 790
    logo_width: float = 120
    title_size: int = 14
    text_size: int = 12
    contacts_size: int = 11
    terms_size: int = 10
    table_top: float = 700
    column_qty_x: float = 360
    column_price_x: float = 450
    row_step: float = 24
    row_height: float = 32
    rule_offset: float = 8
    rule_inset: float = 38
    imei_gap: float = 24
    terms_gap: float = 40
    terms_header_gap: float = 18
    terms_x: float = 50
    terms_step: float = 14
    text_gray: tuple[float, float, float] = (0.2, 0.2, 0.2)
    rule_gray: tuple[float, float, float] = (0.8, 0.8, 0.8)
    signature: ImageSlot = ImageSlot(x=60, y=140, width=220)
    stamp: ImageSlot = ImageSlot(x=360, y=120, width=160)


DEFAULT_LAYOUT = WarrantyLayout()

TITLE_TEMPLATE = "Гарантийный документ № {number}"
DATE_TEMPLATE = "Дата: {date}"
CONTACTS_TEMPLATE = "Продавец: {brand}  |  Контакты: {email}"
TABLE_HEADERS = ("Товар", "Кол-во", "Цена")
IMEI_TEMPLATE = "IMEI: {imei}"
TERMS_TITLE = "Условия гарантии:"

WARRANTY_TERMS = (
    "Срок гарантии 12 месяцев на продукцию Apple с даты продажи.",
    "Обслуживание по результатам диагностики авторизованного сервиса.",
    "Не покрываются: механические/термические повреждения, влага, вмешательство, ПО, аксессуары, расходники.",
    "Сохранность чека/заказа и соответствие IMEI обязательны.",
    "Срок ремонта/замены до 45 дней. Территория действия — РФ.",
)
