import hashlib
import io
import logging
import threading
from dataclasses import dataclass
from datetime import date

from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from app.assets import Asset, WarrantyAssets
from app.warranty_template import (
    CONTACTS_TEMPLATE,
    DATE_TEMPLATE,
    DEFAULT_LAYOUT,
    IMEI_TEMPLATE,
    TABLE_HEADERS,
    TERMS_TITLE,
    TITLE_TEMPLATE,
    WARRANTY_TERMS,
    ImageSlot,
    WarrantyLayout,
)


EMBEDDED_FONT_NAME = "WarrantySans"
FALLBACK_FONT_NAME = "Helvetica"

# Реестр шрифтов reportlab глобальный: каждый файл шрифта регистрируем один раз
_registered_fonts: dict[str, str] = {}
_font_lock = threading.Lock()


class WarrantyRenderError(RuntimeError):
    pass


@dataclass(frozen=True)
class WarrantyData:
    brand: str
    email: str
    issued_on: date
    product: str
    quantity: int
    price: int | float
    order_id: str | None
    imei: str

    @property
    def document_number(self) -> str:
        return f"W-{self.order_id or 'manual'}-{self.issued_on:%y%m%d}"

    @property
    def formatted_date(self) -> str:
        return self.issued_on.strftime("%d.%m.%Y")


def format_price(value: int | float, currency_symbol: str = "₽") -> str:
    # Разделитель тысяч пробел, как в ru-RU
    if isinstance(value, float) and not value.is_integer():
        amount = f"{value:,.2f}".replace(",", " ").replace(".", ",")
    else:
        amount = f"{int(value):,}".replace(",", " ")
    return f"{amount} {currency_symbol}".rstrip()


def register_font(font_bytes: bytes | None) -> str:
    if not font_bytes:
        logging.warning("No embedded font, falling back to Helvetica (no Cyrillic glyphs)")
        return FALLBACK_FONT_NAME
    digest = hashlib.sha1(font_bytes).hexdigest()[:12]
    with _font_lock:
        name = _registered_fonts.get(digest)
        if name is None:
            name = f"{EMBEDDED_FONT_NAME}-{digest}"
            pdfmetrics.registerFont(TTFont(name, io.BytesIO(font_bytes)))
            _registered_fonts[digest] = name
    return name


def open_image(asset: Asset | None) -> ImageReader | None:
    if asset is None:
        return None
    try:
        reader = ImageReader(io.BytesIO(asset.content))
        reader.getSize()
        return reader
    except Exception:
        logging.exception(f"Embed image error: {asset.name}")
        return None


def scaled_height(reader: ImageReader, width: float) -> float:
    source_width, source_height = reader.getSize()
    return source_height * width / source_width


def draw_image(pdf: canvas.Canvas, reader: ImageReader | None, slot: ImageSlot) -> None:
    if reader is None:
        return
    height = scaled_height(reader, slot.width)
    pdf.drawImage(reader, slot.x, slot.y, width=slot.width, height=height, mask="auto")


def draw_rule(pdf: canvas.Canvas, layout: WarrantyLayout, y: float) -> None:
    page_width = layout.page_size[0]
    pdf.setFillColorRGB(*layout.rule_gray)
    pdf.rect(
        layout.rule_inset,
        y - layout.rule_offset,
        page_width - 2 * layout.rule_inset,
        1,
        stroke=0,
        fill=1,
    )
    pdf.setFillColorRGB(0, 0, 0)


def draw_text(
    pdf: canvas.Canvas,
    font: str,
    size: int,
    x: float,
    y: float,
    text: str,
    color: tuple[float, float, float] = (0, 0, 0),
) -> None:
    pdf.setFont(font, size)
    pdf.setFillColorRGB(*color)
    pdf.drawString(x, y, text)
    pdf.setFillColorRGB(0, 0, 0)


def render_warranty(
    data: WarrantyData,
    assets: WarrantyAssets,
    layout: WarrantyLayout = DEFAULT_LAYOUT,
    terms: tuple[str, ...] = WARRANTY_TERMS,
    currency_symbol: str = "₽",
) -> bytes:
    try:
        return _render(data, assets, layout, terms, currency_symbol)
    except WarrantyRenderError:
        raise
    except Exception as e:
        raise WarrantyRenderError(f"PDF generation failed: {e}") from e


def _render(
    data: WarrantyData,
    assets: WarrantyAssets,
    layout: WarrantyLayout,
    terms: tuple[str, ...],
    currency_symbol: str,
) -> bytes:
    font = register_font(assets.font)
    logo = open_image(assets.logo)
    signature = open_image(assets.signature)
    stamp = open_image(assets.stamp)

    buffer = io.BytesIO()
    # invariant=1 убирает дату создания и случайный ID, вывод воспроизводим
    pdf = canvas.Canvas(buffer, pagesize=layout.page_size, invariant=1)
    pdf.setTitle(TITLE_TEMPLATE.format(number=data.document_number))
    x = layout.margin_x

    # Шапка
    y = layout.header_top
    if logo is not None:
        height = scaled_height(logo, layout.logo_width)
        pdf.drawImage(logo, x, y - height, width=layout.logo_width, height=height, mask="auto")

    draw_text(pdf, font, layout.title_size, x, y - 30, TITLE_TEMPLATE.format(number=data.document_number))
    draw_text(pdf, font, layout.text_size, x, y - 50, DATE_TEMPLATE.format(date=data.formatted_date))
    draw_text(
        pdf,
        font,
        layout.contacts_size,
        x,
        y - 70,
        CONTACTS_TEMPLATE.format(brand=data.brand, email=data.email),
        color=layout.text_gray,
    )

    # Таблица товара
    y = layout.table_top
    columns = (x, layout.column_qty_x, layout.column_price_x)
    for column_x, header in zip(columns, TABLE_HEADERS):
        draw_text(pdf, font, layout.text_size, column_x, y, header)
    draw_rule(pdf, layout, y)

    y -= layout.row_step
    row = (data.product, str(data.quantity), format_price(data.price, currency_symbol))
    for column_x, value in zip(columns, row):
        draw_text(pdf, font, layout.text_size, column_x, y, value)

    y -= layout.row_height
    draw_rule(pdf, layout, y)

    y -= layout.imei_gap
    draw_text(pdf, font, layout.text_size, x, y, IMEI_TEMPLATE.format(imei=data.imei))

    # Условия гарантии
    y -= layout.terms_gap
    draw_text(pdf, font, layout.text_size, x, y, TERMS_TITLE)
    y -= layout.terms_header_gap
    for line in terms:
        draw_text(pdf, font, layout.terms_size, layout.terms_x, y, f"• {line}", color=layout.text_gray)
        y -= layout.terms_step

    # Подпись и печать
    draw_image(pdf, signature, layout.signature)
    draw_image(pdf, stamp, layout.stamp)

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
