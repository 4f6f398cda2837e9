import pytest

from app.order_parser import PendingOrder, parse_order

from conftest import ORDER_TEXT


def test_parses_notification():
    assert parse_order(ORDER_TEXT) == PendingOrder(
        product="iPhone 16 Pro", quantity=1, price=100300, order_id="3"
    )


def test_ignores_surrounding_noise_and_blank_lines():
    text = (
        "Переслано от Магазин\n\n"
        "  Новый заказ №A-17  \n"
        "Клиент: Иван\n"
        "\n"
        "AirPods Pro 2 x 2 шт.\n"
        "Доставка: самовывоз\n"
        "Общая стоимость заказа: 49 980 ₽\n"
    )
    order = parse_order(text)
    assert order == PendingOrder(product="AirPods Pro 2", quantity=2, price=49980, order_id="A-17")


def test_matching_is_case_insensitive():
    text = "НОВЫЙ ЗАКАЗ №5\nMacBook Air X 1 ШТ.\nобщая стоимость заказа: 120 000 ₽"
    order = parse_order(text)
    assert order is not None
    assert order.product == "MacBook Air"
    assert order.order_id == "5"
    assert order.price == 120000


def test_quantity_defaults_to_one_when_number_missing():
    text = "Новый заказ №8\nЧехол x шт.\nОбщая стоимость заказа: 990 ₽"
    order = parse_order(text)
    assert order is not None
    assert order.quantity == 1
    assert order.product == "Чехол"


def test_cyrillic_and_multiplication_sign_separators():
    assert parse_order("Watch х 3 шт.\nОбщая стоимость заказа: 10 ₽").quantity == 3
    assert parse_order("Watch × 4 шт\nОбщая стоимость заказа: 10 ₽").quantity == 4


def test_price_with_no_break_spaces_and_kopecks():
    text = "iPad x 1 шт.\nОбщая стоимость заказа: 1\u00a0234,50 ₽"
    assert parse_order(text).price == 1234.5


def test_order_id_is_optional():
    order = parse_order("iPhone 15 x 1 шт.\nОбщая стоимость заказа: 80 000 ₽")
    assert order.order_id is None
    assert order.document_suffix == "manual"


def test_only_first_item_is_used():
    text = (
        "Новый заказ №9\n"
        "iPhone 16 x 1 шт.\n"
        "Зарядка x 2 шт.\n"
        "Общая стоимость заказа: 95 000 ₽"
    )
    order = parse_order(text)
    assert order.product == "iPhone 16"
    assert order.quantity == 1


@pytest.mark.parametrize(
    "text",
    [
        "",
        "привет",
        # нет строки с товаром
        "Новый заказ №3\nОбщая стоимость заказа: 100 300 ₽",
        # нет цены
        "Новый заказ №3\niPhone 16 Pro x 1 шт.",
        # нулевая цена
        "iPhone 16 Pro x 1 шт.\nОбщая стоимость заказа: 0 ₽",
        # нулевое количество
        "iPhone 16 Pro x 0 шт.\nОбщая стоимость заказа: 100 ₽",
        # пустое название товара
        "x 1 шт.\nОбщая стоимость заказа: 100 ₽",
    ],
)
def test_returns_none_for_incomplete_text(text):
    assert parse_order(text) is None


@pytest.mark.parametrize("price", ["100.300 ₽", "100,300 ₽", "100 300 ₽", "100300₽"])
def test_dot_and_comma_are_thousands_separators(price):
    order = parse_order(f"iPhone x 1 шт.\nОбщая стоимость заказа: {price}")
    assert order.price == 100300


def test_mixed_separators_with_kopecks():
    order = parse_order("iPhone x 1 шт.\nОбщая стоимость заказа: 1.234.567,89 ₽")
    assert order.price == pytest.approx(1234567.89)


def test_word_ending_in_cyrillic_x_is_not_a_separator():
    text = (
        "Новый заказ №3\n"
        "Остаток на складах 5 шт.\n"
        "iPhone 16 Pro x 1 шт.\n"
        "Общая стоимость заказа: 100 300 ₽"
    )
    assert parse_order(text) == PendingOrder(
        product="iPhone 16 Pro", quantity=1, price=100300, order_id="3"
    )
