import json

import pytest

from openfare.lock.price import Currency, Price, parse_currency, parse_price


def test_price_correctly_parsed_from_json():
    document = json.loads('{"price": "50 USD"}')
    assert parse_price(document["price"]) == Price(quantity=50, currency=Currency.USD)


def test_parse_btc_price():
    assert parse_price("7 BTC") == Price(7, Currency.BTC)


@pytest.mark.parametrize("text", ["50 usd", "USD", "fifty USD", ""])
def test_unparsable_price_raises(text):
    with pytest.raises(ValueError, match="No regex captures found"):
        parse_price(text)


def test_unknown_currency_in_price_raises():
    with pytest.raises(ValueError, match="Failed to parse currency"):
        parse_price("50 EUR")


def test_quantity_out_of_range_raises():
    with pytest.raises(ValueError, match="Failed to parse quantity"):
        parse_price(f"{2**64} USD")


def test_price_string_round_trip():
    price = Price(50, Currency.BTC)
    assert parse_price(str(price)) == price


@pytest.mark.parametrize(
    ("value", "expected"),
    [("usd", Currency.USD), ("USD", Currency.USD), ("Btc", Currency.BTC)],
)
def test_parse_currency_ignores_case(value, expected):
    assert parse_currency(value) is expected


def test_parse_unknown_currency_raises():
    with pytest.raises(ValueError, match="Unknown currency: EUR"):
        parse_currency("eur")


def test_currency_string_round_trip():
    for currency in Currency:
        assert parse_currency(str(currency)) is currency