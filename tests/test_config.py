import json

import pytest

from openfare.config import Config, bool_from_string
from openfare.lock.price import Currency


def test_bool_from_string_accepts_true_and_false():
    assert bool_from_string("true") is True
    assert bool_from_string("false") is False


@pytest.mark.parametrize("value", ["True", "1", "", "yes"])
def test_bool_from_string_rejects_other_values(value):
    with pytest.raises(ValueError, match="Expected value"):
        bool_from_string(value)


def test_default_preferred_currency():
    assert Config().get("core.preferred-currency") == "USD"


def test_set_preferred_currency_ignores_case():
    config = Config()
    config.set("core.preferred-currency", "btc")
    assert config.core.preferred_currency is Currency.BTC
    assert config.get("core.preferred-currency") == "BTC"


def test_set_unknown_currency_fails():
    with pytest.raises(ValueError, match="Unknown currency"):
        Config().set("core.preferred-currency", "eur")


def test_unknown_core_field():
    with pytest.raises(ValueError, match="Unknown setting field name"):
        Config().set("core.colour", "USD")
    with pytest.raises(ValueError, match="Unknown setting field name"):
        Config().get("core.colour")


def test_unknown_section():
    with pytest.raises(ValueError, match="Unknown settings field"):
        Config().set("other.thing", "1")
    with pytest.raises(ValueError, match="Unknown settings field"):
        Config().get("other.thing")


def test_set_and_get_extension_flag():
    config = Config()
    config.extensions.enabled["py"] = True
    config.set("extensions.enabled.py", "false")
    assert config.extensions.enabled["py"] is False
    assert config.get("extensions.enabled.py") == "false"
    config.set("extensions.enabled.py", "true")
    assert config.get("extensions.enabled.py") == "true"


def test_set_unknown_extension_fails():
    with pytest.raises(ValueError, match="Unknown setting field name"):
        Config().set("extensions.enabled.py", "true")


def test_invalid_bool_is_reported_before_unknown_extension():
    with pytest.raises(ValueError, match="Expected value"):
        Config().set("extensions.enabled.py", "maybe")


def test_get_unknown_extension_fails():
    with pytest.raises(ValueError, match="Unknown setting field name"):
        Config().get("extensions.enabled.js")


def test_developers_count_unset_is_empty():
    assert Config().get("metrics.developers-count") == ""


def test_set_and_get_developers_count():
    config = Config()
    config.set("metrics.developers-count", "12")
    assert config.metrics.developers_count == 12
    assert config.get("metrics.developers-count") == "12"


@pytest.mark.parametrize("value", ["abc", "-1", "", "1.5", " 3"])
def test_invalid_developers_count(value):
    with pytest.raises(ValueError):
        Config().set("metrics.developers-count", value)


def test_unknown_metrics_field():
    with pytest.raises(ValueError, match="Unknown setting field name"):
        Config().set("metrics.stars", "3")


def test_dict_round_trip():
    config = Config()
    config.set("core.preferred-currency", "BTC")
    config.set("metrics.developers-count", "7")
    config.extensions.enabled["py"] = True
    config.extensions.registries["pypi.org"] = "py"
    assert Config.from_dict(config.to_dict()) == config


def test_str_is_compact_json():
    assert str(Config()) == (
        '{"core":{"preferred-currency":"USD"},'
        '"metrics":{"developers-count":null},'
        '"extensions":{"enabled":{},"registries":{}}}'
    )


def test_from_dict_requires_sections():
    data = Config().to_dict()
    del data["extensions"]
    with pytest.raises(ValueError, match="extensions"):
        Config.from_dict(data)


def test_from_dict_missing_developers_count_is_none():
    data = Config().to_dict()
    data["metrics"] = {}
    assert Config.from_dict(data).metrics.developers_count is None


def test_load_missing_file_writes_default(tmp_path):
    path = tmp_path / "config.json"
    config = Config.load(path)
    assert config == Config()
    assert json.loads(path.read_text(encoding="utf-8")) == Config().to_dict()


def test_dump_and_load_round_trip(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("not json", encoding="utf-8")
    config = Config()
    config.set("metrics.developers-count", "99")
    config.dump(path)
    assert Config.load(path) == config


def test_dump_to_missing_directory_fails(tmp_path):
    with pytest.raises(OSError, match="Can't open/create file for writing"):
        Config().dump(tmp_path / "missing" / "config.json")