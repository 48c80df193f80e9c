import pytest

from xrate.__main__ import parse_bind
from xrate.core.config import Settings


@pytest.mark.parametrize(
    "bind,expected",
    [(":8080", ("0.0.0.0", 8080)), ("127.0.0.1:9000", ("127.0.0.1", 9000))],
)
def test_parse_bind(bind, expected):
    assert parse_bind(bind) == expected


@pytest.mark.parametrize("bind", ["8080", "localhost:", "host:http"])
def test_parse_bind_rejects_garbage(bind):
    with pytest.raises(ValueError):
        parse_bind(bind)


def test_settings_derive_db_path(tmp_path):
    settings = Settings(data_dir=tmp_path / "data", db_filename="rates.db")
    settings.init_post_load()
    assert settings.db_path == tmp_path / "data" / "rates.db"
    assert (tmp_path / "data").is_dir()


def test_settings_reject_unknown_provider(tmp_path):
    settings = Settings(db_path=tmp_path / "x.db", exchange_rate_provider="bogus")
    with pytest.raises(ValueError):
        settings.init_post_load()
