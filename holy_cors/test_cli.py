import pytest

from holy_cors import cli
from holy_cors.config import Configuration


def test_defaults(monkeypatch):
    monkeypatch.setattr(cli.env, "HOLY_CORS_ORIGINS", [])

    config = cli.parse_config([])

    assert config == Configuration(
        bind=cli.env.HOLY_CORS_BIND,
        port=cli.env.HOLY_CORS_PORT,
        allow_origins=(),
        allow_all=cli.env.HOLY_CORS_ALLOW_ALL,
        verbose=cli.env.HOLY_CORS_VERBOSE,
        timeout=cli.env.PROXY_TIMEOUT,
    )


def test_all_options():
    config = cli.parse_config(
        [
            "-p",
            "9000",
            "--bind",
            "127.0.0.1",
            "--allow-all-origins",
            "-v",
            "--timeout",
            "3",
        ]
    )

    assert config.port == 9000
    assert config.bind == "127.0.0.1"
    assert config.allow_all is True
    assert config.verbose is True
    assert config.timeout == 3.0


def test_repeated_and_comma_separated_origins():
    config = cli.parse_config(
        [
            "--allow-origin",
            "http://localhost:3000",
            "--allow-origin",
            "https://a.test,https://b.test",
        ]
    )

    assert config.allow_origins == (
        "http://localhost:3000",
        "https://a.test",
        "https://b.test",
    )


def test_environment_origins_used_without_flag(monkeypatch):
    monkeypatch.setattr(cli.env, "HOLY_CORS_ORIGINS", ["https://env.test"])

    config = cli.parse_config([])

    assert config.allow_origins == ("https://env.test",)
    assert config.is_origin_allowed("https://env.test")


def test_invalid_port_exits():
    with pytest.raises(SystemExit):
        cli.parse_config(["--port", "not-a-number"])


def test_log_startup_lists_origins(caplog):
    config = Configuration(allow_origins=("http://localhost:3000",), port=2345)

    with caplog.at_level("INFO", logger="uvicorn.error"):
        cli.log_startup(config)

    assert "Listening on http://0.0.0.0:2345" in caplog.text
    assert "  - http://localhost:3000" in caplog.text
    assert "  - https://bugdays.com" in caplog.text
    assert "http://localhost:2345/https://api.github.com/users/octocat" in caplog.text


def test_log_startup_allow_all(caplog):
    with caplog.at_level("INFO", logger="uvicorn.error"):
        cli.log_startup(Configuration(allow_all=True))

    assert "Allow ALL origins" in caplog.text
    assert "https://bugdays.com" not in caplog.text
