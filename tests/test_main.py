import pytest

from auction_telegram_alerts import main as main_module
from auction_telegram_alerts.config import load_settings
from auction_telegram_alerts.errors import StartupError, SubscriptionError, TransportError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("auction_telegram_alerts.config.load_dotenv", lambda: False)
    for name in (
        "NODE_ADDRESS",
        "TELEGRAM_BOT_ID",
        "TELEGRAM_CHAT_ID",
        "LOG_LEVEL",
        "NOTIFY_TIMEOUT_SECONDS",
        "HEALTH_LOG_INTERVAL_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_settings_defaults() -> None:
    settings = load_settings(["subscribe-auctions"])

    assert settings.node_address == "http://localhost:26657"
    assert settings.target.bot_id == ""
    assert settings.target.chat_id == ""
    assert settings.target.is_configured is False
    assert settings.notify_timeout_seconds == 10.0
    assert settings.log_level == "INFO"


def test_load_settings_flags() -> None:
    settings = load_settings(
        [
            "subscribe-auctions",
            "--node",
            "http://kava-node:26657",
            "--bot-id",
            "123:abc",
            "--chat-id",
            "-100200",
            "--log-level",
            "debug",
        ]
    )

    assert settings.node_address == "http://kava-node:26657"
    assert settings.target.bot_id == "123:abc"
    assert settings.target.chat_id == "-100200"
    assert settings.target.is_configured is True
    assert settings.log_level == "DEBUG"


def test_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_ID", "env-bot")
    monkeypatch.setenv("TELEGRAM_CHAT_ID", "env-chat")
    monkeypatch.setenv("NOTIFY_TIMEOUT_SECONDS", "2.5")

    settings = load_settings(["subscribe-auctions", "--chat-id", "flag-chat"])

    assert settings.target.bot_id == "env-bot"
    assert settings.target.chat_id == "flag-chat"
    assert settings.notify_timeout_seconds == 2.5


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["subscribe-auctions", "extra"],
        ["subscribe-auctions", "--unknown"],
        ["subscribe-auctions", "--notify-timeout", "0"],
        ["subscribe-auctions", "--health-interval", "soon"],
        ["other-command"],
    ],
)
def test_invalid_arguments_exit_nonzero(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        load_settings(argv)
    assert excinfo.value.code != 0


@pytest.mark.parametrize(
    "error",
    [
        StartupError("can't connect to node"),
        SubscriptionError("can't subscribe to node"),
        TransportError("connection to node lost"),
    ],
)
def test_main_exits_nonzero_on_fatal_errors(monkeypatch: pytest.MonkeyPatch, error: Exception) -> None:
    async def fail(settings) -> None:
        raise error

    monkeypatch.setattr(main_module, "_main", fail)
    assert main_module.main(["subscribe-auctions"]) == 1


def test_main_exits_zero_on_interrupt(monkeypatch: pytest.MonkeyPatch) -> None:
    async def interrupted(settings) -> None:
        raise KeyboardInterrupt

    monkeypatch.setattr(main_module, "_main", interrupted)
    assert main_module.main(["subscribe-auctions"]) == 0
