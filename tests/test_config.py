import pytest

from terra_swaps.config import config_from_env, load_config
from terra_swaps.errors import ConfigError

ENV = {
    "RESULT_FILE_NAME": "swaps.csv",
    "START_HEIGHT": "100",
    "END_HEIGHT": "200",
    "TERRA_URL": "https://lcd.terra.dev/",
    "TERRA_CHAIN_ID": "columbus-4",
    "TERRA_TXS_LOAD_UNIT": "100",
}


def test_required_values_and_defaults():
    config = config_from_env(ENV)

    assert config.result_file_name == "swaps.csv"
    assert (config.start_height, config.end_height) == (100, 200)
    assert config.terra_url == "https://lcd.terra.dev"
    assert config.terra_chain_id == "columbus-4"
    assert config.load_unit == 100
    assert config.delay == 0.01
    assert config.state_file_name is None
    assert config.skip_malformed is False
    assert config.timeout is None
    assert config.show_progress is True
    assert config.check_chain_id is True


def test_optional_values():
    config = config_from_env(
        dict(
            ENV,
            HEIGHT_DELAY_MS="250",
            STATE_FILE_NAME="state.txt",
            SKIP_MALFORMED_TXS="yes",
            LCD_TIMEOUT="30",
            SHOW_PROGRESS="0",
            CHECK_CHAIN_ID="false",
        )
    )

    assert config.delay == 0.25
    assert config.state_file_name == "state.txt"
    assert config.skip_malformed is True
    assert config.timeout == 30.0
    assert config.show_progress is False
    assert config.check_chain_id is False


def test_config_is_immutable():
    config = config_from_env(ENV)
    with pytest.raises(AttributeError):
        config.start_height = 1


@pytest.mark.parametrize("name", sorted(ENV))
def test_missing_required(name):
    env = dict(ENV)
    del env[name]
    with pytest.raises(ConfigError, match=name):
        config_from_env(env)


@pytest.mark.parametrize(
    "overrides, match",
    [
        ({"START_HEIGHT": "abc"}, "START_HEIGHT"),
        ({"START_HEIGHT": "-1"}, "START_HEIGHT"),
        ({"END_HEIGHT": "99"}, "END_HEIGHT"),
        ({"TERRA_TXS_LOAD_UNIT": "0"}, "TERRA_TXS_LOAD_UNIT"),
        ({"SKIP_MALFORMED_TXS": "maybe"}, "SKIP_MALFORMED_TXS"),
        ({"LCD_TIMEOUT": "soon"}, "LCD_TIMEOUT"),
    ],
)
def test_invalid_values(overrides, match):
    with pytest.raises(ConfigError, match=match):
        config_from_env(dict(ENV, **overrides))


def test_load_config_reads_dotenv(tmp_path, monkeypatch):
    # setenv first so teardown also removes what load_dotenv puts in
    for name in ENV:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    dotenv = tmp_path / ".env"
    dotenv.write_text("\n".join(f"{k}={v}" for k, v in ENV.items()))

    config = load_config(str(dotenv))

    assert config.end_height == 200
    assert config.terra_chain_id == "columbus-4"
