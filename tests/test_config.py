import pytest

from text2deck.config import PipelineSettings
from text2deck.templates import MAX_TEMPLATE_BYTES, format_file_size

ENV_NAMES = (
    "TEXT2DECK_MIN_TEXT_LENGTH",
    "TEXT2DECK_MIN_CREDENTIAL_LENGTH",
    "TEXT2DECK_STAGE_DELAY",
    "TEXT2DECK_MAX_TEMPLATE_BYTES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so teardown removes anything load_dotenv adds
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults():
    settings = PipelineSettings()

    assert settings.min_text_length == 50
    assert settings.min_credential_length == 10
    assert settings.stage_delay == 0.0
    assert settings.max_template_bytes == MAX_TEMPLATE_BYTES


def test_from_env_reads_prefixed_variables(monkeypatch, tmp_path):
    monkeypatch.setenv("TEXT2DECK_MIN_TEXT_LENGTH", "20")
    monkeypatch.setenv("TEXT2DECK_STAGE_DELAY", "0.5")

    settings = PipelineSettings.from_env(str(tmp_path / "missing.env"))

    assert settings.min_text_length == 20
    assert settings.stage_delay == 0.5
    assert settings.min_credential_length == 10


def test_from_env_loads_dotenv_file(tmp_path):
    dotenv = tmp_path / ".env"
    dotenv.write_text("TEXT2DECK_MIN_CREDENTIAL_LENGTH=4\n")

    settings = PipelineSettings.from_env(str(dotenv))

    assert settings.min_credential_length == 4


def test_invalid_values_keep_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("TEXT2DECK_MIN_TEXT_LENGTH", "fifty")
    monkeypatch.setenv("TEXT2DECK_STAGE_DELAY", "-3")

    settings = PipelineSettings.from_env(str(tmp_path / "missing.env"))

    assert settings.min_text_length == 50
    assert settings.stage_delay == 0.0


@pytest.mark.parametrize(
    "size, expected",
    [(0, "0 Bytes"), (512, "512 Bytes"), (1024, "1 KB"), (1536, "1.5 KB"), (MAX_TEMPLATE_BYTES, "50 MB")],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected
