"""Settings tests."""

import pytest
from pydantic import ValidationError

from clinica.core.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.env == "dev"
    assert settings.is_dev is True
    assert settings.is_test is False
    assert settings.clinic_hours_file is None
    assert settings.session_duration_minutes == 30
    assert settings.slot_interval_minutes == 30


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENV", "prod")
    monkeypatch.setenv("SESSION_DURATION_MINUTES", "50")
    monkeypatch.setenv("CLINIC_HOURS_FILE", "/etc/clinica/hours.yaml")

    settings = Settings(_env_file=None)

    assert settings.is_prod is True
    assert settings.session_duration_minutes == 50
    assert settings.clinic_hours_file == "/etc/clinica/hours.yaml"


@pytest.mark.parametrize("field", ["session_duration_minutes", "slot_interval_minutes"])
def test_non_positive_minutes_rejected(field: str) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: 0})


def test_unknown_env_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, env="qa")


def test_test_environment() -> None:
    settings = Settings(_env_file=None, env="test")

    assert settings.is_test is True
    assert settings.is_dev is False
