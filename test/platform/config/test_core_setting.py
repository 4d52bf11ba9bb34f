from pathlib import Path

import pytest

from src.platform.config.core_setting import Settings


ENV_EXAMPLE = Path(__file__).resolve().parents[3] / '.env.example'


@pytest.fixture(autouse=True)
def _no_cors_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv('BACKEND_CORS_ORIGINS', raising=False)


@pytest.mark.unit
class TestSettings:
    def test_env_example_loads(self) -> None:
        loaded = Settings(_env_file=ENV_EXAMPLE)  # type: ignore[call-arg]

        assert loaded.BACKEND_CORS_ORIGINS == ['http://localhost:3000']
        assert loaded.PROJECT_NAME == 'Mailer Booking'
        assert loaded.OTEL_CONSOLE_EXPORT is False

    def test_cors_origins_accept_a_comma_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(
            'BACKEND_CORS_ORIGINS', 'http://localhost:3000, https://book.example.com,'
        )

        loaded = Settings(_env_file=None)  # type: ignore[call-arg]

        assert loaded.BACKEND_CORS_ORIGINS == [
            'http://localhost:3000',
            'https://book.example.com',
        ]

    def test_cors_origins_accept_a_json_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('BACKEND_CORS_ORIGINS', '["https://book.example.com"]')

        loaded = Settings(_env_file=None)  # type: ignore[call-arg]

        assert loaded.BACKEND_CORS_ORIGINS == ['https://book.example.com']
