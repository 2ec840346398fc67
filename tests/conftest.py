import pytest

REAUTH_ENV_KEYS = (
    "REAUTH_API_BASE_URL",
    "REAUTH_TIMEOUT",
    "REAUTH_MAX_RETRIES",
    "REAUTH_REFRESH_PATH",
    "REAUTH_LOGIN_PATH",
    "REAUTH_LOGIN_ROUTE",
    "REAUTH_REDIRECT_STORE_PATH",
    "REAUTH_DEBUG",
)


@pytest.fixture(autouse=True)
def clean_reauth_env(monkeypatch) -> None:
    for key in REAUTH_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def api_env(monkeypatch, tmp_path) -> dict[str, str]:
    values = {
        "REAUTH_API_BASE_URL": "https://api.example.com",
        "REAUTH_REDIRECT_STORE_PATH": str(tmp_path / "redirect.json"),
        "REAUTH_DEBUG": "0",
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    return values
