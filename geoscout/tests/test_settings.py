import pytest

from geoscout.app.config import Settings, redact_secrets, safe_error_detail, validate_for_env
from geoscout.app.providers import OpenAIProvider, create_provider


def test_cors_origins_accept_csv_json_and_wildcard():
    assert Settings(CORS_ORIGINS="https://a.test, https://b.test").cors_origins == ["https://a.test", "https://b.test"]
    assert Settings(CORS_ORIGINS='["https://a.test"]').cors_origins == ["https://a.test"]
    assert Settings(CORS_ORIGINS="*").cors_origins == ["*"]
    assert Settings(CORS_ORIGINS="").cors_origins == []


def test_numeric_settings_are_clamped():
    s = Settings(MODEL_TIMEOUT_SECONDS=-5, SESSION_MAX_COUNT=-1)
    assert s.model_timeout_seconds == 0
    assert s.session_max_count == 0


def test_provider_is_normalized():
    assert Settings(MODEL_PROVIDER=" GROQ ").model_provider == "groq"


def test_groq_key_alias(monkeypatch):
    monkeypatch.delenv("MODEL_API_KEY", raising=False)
    monkeypatch.setenv("GROQ_API_KEY", "gsk_fromenvironment1")
    assert Settings().model_api_key == "gsk_fromenvironment1"


def test_env_overrides_defaults(monkeypatch):
    monkeypatch.setenv("MODEL_NAME", "llama-3.1-8b-instant")
    monkeypatch.setenv("MODEL_TEMPERATURE", "0.3")
    s = Settings()
    assert s.model_name == "llama-3.1-8b-instant"
    assert s.model_temperature == pytest.approx(0.3)


def test_remote_configured_requires_key_and_enablement(settings):
    assert settings.remote_configured()
    assert not Settings(MODEL_PROVIDER="groq", MODEL_API_KEY=None).remote_configured()
    assert not Settings(MODEL_PROVIDER="groq", MODEL_API_KEY="k", MODEL_CALLS_ENABLED=0).remote_configured()
    assert not Settings(MODEL_PROVIDER="none", MODEL_API_KEY="k").remote_configured()
    assert not Settings(MODEL_PROVIDER="openai_compat", MODEL_API_KEY="k").remote_configured()


def test_default_base_urls():
    assert Settings(MODEL_PROVIDER="groq").provider_base_url.startswith("https://api.groq.com/")
    assert Settings(MODEL_PROVIDER="openai").provider_base_url.startswith("https://api.openai.com/")
    custom = Settings(MODEL_PROVIDER="openai_compat", MODEL_BASE_URL="http://localhost:8000/v1/chat/completions")
    assert custom.provider_base_url == "http://localhost:8000/v1/chat/completions"


def test_validate_for_env_reports_issues():
    summary = validate_for_env(Settings(MODEL_PROVIDER="openai_compat", MODEL_API_KEY=None))
    assert any("MODEL_BASE_URL" in issue for issue in summary["issues"])
    assert any("MODEL_API_KEY" in issue for issue in summary["issues"])
    assert summary["model_key_present"] is False

    prod = validate_for_env(Settings(APP_ENV="prod", DEBUG_ERRORS=1, MODEL_PROVIDER="none"))
    assert prod["issues"] == ["DEBUG_ERRORS must be 0 in prod"]


def test_public_summary_never_contains_key(settings):
    summary = validate_for_env(settings)
    assert "gsk_testkeyvalue1234" not in repr(summary)
    assert summary["model_key_present"] is True


def test_create_provider(settings, offline_settings):
    provider = create_provider(settings)
    assert isinstance(provider, OpenAIProvider)
    assert provider.name == "groq"
    assert create_provider(offline_settings) is None


def test_create_provider_rejects_unknown():
    with pytest.raises(ValueError):
        create_provider(Settings(MODEL_PROVIDER="bard", MODEL_API_KEY="k", MODEL_BASE_URL="http://x"))


def test_redaction():
    assert "sk-abcdef123456" not in redact_secrets("key sk-abcdef123456 leaked")
    assert redact_secrets("Authorization: Bearer abc.def") == "Authorization: Bearer [redacted]"
    assert redact_secrets("desk_lamp12345678") == "desk_lamp12345678"
    assert len(safe_error_detail(RuntimeError("x" * 500))) == 200
