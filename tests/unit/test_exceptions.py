"""Unit tests for custom exceptions."""

from textshift.core.exceptions import (
    FormatError,
    PipelineError,
    PolishError,
    ProviderConfigurationError,
    ProviderError,
    ProviderResponseError,
    ProviderUnavailableError,
    TextShiftError,
    TranslationError,
)


def test_base_exception():
    """Test base TextShiftError."""
    exc = TextShiftError("Test error", error_code="TEST_ERROR")

    assert exc.detail == "Test error"
    assert exc.error_code == "TEST_ERROR"
    assert exc.timestamp is not None
    assert str(exc) == "Test error"

    exc_dict = exc.to_dict()
    assert exc_dict["error"] == "TEST_ERROR"
    assert exc_dict["detail"] == "Test error"


def test_pipeline_error_carries_stage_and_context():
    exc = TranslationError("boom", source_lang="zh", target_lang="en")

    assert isinstance(exc, PipelineError)
    assert exc.stage == "translation"
    assert exc.error_code == "PIPELINE_TRANSLATION_ERROR"
    assert exc.retryable is True
    assert exc.to_dict()["context"] == {"source_lang": "zh", "target_lang": "en"}


def test_polish_and_format_errors():
    assert PolishError("x").stage == "polish"

    exc = FormatError("bad", node_name="Title")
    assert exc.retryable is False
    assert exc.context == {"node_name": "Title"}


def test_provider_error():
    """Test ProviderError metadata."""
    exc = ProviderError("HTTP 500", provider="Baidu", status_code=500)

    assert exc.provider == "Baidu"
    assert exc.status_code == 500
    assert exc.context == {"provider": "Baidu", "status_code": 500}


def test_provider_response_error():
    exc = ProviderResponseError("missing field", "GoogleBasic")

    assert isinstance(exc, ProviderError)
    assert exc.detail == "Malformed response: missing field"
    assert exc.retryable is False
    assert exc.error_code == "PROVIDER_RESPONSE_ERROR"


def test_provider_configuration_error():
    exc = ProviderConfigurationError("Baidu", ["baiduAppID", "baiduKey"])

    assert exc.missing == ["baiduAppID", "baiduKey"]
    assert "baiduAppID" in exc.detail
    assert "baiduKey" in exc.detail
    assert exc.retryable is False


def test_provider_unavailable_error():
    exc = ProviderUnavailableError("GoogleBasic")

    assert exc.error_code == "PROVIDER_UNAVAILABLE"
    assert "unreachable" in exc.detail
