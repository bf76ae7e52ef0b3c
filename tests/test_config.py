"""Tests for configuration loading and validation."""

from dataclasses import replace
from pathlib import Path

import pytest
from dotenv import dotenv_values

from src.config import AppConfig, OnboardingConfig, ServerConfig, VapiConfig, _validate_config


class TestConfigValidation:
    def test_default_config_passes_validation(self):
        config = AppConfig()
        _validate_config(config)  # should not raise

    def test_unknown_reconfirm_policy(self):
        config = replace(AppConfig(), onboarding=replace(OnboardingConfig(), reconfirm_policy="maybe"))
        with pytest.raises(ValueError, match="RECONFIRM_POLICY"):
            _validate_config(config)

    def test_non_positive_timeout(self):
        config = replace(
            AppConfig(), onboarding=replace(OnboardingConfig(), collaborator_timeout_sec=0)
        )
        with pytest.raises(ValueError, match="COLLABORATOR_TIMEOUT_SEC"):
            _validate_config(config)

    def test_zero_retries(self):
        config = replace(AppConfig(), onboarding=replace(OnboardingConfig(), store_max_retries=0))
        with pytest.raises(ValueError, match="STORE_MAX_RETRIES"):
            _validate_config(config)

    def test_payment_link_template_needs_placeholder(self):
        config = replace(
            AppConfig(),
            onboarding=replace(OnboardingConfig(), payment_link_template="https://pay.example.com"),
        )
        with pytest.raises(ValueError, match="PAYMENT_LINK_TEMPLATE"):
            _validate_config(config)

    def test_area_code_must_be_three_digits(self):
        config = replace(AppConfig(), onboarding=replace(OnboardingConfig(), phone_area_code="85"))
        with pytest.raises(ValueError, match="PHONE_AREA_CODE"):
            _validate_config(config)

    def test_invalid_temperature(self):
        config = replace(AppConfig(), vapi=replace(VapiConfig(), temperature=3.0))
        with pytest.raises(ValueError, match="VAPI_TEMPERATURE"):
            _validate_config(config)

    def test_invalid_port(self):
        config = replace(AppConfig(), server=replace(ServerConfig(), port=70000))
        with pytest.raises(ValueError, match="PORT"):
            _validate_config(config)

    def test_safe_int_parsing(self):
        from src.config import _safe_int

        assert _safe_int("NONEXISTENT_VAR_12345", "42") == 42

    def test_safe_int_rejects_garbage(self, monkeypatch):
        from src.config import _safe_int

        monkeypatch.setenv("PORT_UNDER_TEST", "abc")
        with pytest.raises(ValueError, match="PORT_UNDER_TEST"):
            _safe_int("PORT_UNDER_TEST", "3000")

    def test_safe_float_parsing(self):
        from src.config import _safe_float

        assert _safe_float("NONEXISTENT_VAR_12345", "3.14") == pytest.approx(3.14)


class TestEnvExample:
    def test_sms_tool_id_left_to_default(self):
        values = dotenv_values(Path(__file__).resolve().parent.parent / ".env.example")
        assert "VAPI_SMS_TOOL_ID" not in values
