import os


def get_settings_module() -> str:
    """Settings module for APP_ENV (default: development)."""
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def payroll_rates_from_env() -> dict:
    """Rate overrides; unset variables fall back to the calculator defaults."""
    rates = {}
    for key, var in (("bonus", "PAYROLL_BONUS_RATE"), ("tax", "PAYROLL_TAX_RATE"), ("pension", "PAYROLL_PENSION_RATE")):
        value = os.getenv(var)
        if value:
            rates[key] = value
    return rates
