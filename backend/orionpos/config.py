# backend/orionpos/config.py
from __future__ import annotations
import os


def _csv_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name)
    if not raw:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored next to the instance by default
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///orionpos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Receipt header
    POS_STORE_NAME = os.environ.get("POS_STORE_NAME", "ORION PDV")
    POS_STORE_DOCUMENT = os.environ.get("POS_STORE_DOCUMENT", "00.000.000/0001-00")
    POS_STORE_PHONE = os.environ.get("POS_STORE_PHONE", "(11) 1234-5678")
    POS_STORE_ADDRESS = os.environ.get("POS_STORE_ADDRESS", "Av. Paulista, 1000 - Sao Paulo - SP")

    # Accepted payment methods; an empty tuple accepts any non-empty value
    POS_PAYMENT_METHODS = _csv_env(
        "POS_PAYMENT_METHODS",
        (
            "cash",
            "credit_card",
            "debit_card",
            "pix",
            "bank_slip",
            "bank_transfer",
            "check",
            "store_credit",
        ),
    )

    POS_DEFAULT_CLIENT_ID = os.environ.get("POS_DEFAULT_CLIENT_ID", "1")
    POS_MONEY_PLACES = int(os.environ.get("POS_MONEY_PLACES", "2"))
    POS_LOG_LEVEL = os.environ.get("POS_LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    POS_LOG_LEVEL = "DEBUG"
