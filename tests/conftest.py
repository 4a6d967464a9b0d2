"""Pytest configuration and fixtures."""

import pytest

from tronwallet.core.config import get_settings
from tronwallet.infrastructure.blockchain.address import Address

# Well-known eth-account documentation key and its address
PRIVATE_KEY = "4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
KEY_ADDRESS = Address.from_hex("412c7536e3605d9c16a7a3d7b1898e529396a65c23")

# USDT on TRON mainnet
USDT_BASE58 = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
USDT_HEX = "41a614f803b6fd780986a42c78ec9c7f77e6ded13c"


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached process-wide; isolate tests from each other."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(scope="function")
def settings():
    """Create settings instance for testing."""
    from tronwallet.core.config import Settings

    return Settings(environment="testing")


@pytest.fixture
def private_key() -> str:
    return PRIVATE_KEY


@pytest.fixture
def owner() -> Address:
    return KEY_ADDRESS


@pytest.fixture
def recipient() -> Address:
    return Address.from_hex("41" + "22" * 20)


@pytest.fixture
def token_contract() -> Address:
    return Address.from_hex(USDT_HEX)
