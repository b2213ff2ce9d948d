import os

import pytest

from bidcalc.utils.logger import BidcalcLogger


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Hide BIDCALC_* variables from the host and reset logging afterwards."""
    for key in list(os.environ):
        if key.startswith("BIDCALC_"):
            monkeypatch.delenv(key)
    yield
    BidcalcLogger.reset()
