import os

import pytest


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    # settings are read from the process environment, keep the host's values out
    for name in list(os.environ):
        if name.startswith("STOREKIT_RECEIPTS_"):
            monkeypatch.delenv(name)
