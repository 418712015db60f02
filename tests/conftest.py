"""Root test configuration — isolate tests from local config.yaml and POCHE_* env vars"""

import pytest

from poche.config import Settings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run each test in an empty working directory with no POCHE_<FIELD> overrides."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(f"POCHE_{name.upper()}", raising=False)
    yield tmp_path
