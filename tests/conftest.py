import pytest

from obfuscate_ids.keys import reset_key_material


@pytest.fixture(autouse=True)
def fresh_key_material():
    reset_key_material()
    yield
    reset_key_material()
