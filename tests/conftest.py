import pytest
from hypothesis import HealthCheck, settings

from cash import reset_defaults


# fresh_defaults is function-scoped and autouse; it is idempotent, so sharing
# it across the examples of one @given test is harmless.
settings.register_profile("cash", suppress_health_check=[HealthCheck.function_scoped_fixture])
settings.load_profile("cash")


@pytest.fixture(autouse=True)
def fresh_defaults():
    """Every test starts and ends with the built-in defaults."""
    reset_defaults()
    yield
    reset_defaults()
