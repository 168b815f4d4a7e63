import pytest
from jsforms.macros import DEFAULT_REGISTRY


@pytest.fixture(autouse=True)
def _reset_registry():  # pyright: ignore[reportUnusedFunction]
	"""Each test starts and ends with an empty default registry."""
	DEFAULT_REGISTRY.clear()
	yield
	DEFAULT_REGISTRY.clear()
