import os
import sys

import pytest

# Make the package and the fixture factories importable without installation
tests_dir = os.path.dirname(os.path.realpath(__file__))
sys.path.insert(0, os.path.dirname(tests_dir))
sys.path.insert(0, os.path.join(tests_dir, "fixtures"))

from inventory_samples import use_mocks  # noqa: E402

from rzcomponents.graph import ResourceGraph  # noqa: E402


@pytest.fixture
def graph():
    return ResourceGraph()


@pytest.fixture
def mocks():
    return use_mocks()
