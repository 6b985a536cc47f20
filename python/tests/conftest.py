import pytest

from fakes import FakeSocket


@pytest.fixture
def fake_socket():
    return FakeSocket
