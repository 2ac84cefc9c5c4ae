import pytest
from tests.unit.fakes import FakeUnitOfWork


@pytest.fixture
def mock_uow():
    return FakeUnitOfWork()
