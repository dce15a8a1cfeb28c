import pytest

from xattrfile.textio import get_global_encoding, set_global_encoding


@pytest.fixture
def restore_encoding():
    encoding = get_global_encoding()
    yield
    set_global_encoding(encoding)
