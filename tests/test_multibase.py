import pytest

from did_io.multiformats import multibase


def test_decode_base58btc():
    assert multibase.decode("zStV1DL6CwTryKyV") == b"hello world"


@pytest.mark.parametrize("value", ["", "mSGVsbG8", "z0OIl"])
def test_decode_invalid(value):
    with pytest.raises(ValueError):
        multibase.decode(value)
