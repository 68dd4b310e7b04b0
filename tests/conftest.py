import pytest

from timeseal.clock import FrozenClock
from timeseal.codec import AEADCodec, HMACCodec

KEY = "ayellowsubmarine"
START = 1_700_000_000


@pytest.fixture
def clock():
    return FrozenClock(START)


@pytest.fixture(params=[AEADCodec, HMACCodec], ids=["aes-gcm", "hmac-sha256"])
def codec(request, clock):
    return request.param(KEY, clock=clock)
