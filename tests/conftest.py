import pytest

from .frames import BLUE, make_frame


@pytest.fixture
def red_frame():
    return make_frame(square=(40, 40, 20))


@pytest.fixture
def blue_frame():
    return make_frame(square=(40, 40, 20), color=BLUE)
