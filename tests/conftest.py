import numpy as np
import pytest


def make_vertical_edge(height=64, width=64, edge_x=36, low=0, high=255):
    """Dark left part, bright right part starting at column edge_x"""
    image = np.full((height, width), low, dtype=np.uint8)
    image[:, edge_x:] = high
    return image


@pytest.fixture
def edge_image():
    return make_vertical_edge()


@pytest.fixture
def flat_image():
    return np.full((64, 64), 128, dtype=np.uint8)


@pytest.fixture
def random_image():
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(96, 80), dtype=np.uint8)
