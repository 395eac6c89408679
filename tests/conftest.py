"""
Test configuration and fixtures for Paleta tests.
"""
import numpy as np
import pytest

from paleta.services.observability import reset_metrics


@pytest.fixture(autouse=True)
def clear_metrics():
    """Reset metrics before each test."""
    reset_metrics()


@pytest.fixture
def red_blue_image():
    """4x4 RGBA image: left half pure red, right half pure blue."""
    img = np.zeros((4, 4, 4), dtype=np.uint8)
    img[:, :2] = (255, 0, 0, 255)
    img[:, 2:] = (0, 0, 255, 255)
    return img


@pytest.fixture
def striped_image():
    """30x30 RGBA image with red, green and blue vertical stripes."""
    img = np.zeros((30, 30, 4), dtype=np.uint8)
    img[..., 3] = 255
    img[:, :10, :3] = (255, 0, 0)
    img[:, 10:20, :3] = (0, 255, 0)
    img[:, 20:, :3] = (0, 0, 255)
    return img
