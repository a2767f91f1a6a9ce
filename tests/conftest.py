import cv2
import numpy as np
import pytest


def make_jacket(value=160, height=300, width=300):
    """Uniform jacket surface."""
    return np.full((height, width, 3), value, dtype=np.uint8)


@pytest.fixture
def jacket_factory():
    return make_jacket


@pytest.fixture
def cable_image():
    """Bright cable band (cols 150-249, rows 20-179) on a black 200x400 scene."""
    img = np.zeros((200, 400, 3), dtype=np.uint8)
    cv2.rectangle(img, (150, 20), (249, 179), (200, 200, 200), -1)
    return img


@pytest.fixture
def pinhole_image():
    """Dark round puncture of radius 10 in the middle of the jacket."""
    img = make_jacket(160)
    cv2.circle(img, (150, 150), 10, (20, 20, 20), -1)
    return img


@pytest.fixture
def cut_image():
    """Dark 60x10 slit rotated by 20 degrees."""
    img = make_jacket(160)
    corners = cv2.boxPoints(((150.0, 150.0), (60.0, 10.0), 20.0))
    cv2.fillPoly(img, [np.intp(np.round(corners))], (20, 20, 20))
    return img


@pytest.fixture
def scratch_image():
    """80x80 abrasion exposing bright conductor."""
    img = make_jacket(150)
    cv2.rectangle(img, (110, 110), (189, 189), (255, 255, 255), -1)
    return img


@pytest.fixture
def adjacent_lines_image():
    """Two short parallel dark lines five pixels apart."""
    img = make_jacket(200)
    cv2.line(img, (130, 150), (169, 150), (0, 0, 0), 1)
    cv2.line(img, (130, 155), (169, 155), (0, 0, 0), 1)
    return img


@pytest.fixture
def distant_lines_image():
    """The same two lines, far enough apart to stay separate defects."""
    img = make_jacket(200)
    cv2.line(img, (130, 100), (169, 100), (0, 0, 0), 1)
    cv2.line(img, (130, 200), (169, 200), (0, 0, 0), 1)
    return img


@pytest.fixture
def image_file(tmp_path, pinhole_image):
    path = tmp_path / "pinhole.png"
    cv2.imwrite(str(path), pinhole_image)
    return path
