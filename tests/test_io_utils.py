import numpy as np
import cv2
import pytest

from lbp_denoise.errors import InvalidInputError, DimensionMismatchError
from lbp_denoise.io_utils import load_binary_image, add_salt_and_pepper_noise, make_comparison, \
    save_u8_png, imread_gray_uint8


def test_load_binary_image_thresholds_at_128(tmp_path):
    gray = np.array([[0, 128, 129], [200, 255, 10]], dtype=np.uint8)
    path = tmp_path / "gray.png"
    cv2.imwrite(str(path), gray)
    out = load_binary_image(path)
    assert out.tolist() == [[0, 0, 255], [255, 255, 0]]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_binary_image(tmp_path / "nope.png")


def test_save_and_reload(tmp_path):
    img = np.array([[0, 255], [255, 0]], dtype=np.uint8)
    path = tmp_path / "out.png"
    save_u8_png(str(path), img)
    np.testing.assert_array_equal(imread_gray_uint8(path), img)


def test_noise_extremes():
    img = np.full((8, 8), 255, dtype=np.uint8)
    np.testing.assert_array_equal(add_salt_and_pepper_noise(img, 0, 0, seed=0), img)
    assert (add_salt_and_pepper_noise(img, 100, 0, seed=0) == 0).all()
    black = np.zeros_like(img)
    assert (add_salt_and_pepper_noise(black, 0, 100, seed=0) == 255).all()


def test_noise_stays_binary_and_is_seeded():
    img = np.full((32, 32), 255, dtype=np.uint8)
    a = add_salt_and_pepper_noise(img, 10, 10, seed=3)
    b = add_salt_and_pepper_noise(img, 10, 10, seed=3)
    np.testing.assert_array_equal(a, b)
    assert set(np.unique(a)) <= {0, 255}
    assert (a == 0).any()
    assert img.min() == 255  # input untouched


@pytest.mark.parametrize("black,white", [(-1, 0), (0, 101)])
def test_noise_probabilities_validated(black, white):
    with pytest.raises(InvalidInputError):
        add_salt_and_pepper_noise(np.zeros((2, 2), dtype=np.uint8), black, white)


def test_make_comparison_layout():
    a = np.full((2, 3), 255, dtype=np.uint8)
    out = make_comparison(a, a, a)
    assert out.shape == (2, 3 * 3 + 2)
    assert (out[:, 3] == 0).all() and (out[:, 7] == 0).all()
    assert (out[:, :3] == 255).all() and (out[:, 8:] == 255).all()


def test_make_comparison_mismatch():
    with pytest.raises(DimensionMismatchError):
        make_comparison(np.zeros((2, 2), dtype=np.uint8), np.zeros((2, 3), dtype=np.uint8))
