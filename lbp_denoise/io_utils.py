from pathlib import Path
import numpy as np
import cv2

from .errors import InvalidInputError, DimensionMismatchError
from .model import check_binary_image


def imread_gray_uint8(path):
    img = cv2.imdecode(np.fromfile(str(path), dtype=np.uint8), cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise FileNotFoundError(path)
    return img.astype(np.uint8)


def load_binary_image(path, thresh=128):
    # pixels <= thresh -> 0, others -> 255
    if not Path(path).is_file():
        raise FileNotFoundError(path)
    img = imread_gray_uint8(path)
    _, binary = cv2.threshold(img, thresh, 255, cv2.THRESH_BINARY)
    return check_binary_image(binary)


def add_salt_and_pepper_noise(img, black_proba, white_proba, seed=None):
    """
    black_proba / white_proba: integer percentages in [0, 100].
    A uniform draw u in [0, 100) per pixel; u < black -> 0, u >= 100 - white -> 255.
    """
    for name, p in (("black_proba", black_proba), ("white_proba", white_proba)):
        if not 0 <= p <= 100:
            raise InvalidInputError(f"{name} must be in [0, 100], got {p}")
    rng = np.random.default_rng(seed)
    u = rng.integers(0, 100, size=img.shape)
    noisy = img.copy()
    noisy[u < black_proba] = 0
    noisy[u >= 100 - white_proba] = 255
    return noisy


def make_comparison(*imgs):
    """Side-by-side composite, images separated by 1px black columns."""
    if not imgs:
        raise InvalidInputError("nothing to compare")
    H, W = imgs[0].shape[:2]
    for im in imgs[1:]:
        if im.shape[:2] != (H, W):
            raise DimensionMismatchError(f"shape mismatch: {im.shape[:2]} vs {(H, W)}")
    n = len(imgs)
    out = np.zeros((H, W * n + n - 1), dtype=np.uint8)
    for i, im in enumerate(imgs):
        x0 = i * (W + 1)
        out[:, x0:x0 + W] = im
    return out


def save_u8_png(path, u8):
    # extension picks the encoder, default png
    ext = Path(path).suffix or ".png"
    cv2.imencode(ext, u8)[1].tofile(str(path))


def show_image(img, window="MRF Window"):
    cv2.namedWindow(window, cv2.WINDOW_AUTOSIZE)
    cv2.imshow(window, img)
    cv2.waitKey(0)
    cv2.destroyWindow(window)
