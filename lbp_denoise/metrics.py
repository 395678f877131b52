import numpy as np
from skimage.metrics import peak_signal_noise_ratio, structural_similarity

from .errors import DimensionMismatchError


def _check_same_shape(a, b):
    if a.shape != b.shape:
        raise DimensionMismatchError(f"shape mismatch: {a.shape} vs {b.shape}")


def sum_square_diff(a, b):
    """Sum of squared pixel differences, labels treated as numbers."""
    a = np.asarray(a)
    b = np.asarray(b)
    _check_same_shape(a, b)
    d = a.astype(np.float64) - b.astype(np.float64)
    return float(np.sum(d * d))


def count_flips(a, b):
    a = np.asarray(a)
    b = np.asarray(b)
    _check_same_shape(a, b)
    return int(np.count_nonzero(a != b))


def psnr_u8(pred_u8, gt_u8):
    return float(peak_signal_noise_ratio(gt_u8, pred_u8, data_range=255))


def ssim_u8(pred_u8, gt_u8):
    return float(structural_similarity(gt_u8, pred_u8, data_range=255))
