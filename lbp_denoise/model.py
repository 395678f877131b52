import math
from collections import namedtuple
from enum import IntEnum

import numpy as np

from .errors import InvalidInputError, InternalConsistencyError
from .grid import neighbors


class Label(IntEnum):
    BLACK = 0
    WHITE = 255


def build_label_space():
    # declaration order is the belief tie-break order
    return (Label.BLACK, Label.WHITE)


def check_label_space(labels):
    """
    The closed-form message update only holds for a two-label Potts model,
    so anything other than two distinct uint8 values is rejected.
    """
    labels = tuple(labels)
    if len(labels) != 2:
        raise InvalidInputError(f"expected exactly 2 labels, got {len(labels)}")
    if labels[0] == labels[1]:
        raise InvalidInputError(f"labels must be distinct, got {labels}")
    for lab in labels:
        if not 0 <= int(lab) <= 255:
            raise InvalidInputError(f"label {lab} does not fit in uint8")
    return labels


# costs: lower = more probable (min-sum convention)
EnergyParams = namedtuple("EnergyParams", ["match_cost", "mismatch_cost", "smoothness"],
                          defaults=(3.0, 3.5, 1.0))
DEFAULT_ENERGY = EnergyParams()


def check_positive(value, what):
    # NaN fails this comparison too
    if not value > 0:
        raise InternalConsistencyError(f"{what} must be > 0, got {value}")
    return value


def check_energy_params(params):
    for name, value in zip(params._fields, params):
        check_positive(float(value), f"energy parameter {name!r}")
    return params


def unary_energy(candidate, observed, params=DEFAULT_ENERGY):
    # data term: small bias towards the noisy observation
    return params.match_cost if int(candidate) == int(observed) else params.mismatch_cost


def binary_energy(label_a, label_b, params=DEFAULT_ENERGY):
    # Potts smoothness prior
    return 0.0 if int(label_a) == int(label_b) else params.smoothness


def unary_cost_stack(image, labels=None, params=DEFAULT_ENERGY):
    """
    image: (H, W) binary grid
    returns unary_energy for every site and label, shape (H, W, L)
    """
    if labels is None:
        labels = build_label_space()
    lab = np.asarray([int(l) for l in labels])
    match = image[..., None].astype(np.int64) == lab[None, None, :]
    return np.where(match, float(params.match_cost), float(params.mismatch_cost))


def check_binary_image(img, labels=None):
    """
    img: (H, W) grid whose every value is in the label alphabet.
    Returns it as a uint8 array.
    """
    if labels is None:
        labels = build_label_space()
    if img is None:
        raise InvalidInputError("image is None")
    img = np.asarray(img)
    if img.ndim != 2:
        raise InvalidInputError(f"expected a 2D grid, got shape {img.shape}")
    if img.size == 0:
        raise InvalidInputError(f"image is empty, shape {img.shape}")
    bad = ~np.isin(img, np.asarray([int(l) for l in labels]))
    if bad.any():
        vals = np.unique(img[bad])[:5]
        raise InvalidInputError(f"non-binary pixel values {vals.tolist()} "
                                f"(alphabet {[int(l) for l in labels]})")
    return img.astype(np.uint8)


def decide_label(image, messages, coord, labels=None, params=DEFAULT_ENERGY):
    """
    MAP label at coord: argmin over labels of unary + all incoming messages.
    Ties keep the earlier-declared label. The result is written back into
    image[coord] so sites visited later in the same pass already see it.
    """
    if labels is None:
        labels = build_label_space()
    r, c = coord
    observed = image[r, c]
    nbrs = neighbors(image, coord)

    best_label = None
    best_cost = math.inf
    for lab in labels:
        cost = check_positive(unary_energy(lab, observed, params), "unary energy")
        for xk in nbrs:
            if not messages.has(xk, coord):
                continue  # never sent: contributes nothing
            cost += check_positive(messages.get(xk, coord, lab), f"message {xk}->{coord}")
        if cost < best_cost:
            best_cost = cost
            best_label = lab

    image[r, c] = int(best_label)
    return best_label
