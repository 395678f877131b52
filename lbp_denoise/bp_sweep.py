import logging
import numbers
from collections import namedtuple

from tqdm import tqdm

from .errors import InvalidInputError
from .model import build_label_space, check_label_space, check_binary_image, check_energy_params, \
    decide_label, DEFAULT_ENERGY
from .messages import MessageStore, send_pass_messages
from .metrics import sum_square_diff, count_flips

logger = logging.getLogger(__name__)

# axis: 1 = along a row, 0 = along a column; step: +1 / -1 along that axis
DirectionalPass = namedtuple("DirectionalPass", ["name", "axis", "step"])

SWEEP_SCHEDULE = (
    DirectionalPass("left_to_right", axis=1, step=1),
    DirectionalPass("right_to_left", axis=1, step=-1),
    DirectionalPass("bottom_to_top", axis=0, step=-1),
    DirectionalPass("top_to_bottom", axis=0, step=1),
)


def directional_pass(image, messages, sweep, params=DEFAULT_ENERGY):
    """
    Send every message of one directional sweep, (i) -> (i + step) along
    sweep.axis. All of them read only replies this pass does not write,
    so they are computed together over the whole grid.
    """
    send_pass_messages(image, messages, sweep.axis, sweep.step, params)


def belief_pass(image, messages, labels=None, params=DEFAULT_ENERGY):
    # row-major, in place (Gauss-Seidel)
    H, W = image.shape
    for r in range(H):
        for c in range(W):
            decide_label(image, messages, (r, c), labels, params)


def bp_denoise(noisy, iterations, labels=None, params=None, progress=False, callback=None,
               should_stop=None):
    """
    Min-sum loopy BP on the 4-neighbour grid of a binary image.
    noisy: (H, W) grid with values in the label alphabet
    iterations: exact number of iterations to run (no convergence exit)
    callback(it, ssd, image): called after every iteration
    should_stop(): polled between whole iterations only
    Returns: denoised (H, W) uint8, the MessageStore, per-iteration SSD history
    """
    if labels is None:
        labels = build_label_space()
    labels = check_label_space(labels)
    params = check_energy_params(DEFAULT_ENERGY if params is None else params)
    X = check_binary_image(noisy, labels).copy()
    if isinstance(iterations, bool) or not isinstance(iterations, numbers.Integral) or iterations < 0:
        raise InvalidInputError(f"iterations must be a non-negative integer, got {iterations}")

    messages = MessageStore(X.shape, labels)
    history = []

    its = range(int(iterations))
    if progress:
        its = tqdm(its, desc="LBP")
    for it in its:
        if should_stop is not None and should_stop():
            logger.info("stop requested before iteration %d", it)
            break
        X_prev = X.copy()

        for sweep in SWEEP_SCHEDULE:
            logger.debug("iteration %d: %s pass", it, sweep.name)
            directional_pass(X, messages, sweep, params)
        belief_pass(X, messages, labels, params)

        ssd = sum_square_diff(X, X_prev)
        history.append(ssd)
        logger.info("iteration %d: sum square diff %.1f (%d pixels flipped)",
                    it, ssd, count_flips(X, X_prev))
        if callback is not None:
            callback(it, ssd, X)

    return X, messages, history


def denoise(noisy, iterations=1, **kwargs):
    X, _, _ = bp_denoise(noisy, iterations, **kwargs)
    return X
