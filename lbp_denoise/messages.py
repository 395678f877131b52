import numpy as np

from .errors import InternalConsistencyError
from .model import build_label_space, check_label_space, check_positive, unary_energy, unary_cost_stack, \
    DEFAULT_ENERGY
from .grid import neighbors_excluding

# direction of travel -> (source - destination) offset
# e.g. an 'up' message leaves (r+1, c) and arrives at (r, c)
DIRECTIONS = {
    'up': (1, 0),
    'down': (-1, 0),
    'left': (0, 1),
    'right': (0, -1),
}
_OFFSET_TO_DIR = {v: k for k, v in DIRECTIONS.items()}


class MessageStore:
    """
    All directed min-sum messages of one denoising run.

    One (H, W, L) float64 array per direction of travel, indexed at the
    receiving site, plus an (H, W) mask of which entries were ever sent.
    Unsent messages read as 0.0. The store is never reset between
    iterations; each sweep starts from the previous one's messages.
    """

    def __init__(self, shape, labels=None):
        if labels is None:
            labels = build_label_space()
        self.labels = check_label_space(labels)
        self.index = {int(lab): i for i, lab in enumerate(self.labels)}
        H, W = shape[:2]
        self.shape = (H, W)
        L = len(self.labels)
        self.values = {d: np.zeros((H, W, L), dtype=np.float64) for d in DIRECTIONS}
        self.sent = {d: np.zeros((H, W), dtype=bool) for d in DIRECTIONS}

    def direction(self, src, dst):
        off = (src[0] - dst[0], src[1] - dst[1])
        try:
            return _OFFSET_TO_DIR[off]
        except KeyError:
            raise ValueError(f"{src} and {dst} are not 4-neighbours") from None

    def get(self, src, dst, label):
        d = self.direction(src, dst)
        return float(self.values[d][dst[0], dst[1], self.index[int(label)]])

    def set(self, src, dst, label, value):
        d = self.direction(src, dst)
        self.values[d][dst[0], dst[1], self.index[int(label)]] = value
        self.sent[d][dst[0], dst[1]] = True

    def message(self, src, dst):
        d = self.direction(src, dst)
        return self.values[d][dst[0], dst[1]].copy()

    def has(self, src, dst):
        d = self.direction(src, dst)
        return bool(self.sent[d][dst[0], dst[1]])

    def __len__(self):
        # number of directed edges holding a message
        return int(sum(m.sum() for m in self.sent.values()))

    def sent_values(self):
        """Flat array of every stored message value (all labels)."""
        return np.concatenate([self.values[d][self.sent[d]].ravel() for d in DIRECTIONS])


def combined_cost(image, messages, site, other_site, label, params=DEFAULT_ENERGY):
    """
    h(x) = unary(x, image[site]) + the message other_site last sent back
    into site (nothing if it has not sent one yet).
    """
    cost = check_positive(unary_energy(label, image[site[0], site[1]], params), "unary energy")
    for xk in neighbors_excluding(image, site, other_site):
        if messages.has(xk, site):
            cost += messages.get(xk, site, label)
    return check_positive(cost, f"combined cost at {site}")


def send_message(image, messages, source, destination, labels=None, params=DEFAULT_ENERGY):
    """
    Min-sum update of source->destination.
    For a two-label Potts prior, min_x [h(x) + smoothness*(x != l)]
    reduces to min(min_x h(x) + smoothness, h(l)).
    """
    if labels is None:
        labels = messages.labels
    h = {int(lab): combined_cost(image, messages, source, destination, lab, params) for lab in labels}
    min_energy = check_positive(min(h.values()) + params.smoothness, "interaction energy")
    for lab in labels:
        messages.set(source, destination, lab, min(min_energy, h[int(lab)]))


def _pass_slices(shape, axis, step):
    # (source, destination) index slices of every edge sent along axis by step
    n = shape[axis]
    lo, hi = slice(0, n - 1), slice(1, n)
    src, dst = (lo, hi) if step > 0 else (hi, lo)
    if axis == 1:
        return (slice(None), src), (slice(None), dst)
    return (src, slice(None)), (dst, slice(None))


def send_pass_messages(image, messages, axis, step, params=DEFAULT_ENERGY):
    """
    send_message for every edge (i) -> (i + step) along axis, all at once.
    Each of these messages only reads the reply travelling the opposite way,
    which this pass never writes, so the result equals sending them one by one.
    """
    off = (-step, 0) if axis == 0 else (0, -step)
    d = _OFFSET_TO_DIR[off]
    rev = _OFFSET_TO_DIR[(-off[0], -off[1])]
    src, dst = _pass_slices(image.shape, axis, step)

    psi = unary_cost_stack(image[src], messages.labels, params)  # (.., .., L)
    if not (psi > 0).all():
        raise InternalConsistencyError("unary energy must be > 0")
    reply = np.where(messages.sent[rev][src][..., None], messages.values[rev][src], 0.0)
    h = psi + reply
    if not (h > 0).all():
        raise InternalConsistencyError(f"combined cost must be > 0 in {d!r} pass")
    min_energy = h.min(axis=-1, keepdims=True) + params.smoothness
    if not (min_energy > 0).all():
        raise InternalConsistencyError(f"interaction energy must be > 0 in {d!r} pass")

    messages.values[d][dst] = np.minimum(min_energy, h)
    messages.sent[d][dst] = True
