# 4-neighbour offsets in fixed order: up, right, down, left
DROW = (-1, 0, 1, 0)
DCOL = (0, 1, 0, -1)


def _check_coord(shape, coord):
    H, W = shape[:2]
    r, c = coord
    if not (0 <= r < H and 0 <= c < W):
        raise IndexError(f"coordinate {coord} outside image of shape {(H, W)}")


def neighbors(image, coord):
    """
    In-bounds 4-neighbours of coord, ordered up, right, down, left.
    image: (H, W) grid (only its shape is used)
    """
    _check_coord(image.shape, coord)
    H, W = image.shape[:2]
    r, c = coord
    out = []
    for dr, dc in zip(DROW, DCOL):
        rr, cc = r + dr, c + dc
        if rr < 0 or cc < 0:
            continue
        if rr >= H or cc >= W:
            continue
        out.append((rr, cc))
    return out


def neighbors_excluding(image, coord, excluded):
    """
    In-bounds neighbours of coord that match `excluded`: the destination of
    the message being sent, whose reply is the only incoming message folded
    into the outgoing one. Empty when `excluded` is not a neighbour.
    """
    excluded = tuple(excluded)
    return [xk for xk in neighbors(image, coord) if xk == excluded]
