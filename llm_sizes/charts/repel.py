"""Force-directed placement of point labels.

Each label box is pushed away from overlapping label boxes and data points
and pulled back toward the point it names. A seeded generator supplies the
starting jitter and breaks ties between coincident labels, so the same
points, sizes, bounds and seed always give the same layout. The layout is
computed in canvas pixels: rendering at another canvas size moves labels.
"""

from typing import NamedTuple
import logging

import numpy as np

logger = logging.getLogger(__name__)

EPS = 1e-9


class RepelResult(NamedTuple):
    """Label centers in pixels and whether each label is drawn."""

    positions: np.ndarray
    visible: np.ndarray


def estimate_label_size(text: str, font_size: float, padding: float = 2.0) -> tuple[float, float]:
    """Approximate pixel width and height of a boxed single-line label."""
    return 0.6 * font_size * len(text) + 2 * padding, 1.3 * font_size + 2 * padding


def _overlap_depth(
    centers_a: np.ndarray, half_a: np.ndarray, centers_b: np.ndarray, half_b: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """Pairwise center offsets and penetration depth of axis-aligned boxes."""
    diff = centers_a[:, None, :] - centers_b[None, :, :]
    overlap = half_a[:, None, :] + half_b[None, :, :] - np.abs(diff)
    depth = np.where((overlap > 0).all(axis=-1), overlap.min(axis=-1), 0.0)
    return diff, depth


def _directions(diff: np.ndarray, rng: np.random.Generator) -> np.ndarray:
    norm = np.linalg.norm(diff, axis=-1, keepdims=True)
    ties = norm[..., 0] < EPS
    if ties.any():
        jitter = rng.normal(size=diff.shape)
        diff = np.where(ties[..., None], jitter, diff)
        norm = np.linalg.norm(diff, axis=-1, keepdims=True)
    return diff / np.maximum(norm, EPS)


def repel_labels(
    points: np.ndarray,
    sizes: np.ndarray,
    bounds: tuple[float, float, float, float],
    *,
    seed: int,
    force: float = 1.0,
    force_pull: float = 1.0,
    max_overlaps: int = 10,
    box_padding: float = 2.0,
    point_padding: float = 3.0,
    max_iter: int = 2000,
    tol: float = 0.01,
) -> RepelResult:
    """Place one label near each point without overlaps.

    Args:
        points: (n, 2) anchor coordinates in pixels
        sizes: (n, 2) label widths and heights in pixels
        bounds: x0, y0, x1, y1 box labels must stay inside
        seed: Seed for the starting jitter and tie breaking
        force: Strength of repulsion between overlapping boxes
        force_pull: Strength of the spring back to the anchor
        max_overlaps: Labels overlapping more boxes or points than this are hidden
        box_padding: Extra pixels around each label box
        point_padding: Half-size of the box kept clear around each point
        max_iter: Iteration cap
        tol: Stop once no label moves further than this in one step

    Returns:
        RepelResult with (n, 2) label centers and an (n,) visibility mask
    """
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    sizes = np.asarray(sizes, dtype=float).reshape(-1, 2)
    n = len(points)
    if n == 0:
        return RepelResult(np.empty((0, 2)), np.empty(0, dtype=bool))

    rng = np.random.default_rng(seed)
    half = sizes / 2 + box_padding
    point_half = np.full_like(points, point_padding)
    lo = np.array(bounds[:2], dtype=float)
    hi = np.array(bounds[2:], dtype=float)
    not_self = ~np.eye(n, dtype=bool)

    def clamp(pos: np.ndarray) -> np.ndarray:
        low = lo + half
        high = np.maximum(hi - half, low)
        return np.clip(pos, low, high)

    pos = clamp(points + rng.normal(scale=0.5, size=(n, 2)) * half)

    k_repel = 0.02 * force
    k_pull = 0.01 * force_pull
    max_step = 0.5 * half.min(axis=1, keepdims=True)

    iteration = 0
    for iteration in range(max_iter):
        cooling = 1.0 - iteration / max_iter

        diff, depth = _overlap_depth(pos, half, pos, half)
        depth = depth * not_self
        push = (_directions(diff, rng) * depth[..., None]).sum(axis=1)

        pdiff, pdepth = _overlap_depth(pos, half, points, point_half)
        push += (_directions(pdiff, rng) * pdepth[..., None]).sum(axis=1)

        step = k_repel * push - k_pull * (pos - points)
        step = np.clip(step * cooling, -max_step, max_step)

        new_pos = clamp(pos + step)
        moved = np.abs(new_pos - pos).max()
        pos = new_pos
        if moved < tol:
            break

    logger.debug(f"Label layout settled after {iteration + 1} iterations")

    _, depth = _overlap_depth(pos, half, pos, half)
    label_hits = ((depth > 0) & not_self).sum(axis=1)
    _, pdepth = _overlap_depth(pos, half, points, point_half)
    point_hits = ((pdepth > 0) & not_self).sum(axis=1)

    visible = (label_hits + point_hits) <= max_overlaps
    return RepelResult(pos, visible)
