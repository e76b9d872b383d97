"""
Geometry helpers for OCR post-processing.
Pure functions for bbox calculations and grouping detected words into lines.
"""

from typing import List, Sequence

Rect = List[int]


def is_bbox_valid(bbox: Sequence[int]) -> bool:
    """
    Check if a bounding box is valid (x2 > x1 and y2 > y1).
    """
    return len(bbox) == 4 and bbox[2] > bbox[0] and bbox[3] > bbox[1]


def union_boxes(boxes: Sequence[Sequence[int]]) -> Rect:
    """Return the smallest box containing every box in ``boxes``."""
    return [
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    ]


def clip_bbox(bbox: Sequence[int], width: int, height: int) -> Rect:
    """Clamp a box to the ``width`` x ``height`` image area."""
    return [
        max(0, min(bbox[0], width)),
        max(0, min(bbox[1], height)),
        max(0, min(bbox[2], width)),
        max(0, min(bbox[3], height)),
    ]


def vertical_overlap_ratio(b1: Sequence[int], b2: Sequence[int]) -> float:
    overlap = min(b1[3], b2[3]) - max(b1[1], b2[1])
    if overlap <= 0:
        return 0.0
    min_height = min(b1[3] - b1[1], b2[3] - b2[1])
    if min_height <= 0:
        return 0.0
    return overlap / min_height


def horizontal_gap(b1: Sequence[int], b2: Sequence[int]) -> int:
    if b1[2] >= b2[0] and b2[2] >= b1[0]:
        return 0
    return min(abs(b2[0] - b1[2]), abs(b1[0] - b2[2]))


def group_words_into_lines(
    boxes: Sequence[Sequence[int]],
    *,
    y_overlap_ratio: float = 0.5,
    x_gap_ratio: float = 2.0,
) -> List[List[int]]:
    """
    Group word boxes into reading-order lines.

    A word joins the first line holding a word it overlaps vertically by at
    least ``y_overlap_ratio`` (of the smaller height) with a horizontal gap
    below ``x_gap_ratio`` times the taller of the two. Boxes are visited
    top-to-bottom, left-to-right, so the result only depends on the input
    boxes and the two parameters.

    Returns lists of indices into ``boxes``: lines top-to-bottom, words
    left-to-right. Invalid boxes are left out.
    """
    order = sorted(
        (i for i, b in enumerate(boxes) if is_bbox_valid(b)),
        key=lambda i: (boxes[i][1], boxes[i][0], i),
    )

    def _adjacent(a: Sequence[int], b: Sequence[int]) -> bool:
        if vertical_overlap_ratio(a, b) < y_overlap_ratio:
            return False
        height = max(a[3] - a[1], b[3] - b[1])
        return horizontal_gap(a, b) < x_gap_ratio * height

    lines: List[List[int]] = []
    for idx in order:
        box = boxes[idx]
        target = next(
            (line for line in lines if any(_adjacent(boxes[i], box) for i in line)),
            None,
        )
        if target is None:
            lines.append([idx])
        else:
            target.append(idx)

    for line in lines:
        line.sort(key=lambda i: (boxes[i][0], boxes[i][1], i))
    lines.sort(key=lambda line: (min(boxes[i][1] for i in line), boxes[line[0]][0]))
    return lines
