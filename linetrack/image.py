"""Camera frame processing: compression, thresholding and track edge search."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from itertools import takewhile

DEAL_HEIGHT = 120
DEAL_WIDTH = 188
DARK_LEVEL = 50
WHITE = 1
BLACK = 0

_SEARCH_MARGIN = 20
_PROBE_WIDTH = 10
_PROBE_ROWS = 3

Image = Sequence[Sequence[int]]


def _shape(image: Image) -> tuple[int, int]:
    height = len(image)
    if height == 0:
        raise ValueError("image is empty")
    width = len(image[0])
    if width == 0 or any(len(row) != width for row in image):
        raise ValueError("image rows must be non-empty and of equal length")
    return height, width


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def is_out_of_bounds(image: Image) -> bool:
    """Return True when the bottom-centre patch of the frame is dark."""
    height, width = _shape(image)
    if height < _PROBE_ROWS or width < _PROBE_WIDTH:
        raise ValueError("image too small for the bounds probe")
    left = width // 2 - _PROBE_WIDTH // 2
    total = sum(
        value
        for row in image[-_PROBE_ROWS:]
        for value in row[left:left + _PROBE_WIDTH]
    )
    return total // (_PROBE_WIDTH * _PROBE_ROWS) < DARK_LEVEL


def compress(
    image: Image, out_height: int = DEAL_HEIGHT, out_width: int = DEAL_WIDTH
) -> list[list[int]]:
    """Resample the image to the given size by nearest-neighbour picking."""
    in_height, in_width = _shape(image)
    if out_height <= 0 or out_width <= 0:
        raise ValueError("output size must be positive")
    height_ratio = in_height / out_height
    width_ratio = in_width / out_width
    columns = [min(int(x * width_ratio), in_width - 1) for x in range(out_width)]
    rows = (image[min(int(y * height_ratio), in_height - 1)] for y in range(out_height))
    return [[row[c] for c in columns] for row in rows]


def otsu_threshold(image: Image) -> int:
    """Otsu threshold computed over every second row and column."""
    _shape(image)
    samples = [value for row in image[::2] for value in row[::2]]
    if any(not 0 <= value <= 255 for value in samples):
        raise ValueError("pixel values must lie in 0..255")
    histogram = Counter(samples)
    total_count = len(samples)
    total_sum = sum(samples)

    weight0 = 0
    sum0 = 0
    best_variance = 0.0
    threshold = 0
    for level in range(256):
        weight0 += histogram[level]
        sum0 += level * histogram[level]
        weight1 = total_count - weight0
        sum1 = total_sum - sum0
        if weight0 == 0 or weight1 == 0:
            continue
        diff = sum0 / weight0 - sum1 / weight1
        variance = weight0 * weight1 * (diff * diff)
        if variance > best_variance:
            best_variance = variance
            threshold = level
    return threshold


def binarize(image: Image) -> list[list[int]]:
    """Return a 0/1 image: 1 (white) above the Otsu threshold, 0 otherwise."""
    threshold = otsu_threshold(image)
    return [[WHITE if value > threshold else BLACK for value in row] for row in image]


def draw_black_border(image: list[list[int]]) -> None:
    """Blacken the two outer columns on each side and the two top rows, in place."""
    height, width = _shape(image)
    if height < 2 or width < 2:
        raise ValueError("image too small for a border")
    for row in image:
        row[0] = row[1] = row[-1] = row[-2] = BLACK
    for row in image[:2]:
        row[:] = [BLACK] * width


def _max_step(line: Sequence[int], index: int, step: int) -> int:
    """Largest jump between four consecutive entries walking from index by step."""
    return max(
        abs(line[index + k * step] - line[index + (k + 1) * step]) for k in range(3)
    )


class TrackScanner:
    """Finds track edges in a binary frame with the double longest-white-column method."""

    def __init__(
        self,
        height: int = DEAL_HEIGHT,
        width: int = DEAL_WIDTH,
        weights: Sequence[int] | None = None,
    ) -> None:
        if height < 8:
            raise ValueError("height too small")
        if width <= 2 * _SEARCH_MARGIN:
            raise ValueError("width too small for the column search")
        if weights is None:
            weights = [0] * height
        if len(weights) != height:
            raise ValueError("one weight per row is required")
        self.height = height
        self.width = width
        self.weights = list(weights)
        self.white_count = [0] * width
        self.search_stop_line = 0
        self.longest_white_left = (0, 0)
        self.longest_white_right = (0, 0)
        self.left_lost = [False] * height
        self.right_lost = [False] * height
        self.left_lost_count = 0
        self.right_lost_count = 0
        self.both_lost_count = 0
        self.left_down_point = 0
        self.right_down_point = 0
        self.left_up_point = 0
        self.right_up_point = 0
        self._reset_lines()

    def _reset_lines(self) -> None:
        self.left_line = [0] * self.height
        self.right_line = [self.width - 1] * self.height
        self.left_lost = [False] * self.height
        self.right_lost = [False] * self.height

    def sweep(self, image: Image) -> None:
        """Scan a binary frame and record both edge lines and lost-edge flags."""
        height, width = _shape(image)
        if (height, width) != (self.height, self.width):
            raise ValueError(
                f"expected a {self.height}x{self.width} image, got {height}x{width}"
            )
        start, end = _SEARCH_MARGIN, width - _SEARCH_MARGIN
        self._reset_lines()

        counts = [0] * width
        for j in range(start, end):
            counts[j] = sum(
                1 for _ in takewhile(lambda row: row[j] == WHITE, reversed(image))
            )
        self.white_count = counts

        left_best = (0, 0)
        for i in range(start, end, 2):
            if counts[i] > left_best[0]:
                left_best = (counts[i], i)
        right_best = (0, 0)
        for i in range(end, left_best[1] - 1, -2):
            if counts[i] > right_best[0]:
                right_best = (counts[i], i)
        self.longest_white_left = left_best
        self.longest_white_right = right_best
        self.search_stop_line = max(left_best[0], right_best[0])

        left_index, right_index = left_best[1], right_best[1]
        for i in range(height - 1, height - self.search_stop_line - 1, -1):
            row = image[i]
            right_border = next(
                (
                    j
                    for j in range(right_index, width - 2)
                    if row[j] == WHITE and row[j + 1] == BLACK and row[j + 2] == BLACK
                ),
                None,
            )
            self.right_lost[i] = right_border is None
            left_border = next(
                (
                    j
                    for j in range(left_index, 1, -1)
                    if row[j] == WHITE and row[j - 1] == BLACK and row[j - 2] == BLACK
                ),
                None,
            )
            self.left_lost[i] = left_border is None
            self.right_line[i] = width - 3 if right_border is None else right_border
            self.left_line[i] = 2 if left_border is None else left_border

        scanned = range(height - 1, height - self.search_stop_line - 1, -1)
        flags = [(self.left_lost[i], self.right_lost[i]) for i in scanned]
        self.left_lost_count = flags.count((True, False))
        self.right_lost_count = flags.count((False, True))
        self.both_lost_count = flags.count((True, True))

    def _row_error(self, row: int) -> int:
        return self.width // 2 - ((self.left_line[row] + self.right_line[row]) >> 1)

    def error_average(self, start: int, end: int) -> float:
        """Mean offset of the track centre from the frame centre over rows [start, end)."""
        if end < start:
            start, end = end, start
        if start == end:
            raise ValueError("row range is empty")
        if start < 0 or end > self.height:
            raise ValueError("row range outside the image")
        return sum(self._row_error(i) for i in range(start, end)) / (end - start)

    def error_weighted(self) -> float:
        """Weighted mean centre offset over the rows found by the last sweep."""
        rows = range(self.height - 1, self.height - self.search_stop_line, -1)
        total_weight = sum(self.weights[i] for i in rows)
        if total_weight == 0:
            raise ValueError("weights over the scanned rows sum to zero")
        return sum(self.weights[i] * self._row_error(i) for i in rows) / total_weight

    def _draw_line(self, line: list[int], x1: int, y1: int, x2: int, y2: int) -> None:
        first, last = y1, y2
        if y1 > y2:
            y1, y2 = y2, y1
        x1 = _clamp(x1, 0, self.width - 1)
        x2 = _clamp(x2, 0, self.width - 1)
        y1 = _clamp(y1, 0, self.height - 1)
        y2 = _clamp(y2, 0, self.height - 1)
        if y1 == y2:
            return
        for i in range(max(first, 0), min(last, self.height)):
            hx = x1 + _trunc_div((i - y1) * (x2 - x1), y2 - y1)
            line[i] = _clamp(hx, 0, self.width - 1)

    def left_draw_line(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Fill the left edge between two points by linear interpolation."""
        self._draw_line(self.left_line, x1, y1, x2, y2)

    def right_draw_line(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Fill the right edge between two points by linear interpolation."""
        self._draw_line(self.right_line, x1, y1, x2, y2)

    def find_down_points(self, start: int, end: int) -> None:
        """Search upward from start to end for the lower corner points of each edge."""
        self.left_down_point = 0
        self.right_down_point = 0
        start = min(start, self.height - 5)
        end = max(end, self.height - self.search_stop_line, 4)
        left, right = self.left_line, self.right_line
        for i in range(start, end - 1, -1):
            if (
                not self.left_down_point
                and _max_step(left, i, 1) <= 5
                and left[i] - left[i - 2] >= 5
                and left[i] - left[i - 3] >= 10
                and left[i] - left[i - 4] >= 10
            ):
                self.left_down_point = i
            if (
                not self.right_down_point
                and _max_step(right, i, 1) <= 5
                and right[i] - right[i - 2] <= -5
                and right[i] - right[i - 3] <= -10
                and right[i] - right[i - 4] <= -10
            ):
                self.right_down_point = i
            if self.left_down_point and self.right_down_point:
                break

    def find_up_points(self, start: int, end: int) -> None:
        """Search downward from start to end for the upper corner points of each edge."""
        self.left_up_point = 0
        self.right_up_point = 0
        start = max(start, self.height - self.search_stop_line + 5)
        end = min(end, self.height - 5)
        left, right = self.left_line, self.right_line
        for i in range(start, end):
            if (
                not self.left_up_point
                and _max_step(left, i, -1) < 5
                and left[i + 2] - left[i] < -5
                and left[i + 3] - left[i] < -10
                and left[i + 4] - left[i] < -10
            ):
                self.left_up_point = i
            if (
                not self.right_up_point
                and _max_step(right, i, -1) < 5
                and right[i + 2] - right[i] > 5
                and right[i + 3] - right[i] > 10
                and right[i + 4] - right[i] > 10
            ):
                self.right_up_point = i
            if self.left_up_point and self.right_up_point:
                break