"""Core rectangle and the mirror-reflection transform for paired pins."""

from dataclasses import dataclass

from .abstraction import Edge, Point


@dataclass(frozen=True)
class Core:
    """Rectangular layout region whose boundary carries the I/O slots."""
    xmin: int
    ymin: int
    xmax: int
    ymax: int

    def __post_init__(self):
        if self.xmax <= self.xmin or self.ymax <= self.ymin:
            raise ValueError(
                f"Degenerate core ({self.xmin}, {self.ymin}) - ({self.xmax}, {self.ymax})"
            )

    def edge_of(self, point: Point) -> Edge:
        """Edge a boundary point lies on (corners resolve bottom/top first)."""
        if point.y == self.ymin and self.xmin <= point.x <= self.xmax:
            return Edge.BOTTOM
        if point.y == self.ymax and self.xmin <= point.x <= self.xmax:
            return Edge.TOP
        if point.x == self.xmin and self.ymin <= point.y <= self.ymax:
            return Edge.LEFT
        if point.x == self.xmax and self.ymin <= point.y <= self.ymax:
            return Edge.RIGHT
        return Edge.INVALID

    def mirrored_position(self, point: Point) -> Point:
        """Reflect a boundary point onto the opposite edge.

        Bottom and top swap keeping x; left and right swap keeping y.
        """
        edge = self.edge_of(point)
        if edge == Edge.BOTTOM:
            return Point(point.x, self.ymax)
        if edge == Edge.TOP:
            return Point(point.x, self.ymin)
        if edge == Edge.LEFT:
            return Point(self.xmax, point.y)
        if edge == Edge.RIGHT:
            return Point(self.xmin, point.y)
        raise ValueError(f"Point {point} is not on the core boundary")
