# clipping.py

# One clip routine for every plane in the pipeline: the near and far planes in
# view space and the four viewport edges in screen space.

import logging
from typing import List, Optional, Tuple

import numpy as np

import vertex_helpers as v
from profiler import Profiler
from triangle import Triangle

logger = logging.getLogger(__name__)


class ClipClassificationError(AssertionError):
    """Raised when a triangle's vertices cannot be split into inside/outside sets.

    Three vertices always give 0..3 inside points, so reaching this means the
    classification itself is broken.
    """


def _classify_vertices(plane_p, plane_n, tri: Triangle) -> Tuple[List[int], List[int]]:
    """
    Splits the vertex indices into inside (d >= 0) and outside sets.

    Both lists come back in cyclic order starting right after the vertex that
    is alone on its side, so (inside..., outside...) is always a rotation of
    (0, 1, 2). The clip below relies on this to keep the winding.
    """
    inside = [v.distance_to_plane(plane_n, plane_p, p) >= 0 for p in tri.points]
    count = sum(inside)
    if count in (0, 3):
        return [i for i in range(3) if inside[i]], [i for i in range(3) if not inside[i]]
    # The odd one out is the vertex whose side has a single member
    odd = inside.index(True) if count == 1 else inside.index(False)
    order = [(odd + k) % 3 for k in range(3)]
    if count == 1:
        return [order[0]], [order[1], order[2]]
    return [order[1], order[2]], [order[0]]


def _clip_edge(plane_p, plane_n, tri: Triangle, start: int, end: int):
    """Intersects the edge start->end with the plane. Returns (point, tex)."""
    p, t = v.intersect_plane(plane_p, plane_n, tri.points[start], tri.points[end])
    tex = v.lerp(tri.tex[start], tri.tex[end], t)
    return p, tex


@Profiler.timed()
def clip_against_plane(plane_p, plane_n, tri: Triangle) -> Tuple[Triangle, ...]:
    """
    Clips a triangle against a plane, keeping the part on the normal's side.

    Parameters:
        plane_p:
            Any point on the plane (x, y, z[, w]).
        plane_n:
            Plane normal pointing to the inside. Normalized here.
        tri (Triangle):
            The triangle to clip.

    Returns:
        tuple[Triangle, ...]:
            0 triangles if the input is fully outside, the input itself if it is
            fully inside, otherwise 1 or 2 new triangles covering the inside part.
            Output triangles keep the winding of the input; colour, render mode
            and sprite are propagated and texture coordinates interpolated with
            the same `t` as the positions.

    Raises:
        ClipClassificationError: the inside/outside split is inconsistent.
    """
    plane_p = v.as_point(plane_p)
    plane_n = v.vector_normalize(v.as_point(plane_n))

    inside, outside = _classify_vertices(plane_p, plane_n, tri)

    if len(inside) == 0 and len(outside) == 3:
        # Ceases to exist
        return ()

    if len(inside) == 3 and len(outside) == 0:
        return (tri,)

    if len(inside) == 1 and len(outside) == 2:
        # Two points outside: the triangle simply becomes smaller
        i0 = inside[0]
        p1, t1 = _clip_edge(plane_p, plane_n, tri, i0, outside[0])
        p2, t2 = _clip_edge(plane_p, plane_n, tri, i0, outside[1])
        out = Triangle(np.array([tri.points[i0], p1, p2]),
                       np.array([tri.tex[i0], t1, t2]),
                       tri.color, tri.render_mode, tri.sprite)
        return (out,)

    if len(inside) == 2 and len(outside) == 1:
        # Two points inside: the clipped part is a quad, split into two triangles
        i0, i1 = inside
        o0 = outside[0]
        p_a, t_a = _clip_edge(plane_p, plane_n, tri, i0, o0)
        p_b, t_b = _clip_edge(plane_p, plane_n, tri, i1, o0)
        out1 = Triangle(np.array([tri.points[i0], tri.points[i1], p_a]),
                        np.array([tri.tex[i0], tri.tex[i1], t_a]),
                        tri.color, tri.render_mode, tri.sprite)
        # Second and third vertex in this order, otherwise the winding flips
        out2 = Triangle(np.array([tri.points[i1], p_b, p_a]),
                        np.array([tri.tex[i1], t_b, t_a]),
                        tri.color, tri.render_mode, tri.sprite)
        return (out1, out2)

    logger.critical("Unexpected inside/outside split while clipping: inside=%s outside=%s",
                    inside, outside)
    raise ClipClassificationError(
        f"unexpected combination of inside/outside points: {len(inside)}/{len(outside)}")


def intersect_triangle_with_plane(plane_p, plane_n, tri: Triangle) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """
    Finds the segment where a triangle crosses a plane.

    Returns None when the triangle lies entirely on one side, otherwise the two
    end points of the intersection segment.
    """
    plane_p = v.as_point(plane_p)
    plane_n = v.vector_normalize(v.as_point(plane_n))

    inside, outside = _classify_vertices(plane_p, plane_n, tri)
    if len(inside) in (0, 3):
        return None
    if len(inside) == 1 and len(outside) == 2:
        p1, _ = v.intersect_plane(plane_p, plane_n, tri.points[inside[0]], tri.points[outside[0]])
        p2, _ = v.intersect_plane(plane_p, plane_n, tri.points[inside[0]], tri.points[outside[1]])
        return p1, p2
    if len(inside) == 2 and len(outside) == 1:
        p1, _ = v.intersect_plane(plane_p, plane_n, tri.points[inside[0]], tri.points[outside[0]])
        p2, _ = v.intersect_plane(plane_p, plane_n, tri.points[inside[1]], tri.points[outside[0]])
        return p1, p2

    logger.critical("Unexpected inside/outside split while intersecting: inside=%s outside=%s",
                    inside, outside)
    raise ClipClassificationError(
        f"unexpected combination of inside/outside points: {len(inside)}/{len(outside)}")
