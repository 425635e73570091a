#
#    Copyright (C) 2024-2025 The University of Sydney, Australia
#
#    This program is free software; you can redistribute it and/or modify it under
#    the terms of the GNU General Public License, version 2, as published by
#    the Free Software Foundation.
#
#    This program is distributed in the hope that it will be useful, but WITHOUT
#    ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or
#    FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General Public License
#    for more details.
#
#    You should have received a copy of the GNU General Public License along
#    with this program; if not, write to Free Software Foundation, Inc.,
#    51 Franklin Street, Fifth Floor, Boston, MA  02110-1301, USA.
#

"""This sub-module contains the vector tools used to test whether a site lies inside a plate polygon on the sphere."""

import numpy as np

# tolerance used when testing whether a point lies on a great circle arc (touching counts as crossing)
ARC_TOLERANCE = 1e-12

# cross products shorter than this are treated as zero (degenerate or collinear arcs)
DEGENERATE_NORM = 1e-12


def lonlat2xyz(lon, lat, degrees=True):
    """Convert lon / lat into Cartesian (x,y,z) coordinates on the unit sphere.

    Parameters
    ----------
    lon, lat : float or array_like
        Longitudes and latitudes of the points, in degrees unless `degrees=False`.

    Returns
    -------
    xs, ys, zs : float or ndarray
        Cartesian coordinates of each point in all 3 dimensions.
    """
    if degrees:
        lon = np.deg2rad(lon)
        lat = np.deg2rad(lat)
    cosphi = np.cos(lat)
    xs = cosphi * np.cos(lon)
    ys = cosphi * np.sin(lon)
    zs = np.sin(lat)
    return xs, ys, zs


def latlon_array_to_xyz(latlons):
    """convert a sequence of (lat, lon) pairs in degrees into an (N, 3) array of unit vectors"""
    latlons = np.asarray(latlons, dtype=float).reshape(-1, 2)
    return np.column_stack(lonlat2xyz(latlons[:, 1], latlons[:, 0]))


def _on_arc(p, a, b, normal, tol=ARC_TOLERANCE):
    """test whether the points p (which lie on the great circle with the given normal)
    sit on the minor arc from a to b. All arguments broadcast against each other.
    """
    after_a = np.einsum("...i,...i->...", np.cross(a, p), normal) >= -tol
    before_b = np.einsum("...i,...i->...", np.cross(p, b), normal) >= -tol
    return np.logical_and(after_a, before_b)


def count_arc_intersections(origin, targets, edge_starts, edge_ends):
    """Count, for each great circle arc from `origin` to one of the `targets`, how many of the
    arcs `edge_starts[i]` -> `edge_ends[i]` it crosses. Touching an arc counts as crossing it.

    Parameters
    ----------
    origin : array_like, shape (3,)
        Unit vector of the common start point of all rays.
    targets : array_like, shape (R, 3)
        Unit vectors of the ray end points.
    edge_starts, edge_ends : array_like, shape (E, 3)
        Unit vectors of the polygon edge end points.

    Returns
    -------
    counts : ndarray of int, shape (R,)
        Number of edges crossed by each ray. A ray whose end points coincide (or are antipodal)
        has no defined great circle and crosses nothing. Zero-length edges are never crossed.
    """
    origin = np.asarray(origin, dtype=float)
    targets = np.atleast_2d(np.asarray(targets, dtype=float))
    edge_starts = np.atleast_2d(np.asarray(edge_starts, dtype=float))
    edge_ends = np.atleast_2d(np.asarray(edge_ends, dtype=float))

    n_rays = targets.shape[0]
    if edge_starts.size == 0:
        return np.zeros(n_rays, dtype=int)

    ray_normals = np.cross(origin, targets)  # (R, 3)
    ray_norms = np.linalg.norm(ray_normals, axis=1)
    valid_rays = ray_norms > DEGENERATE_NORM
    ray_normals[valid_rays] /= ray_norms[valid_rays, None]

    edge_normals = np.cross(edge_starts, edge_ends)  # (E, 3)
    edge_norms = np.linalg.norm(edge_normals, axis=1)
    valid_edges = edge_norms > DEGENERATE_NORM
    edge_normals[valid_edges] /= edge_norms[valid_edges, None]

    # broadcast to (R, E, 3)
    rn = ray_normals[:, None, :]
    en = edge_normals[None, :, :]
    o = origin[None, None, :]
    t = targets[:, None, :]
    s = edge_starts[None, :, :]
    e = edge_ends[None, :, :]

    line = np.cross(rn, en)
    line_norms = np.linalg.norm(line, axis=2)
    collinear = line_norms <= DEGENERATE_NORM
    with np.errstate(invalid="ignore", divide="ignore"):
        p = line / line_norms[..., None]
    p = np.where(collinear[..., None], 0.0, p)

    # the two great circles meet in two antipodal points, either may be on both arcs
    crossing = np.zeros(line_norms.shape, dtype=bool)
    for candidate in (p, -p):
        crossing |= np.logical_and(
            _on_arc(candidate, o, t, rn), _on_arc(candidate, s, e, en)
        )

    # arcs on the same great circle cross when an end point of one lies on the other
    overlapping = (
        _on_arc(s, o, t, rn)
        | _on_arc(e, o, t, rn)
        | _on_arc(o, s, e, en)
        | _on_arc(t, s, e, en)
    )
    on_same_circle = np.abs(np.einsum("...i,...i->...", s, rn)) <= ARC_TOLERANCE
    overlapping &= on_same_circle
    crossing = np.where(collinear, overlapping, crossing)

    crossing &= valid_rays[:, None]
    crossing &= valid_edges[None, :]
    return crossing.sum(axis=1).astype(int)
