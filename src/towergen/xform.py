## matrix transformation operations for 3D homogeneous coordinates
## in towergen

## Copyright (c) 2020 Richard W. DeVaul
## Copyright (c) 2020-2026 yapCAD and towergen contributors
## All rights reserved

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

from math import cos, sin, sqrt, isfinite, radians, degrees

import numpy as np

## A matrix is represented as a list of four four-vectors (rows).
## Vectors are column vectors and ``A.mul(B)`` computes AB: the
## right-most transform is applied first.  A segment transform is
## therefore built as ``Translation(d).mul(Rotation(axis, a).mul(Scale(s)))``.

epsilon = 1e-9


def _isgoodnum(x):
    return (not isinstance(x, bool)) and isinstance(x, (int, float)) and isfinite(x)


def _dot4(a, b):
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2] + a[3]*b[3]


class Matrix:
    """4x4 transformation matrix class for transforming homogeneous 3D coordinates"""

    def __init__(self, rows=None):
        self.m = [[1, 0, 0, 0],
                  [0, 1, 0, 0],
                  [0, 0, 1, 0],
                  [0, 0, 0, 1]]
        if rows is None:
            return
        if not (isinstance(rows, (tuple, list)) and len(rows) == 4 and
                all(isinstance(r, (tuple, list)) and len(r) == 4 for r in rows)):
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(rows))
        for i in range(4):
            for j in range(4):
                x = rows[i][j]
                if not _isgoodnum(x):
                    raise ValueError('bad element in matrix initialization: {}'.format(x))
                self.m[i][j] = x

    def __repr__(self):
        return "Matrix({},{},{},{})".format(self.m[0], self.m[1], self.m[2], self.m[3])

    def getrow(self, i):
        if i < 0 or i > 3:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        return self.m[i]

    def getcol(self, j):
        if j < 0 or j > 3:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        return [self.m[0][j], self.m[1][j], self.m[2][j], self.m[3][j]]

    # matrix multiply, computes MX
    def mul(self, x):
        if not isinstance(x, Matrix):
            raise ValueError('bad thing passed to mul(): {}'.format(x))
        return Matrix([[_dot4(self.getrow(i), x.getcol(j)) for j in range(4)]
                       for i in range(4)])

    def as_array(self):
        """Return the matrix as a row-major ``(4, 4)`` numpy array."""
        return np.array(self.m, dtype=np.float64)

    def apply(self, points):
        """Transform an ``(n, 3)`` array of points, returning a new array."""
        pts = np.asarray(points, dtype=np.float64)
        m = self.as_array()
        return pts @ m[:3, :3].T + m[:3, 3]


# return the generalized 4x4 arbitrary axis rotation matrix; angle
# in degrees
def Rotation(axis, angle):
    m = sqrt(axis[0]*axis[0] + axis[1]*axis[1] + axis[2]*axis[2])
    if m < epsilon:
        raise ValueError('zero-length rotation axis not allowed')
    ux = axis[0]/m
    uy = axis[1]/m
    uz = axis[2]/m

    rad = radians(angle % 360.0)

    cang = cos(rad)
    cmin = 1.0-cang
    sang = sin(rad)

    # see http://www.opengl-tutorial.org/assets/faq_quaternions/index.html#Q38
    R = [[cang + ux*ux*cmin, ux*uy*cmin-uz*sang, ux*uz*cmin+uy*sang, 0],
         [uy*ux*cmin+uz*sang, cang + uy*uy*cmin, uy*uz*cmin - ux*sang, 0],
         [uz*ux*cmin-uy*sang, uz*uy*cmin+ux*sang, cang+uz*uz*cmin, 0],
         [0, 0, 0, 1]]

    return Matrix(R)


def Translation(delta):
    T = [[1, 0, 0, delta[0]],
         [0, 1, 0, delta[1]],
         [0, 0, 1, delta[2]],
         [0, 0, 0, 1]]
    return Matrix(T)


# non-uniform scale by an (x, y, z) triple
def Scale(factors):
    if not (isinstance(factors, (list, tuple)) and len(factors) == 3):
        raise ValueError('bad scaling values passed to Scale: {}'.format(factors))
    sx, sy, sz = factors
    S = [[sx, 0, 0, 0],
         [0, sy, 0, 0],
         [0, 0, sz, 0],
         [0, 0, 0, 1.0]]
    return Matrix(S)


## the vertical axis of a tower
YAXIS = (0.0, 1.0, 0.0)


def SegmentTransform(offset, twist, scale):
    """Composite ``T(0, offset, 0) R_y(twist) S(scale)``; ``twist`` in
    radians, ``scale`` an ``(x, y, z)`` triple."""
    return Translation((0.0, offset, 0.0)).mul(
        Rotation(YAXIS, degrees(twist)).mul(Scale(scale)))
