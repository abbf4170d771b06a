## matrix transformation operations for homogeneous 2D texture
## coordinates in eggWrap

## Copyright (c) 2025 eggWrap contributors
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

from math import cos, sin, radians

import numpy as np

import eggwrap.geom as geom

## a matrix is represented as a list of three three-vectors.  Vectors
## represent rows unless the transpose property is true.  Texture
## coordinates are homogeneous [u, v, 1] column vectors, so Mx applies
## the transform to a coordinate.

## Composition reads right to left: Translation(c).mul(Scale(s))
## scales first, then translates.


class Matrix:
    """3x3 transformation matrix for homogeneous 2D texture coordinates"""

    def __init__(self,a=False,trans=False):
        self.m = [[1,0,0],
                  [0,1,0],
                  [0,0,1]]
        self.trans=False

        if isinstance(a,Matrix):
            for i in range(3):
                self.setrow(i,list(a.getrow(i)))

        elif isinstance(a,(tuple,list)):
            if len(a) == 3:
                if not all(isinstance(r,(tuple,list)) and len(r) == 3 for r in a):
                    raise ValueError('bad rows in matrix initialization: {}'.format(a))
                for i in range(3):
                    for j in range(3):
                        x =a[i][j]
                        if geom.isgoodnum(x):
                            self.m[i][j]=x
                        else:
                            raise ValueError('bad element in matrix initialization: {}'.format(x))
            elif len(a)==9:
                for i in range(3):
                    for j in range(3):
                        x = a[i*3+j]
                        if geom.isgoodnum(x):
                            self.m[i][j]=x
                        else:
                            raise ValueError('bad element in matrix initialization: {}'.format(x))
            else:
                raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        elif a is not False:
            raise ValueError('bad thing used in attempt to initialize matrix: {}'.format(a))
        self.trans=trans

    def __repr__(self):
        return "Matrix({},{},{},{})".format(self.m[0],self.m[1],
                                            self.m[2],self.trans)

    #return value indexed by i,j
    def get(self,i,j):
        if i < 0 or i > 2 or j < 0 or j > 2:
            raise ValueError('bad index passed to get: {},{}'.format(i,j))
        if self.trans:
            return self.m[j][i]
        else:
            return self.m[i][j]

    #set value indexed by i,j
    def set(self,i,j,x):
        if i < 0 or i > 2 or j < 0 or j > 2:
            raise ValueError('bad index passed to set: {},{}'.format(i,j))
        if geom.isgoodnum(x):
            if self.trans:
                self.m[j][i]=x
            else:
                self.m[i][j]=x
        else:
            raise ValueError('bad value passed to set: {}'.format(x))

    def getrow(self,i):
        if i < 0 or i > 2:
            raise ValueError('bad row passed to getrow: {}'.format(i))
        if self.trans:
            return [self.m[0][i],
                    self.m[1][i],
                    self.m[2][i]]
        else:
            return self.m[i]

    def getcol(self,j):
        if j < 0 or j > 2:
            raise ValueError('bad column passed to getcol: {}'.format(j))
        if not self.trans:
            return [self.m[0][j],
                    self.m[1][j],
                    self.m[2][j]]
        else:
            return self.m[j]

    def setrow(self,i,x):
        if not geom.isvect(x):
            raise ValueError('bad non-vector passed to setrow: {}'.format(x))
        if i < 0 or i > 2:
            raise ValueError('bad row index passed to setrow: {}'.format(i))
        if self.trans:
            self.m[0][i] = x[0]
            self.m[1][i] = x[1]
            self.m[2][i] = x[2]
        else:
            self.m[i] = x

    # matrix multiply.  If x is a matrix, compute MX.  If X is a
    # vector, compute Mx. If x is a scalar, compute xM.  Respects
    # transpose flag.

    def mul(self,x):
        if isinstance(x,Matrix):
            result = Matrix()
            for i in range(3):
                for j in range(3):
                    result.set(i,j,
                               geom.dot3(self.getrow(i),x.getcol(j)))
            return result
        elif geom.isvect(x):
            result = geom.vect()
            for i in range(3):
                result[i]=geom.dot3(self.getrow(i),x)
            return result
        elif geom.isgoodnum(x):
            result = Matrix()
            for i in range(3):
                result.setrow(i,geom.scale3(self.getrow(i),x))
            return result

        raise ValueError('bad thing passed to mul(): {}'.format(x))

    def elements(self):
        """row-major tuple of the nine matrix elements"""
        return tuple(self.get(i,j) for i in range(3) for j in range(3))

    def isidentity(self):
        return all(geom.close(self.get(i,j),1.0 if i == j else 0.0)
                   for i in range(3) for j in range(3))

    # transform an (n, 2) array of uv coordinates in one go
    def apply(self,uv):
        uv = np.asarray(uv,dtype=float)
        a = np.array([self.getrow(0),self.getrow(1)],dtype=float)
        return uv @ a[:,:2].T + a[:,2]


## In texture space a positive angle turns the sampled coordinates
## clockwise, which makes the design on the surface appear to turn
## counter-clockwise.  Angles are in degrees.
def Rotation(angle,inverse=False):
    if inverse:
        angle *= -1.0
    rad = radians(angle%360.0)
    c = cos(rad)
    s = sin(rad)
    R = [[c,s,0],
         [-s,c,0],
         [0,0,1]]
    return Matrix(R)

def Translation(delta,inverse=False):
    du = delta[0]
    dv = delta[1]
    if inverse:
        du = -du
        dv = -dv
    T = [[1,0,du],
         [0,1,dv],
         [0,0,1]]
    return Matrix(T)

def Scale(x,y=False,inverse=False):
    if geom.isgoodnum(x):
        sx = x
        sy = y if geom.isgoodnum(y) else x
    elif isinstance(x,(tuple,list)) and len(x) >= 2:
        sx = x[0]
        sy = x[1]
    else:
        raise ValueError('bad scaling values passed to Scale')

    if inverse:
        sx = 1.0/sx
        sy = 1.0/sy

    S = [[sx,0,0],
         [0,sy,0],
         [0,0,1.0]]
    return Matrix(S)


def uv_transform(tx,ty,sx,sy,rotation,cx,cy):
    """Texture-coordinate transform about the pivot ``(cx, cy)``.

    Equivalent to ``Translation((cx+tx, cy+ty)) * Scale(sx, sy) *
    Rotation(rotation) * Translation((-cx, -cy))`` with ``rotation`` in
    radians, written out in closed form.
    """
    c = cos(rotation)
    s = sin(rotation)
    return Matrix([[sx*c, sx*s, -sx*(c*cx + s*cy) + cx + tx],
                   [-sy*s, sy*c, -sy*(-s*cx + c*cy) + cy + ty],
                   [0, 0, 1]])


def projection_matrix(settings):
    """Compose the texture-sampling matrix for a ``ProjectionSettings``.

    Translate to the centre ``(0.5+offsetX, 0.5+offsetY)``, scale by
    ``1/size``, rotate by ``rotation_degrees``, all pivoting about
    ``(0.5, 0.5)``.  ``size=1``, zero offset and no rotation give the
    identity.
    """
    settings.validate()
    inv = 1.0/settings.size
    return uv_transform(settings.offset[0],settings.offset[1],
                        inv,inv,
                        radians(settings.rotation_degrees),
                        0.5,0.5)
