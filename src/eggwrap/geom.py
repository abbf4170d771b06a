## scalar and vector helpers shared by the eggWrap geometry modules

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

"""scalar and small-vector helpers for **eggWrap**

Texture-space coordinates are homogeneous 2D vectors ``[u, v, 1]``,
the 2D analogue of the ``[x, y, z, w]`` convention used for points in
3D CAD code.  Mesh positions themselves live in numpy arrays.
"""

from math import pi

## constants
epsilon=0.000005
pi2 = 2.0*pi

## operations on scalars
## -----------------------

## booleans are ints as far as isinstance() is concerned, but we
## never want True/False to sneak in as a coordinate
def isgoodnum(n):
    """ determine if an argument is actually a scalar number, and not boolean
    """
    return (not isinstance(n,bool)) and isinstance(n,(int,float))

def close(a,b):
    """ are two scalars the same within epsilon
    """
    return abs(a-b) < epsilon


## homogeneous 2D vectors
## ------------------------

def vect(a=False,b=False,c=False):
    """Convenience function for making a homogeneous 2D texture
coordinate ``[u, v, w]`` from practically anything
    """
    r = [0,0,1]
    if isgoodnum(a):
        r[0]=a
        if isgoodnum(b):
            r[1]=b
            if isgoodnum(c):
                r[2]=c
    elif isinstance(a,(tuple,list)):
        for i in range(min(3,len(a))):
            x=a[i]
            if isgoodnum(x):
                r[i]=x
    return r

def isvect(x):
    """
    check to see if argument is a proper homogeneous 2D vector
    """
    return isinstance(x,list) and len(x) == 3 and isgoodnum(x[0]) and isgoodnum(x[1]) and isgoodnum(x[2])

def dot3(a,b):
    """ homogeneous 2D vector ``a`` dot ``b``, including the w component"""
    return a[0]*b[0]+a[1]*b[1]+a[2]*b[2]

def scale3(a,c):
    """ homogeneous 2D vector ``a`` times scalar ``c``, including w"""
    return [a[0]*c,a[1]*c,a[2]*c]
