"""The quaternion module provides a small unit quaternion class and the
vectorized quaternion algebra used to compose and compare orientations.

Quaternions are stored with the scalar part first, :math:`q = (q_0, q_1, q_2, q_3)`.
The product follows the conventions of :cite:`Rowenhorst2015` with the
passive convention :math:`P=-1`, so that the product of two quaternions
corresponds to the product of the associated orientation matrices.
"""
import numpy as np

P = -1  # passive convention


def qu_normalize(q):
    """Normalize one or several quaternions and make the scalar part positive.

    :param ndarray q: a 4 components array or a (n, 4) array of quaternions.
    :return: an array of the same shape containing unit quaternions.
    """
    q = np.array(q, dtype=np.float64)
    norm = np.linalg.norm(q, axis=-1, keepdims=True)
    if np.any(norm < np.finfo('float').eps):
        raise ValueError('cannot normalize a zero quaternion')
    q = q / norm
    # q and -q describe the same rotation, pick the one with q0 >= 0
    sign = np.where(q[..., :1] < 0, -1.0, 1.0)
    return q * sign


def qu_mult(p, q):
    """Compute the product of two (arrays of) quaternions.

    With :math:`P=-1` the product is defined by:

    .. math::

      pq = (p_0 q_0 - \\mathbf{p}.\\mathbf{q},
            p_0 \\mathbf{q} + q_0 \\mathbf{p} + P \\mathbf{p} \\times \\mathbf{q})

    Arrays are broadcast against each other so that a single quaternion can
    be multiplied with a (n, 4) array.

    :param ndarray p: the first quaternion(s).
    :param ndarray q: the second quaternion(s).
    :return: the product as an array of quaternions.
    """
    p = np.asarray(p, dtype=np.float64)
    q = np.asarray(q, dtype=np.float64)
    p0, pv = p[..., 0], p[..., 1:]
    q0, qv = q[..., 0], q[..., 1:]
    r0 = p0 * q0 - np.sum(pv * qv, axis=-1)
    rv = p0[..., None] * qv + q0[..., None] * pv + P * np.cross(pv, qv)
    return np.concatenate([r0[..., None], rv], axis=-1)


def qu_inv(q):
    """Inverse of unit quaternion(s), which is the conjugate."""
    q = np.array(q, dtype=np.float64)
    q[..., 1:] *= -1
    return q


def qu_angle(p, q):
    """Rotation angle (radians) of the misorientation between quaternions.

    Since both :math:`q` and :math:`-q` represent the same rotation, the angle
    is computed from the absolute value of the 4D dot product:
    :math:`\\omega = 2 \\arccos |p.q|`.

    :param ndarray p: the first quaternion(s).
    :param ndarray q: the second quaternion(s).
    :return: the misorientation angle(s) in [0, pi].
    """
    t = np.abs(np.sum(np.asarray(p) * np.asarray(q), axis=-1))
    return 2 * np.arccos(np.clip(t, 0.0, 1.0))


class Quaternion:
    """Class to describe a unit Quaternion."""

    def __init__(self, array, convention=P):
        array = np.array(array, dtype=np.float64)
        if array.shape != (4,):
            raise ValueError('a quaternion must have 4 components, got shape %s' % (array.shape,))
        self.quat = qu_normalize(array)
        self.convention = convention

    def __str__(self):
        s = '({:.3f}, <{:.3f}, {:.3f}, {:.3f}>)'.format(
            self.q0, self.q1, self.q2, self.q3)
        return s

    def __repr__(self):
        return 'Quaternion ' + str(self)

    def __mul__(self, other):
        """Redefine multiplication operator for the Quaternion class."""
        return Quaternion(qu_mult(self.quat, other.quat), convention=self.convention)

    def __eq__(self, other):
        # q and -q are the same rotation
        return np.allclose(np.abs(np.dot(self.quat, other.quat)), 1.0)

    @property
    def q0(self):
        return self.quat[0]

    @property
    def q1(self):
        return self.quat[1]

    @property
    def q2(self):
        return self.quat[2]

    @property
    def q3(self):
        return self.quat[3]

    def norm(self):
        """Compute the norm of the quaternion (should be 1)."""
        return np.sqrt(np.sum(self.quat ** 2))

    def conjugate(self):
        """Return the conjugate quaternion, which is also its inverse."""
        return Quaternion(qu_inv(self.quat), convention=self.convention)
