"""The rotation module gathers the conversion functions between the
different representations of a rotation: orientation matrix (om), Euler
angles (eu), axis/angle pair (ax), Rodrigues vector (ro) and unit
quaternion (qu).

All functions are vectorized: they accept a single rotation or an array of
rotations stacked along the first axis. Angles are in radians.

This follows the conventions of :cite:`Rowenhorst2015`, in particular the
orientation matrices are passive (they bring the sample frame into
coincidence with the crystal frame).
"""
import numpy as np
from pyodf.crystal.quaternion import P, qu_normalize

epsilon = np.finfo('float').eps


def eu2om(euler):
    """Compute the orientation matrix from the 3 Bunge Euler angles.

    :param euler: the 3 euler angles in radians (shape (3,) or (n, 3)).
    :return: the orientation matrix (shape (3, 3) or (n, 3, 3)).
    """
    euler = np.asarray(euler, dtype=np.float64)
    c1, s1 = np.cos(euler[..., 0]), np.sin(euler[..., 0])
    c, s = np.cos(euler[..., 1]), np.sin(euler[..., 1])
    c2, s2 = np.cos(euler[..., 2]), np.sin(euler[..., 2])
    g = np.empty(euler.shape[:-1] + (3, 3), dtype=np.float64)
    g[..., 0, 0] = c1 * c2 - s1 * s2 * c
    g[..., 0, 1] = s1 * c2 + c1 * s2 * c
    g[..., 0, 2] = s2 * s
    g[..., 1, 0] = -c1 * s2 - s1 * c2 * c
    g[..., 1, 1] = -s1 * s2 + c1 * c2 * c
    g[..., 1, 2] = c2 * s
    g[..., 2, 0] = s1 * s
    g[..., 2, 1] = -c1 * s
    g[..., 2, 2] = c
    return g


def om2eu(g):
    """Compute the Bunge Euler angles from the orientation matrix.

    When :math:`g_{33} = 1` within the machine precision, only the sum
    :math:`\\phi_1 + \\phi_2` is defined. The convention is then to attribute
    the entire angle to :math:`\\phi_1` and set :math:`\\phi_2` to zero.

    :param g: the orientation matrix (shape (3, 3) or (n, 3, 3)).
    :return: the 3 euler angles in radians, in the range [0, 2 pi].
    """
    g = np.asarray(g, dtype=np.float64)
    g33 = np.clip(g[..., 2, 2], -1.0, 1.0)
    degenerate = np.abs(g33) >= 1 - epsilon
    zeta = 1.0 / np.sqrt(np.where(degenerate, 1.0, 1.0 - g33 ** 2))
    phi1 = np.where(degenerate,
                    np.where(g33 > 0, np.arctan2(g[..., 0, 1], g[..., 0, 0]),
                             -np.arctan2(-g[..., 0, 1], g[..., 0, 0])),
                    np.arctan2(g[..., 2, 0] * zeta, -g[..., 2, 1] * zeta))
    Phi = np.where(degenerate, np.where(g33 > 0, 0.0, np.pi), np.arccos(g33))
    phi2 = np.where(degenerate, 0.0,
                    np.arctan2(g[..., 0, 2] * zeta, g[..., 1, 2] * zeta))
    euler = np.stack([phi1, Phi, phi2], axis=-1)
    return np.mod(euler, 2 * np.pi)


def om2qu(om):
    """Compute the unit quaternion from the orientation matrix.

    The numerically stable branch is picked among the four possible ones
    (Shepperd's method) by looking at the largest of the trace and the
    diagonal terms, so that rotations by pi are handled correctly.

    :param om: the orientation matrix (shape (3, 3) or (n, 3, 3)).
    :return: the unit quaternion(s) with a positive scalar part.
    """
    om = np.asarray(om, dtype=np.float64)
    g = om.reshape((-1, 3, 3))
    trace = g[:, 0, 0] + g[:, 1, 1] + g[:, 2, 2]
    branch = np.argmax(np.stack([trace, g[:, 0, 0], g[:, 1, 1], g[:, 2, 2]], axis=1), axis=1)
    d1 = g[:, 1, 2] - g[:, 2, 1]  # 4 q0 q1
    d2 = g[:, 2, 0] - g[:, 0, 2]  # 4 q0 q2
    d3 = g[:, 0, 1] - g[:, 1, 0]  # 4 q0 q3
    s12 = g[:, 0, 1] + g[:, 1, 0]  # 4 q1 q2
    s13 = g[:, 0, 2] + g[:, 2, 0]  # 4 q1 q3
    s23 = g[:, 1, 2] + g[:, 2, 1]  # 4 q2 q3
    q = np.empty((len(g), 4), dtype=np.float64)
    b = branch == 0
    if np.any(b):
        w = 0.5 * np.sqrt(np.maximum(1. + trace[b], 0.))
        q[b] = np.stack([w, d1[b] / (4 * w), d2[b] / (4 * w), d3[b] / (4 * w)], axis=1)
    b = branch == 1
    if np.any(b):
        x = 0.5 * np.sqrt(np.maximum(1. + g[b, 0, 0] - g[b, 1, 1] - g[b, 2, 2], 0.))
        q[b] = np.stack([d1[b] / (4 * x), x, s12[b] / (4 * x), s13[b] / (4 * x)], axis=1)
    b = branch == 2
    if np.any(b):
        y = 0.5 * np.sqrt(np.maximum(1. - g[b, 0, 0] + g[b, 1, 1] - g[b, 2, 2], 0.))
        q[b] = np.stack([d2[b] / (4 * y), s12[b] / (4 * y), y, s23[b] / (4 * y)], axis=1)
    b = branch == 3
    if np.any(b):
        z = 0.5 * np.sqrt(np.maximum(1. - g[b, 0, 0] - g[b, 1, 1] + g[b, 2, 2], 0.))
        q[b] = np.stack([d3[b] / (4 * z), s13[b] / (4 * z), s23[b] / (4 * z), z], axis=1)
    q = qu_normalize(q)
    return q.reshape(om.shape[:-2] + (4,))


def qu2om(q):
    """Compute the orientation matrix from the unit quaternion(s).

    :param q: the quaternion(s) (shape (4,) or (n, 4)).
    :return: the orientation matrix (shape (3, 3) or (n, 3, 3)).
    """
    q = np.asarray(q, dtype=np.float64)
    q0, q1, q2, q3 = q[..., 0], q[..., 1], q[..., 2], q[..., 3]
    qbar = q0 ** 2 - q1 ** 2 - q2 ** 2 - q3 ** 2
    g = np.empty(q.shape[:-1] + (3, 3), dtype=np.float64)
    g[..., 0, 0] = qbar + 2 * q1 ** 2
    g[..., 0, 1] = 2 * (q1 * q2 - P * q0 * q3)
    g[..., 0, 2] = 2 * (q1 * q3 + P * q0 * q2)
    g[..., 1, 0] = 2 * (q1 * q2 + P * q0 * q3)
    g[..., 1, 1] = qbar + 2 * q2 ** 2
    g[..., 1, 2] = 2 * (q2 * q3 - P * q0 * q1)
    g[..., 2, 0] = 2 * (q1 * q3 - P * q0 * q2)
    g[..., 2, 1] = 2 * (q2 * q3 + P * q0 * q1)
    g[..., 2, 2] = qbar + 2 * q3 ** 2
    return g


def ax2qu(axis, angle):
    """Compute the quaternion associated with the rotation defined by
    the given (axis, angle) pair.

    :param axis: the rotation axis (shape (3,) or (n, 3)), normalized here.
    :param angle: the rotation angle(s) in radians.
    :return: the corresponding unit quaternion(s).
    """
    axis = np.asarray(axis, dtype=np.float64)
    norm = np.linalg.norm(axis, axis=-1, keepdims=True)
    if np.any(norm < epsilon):
        raise ValueError('the rotation axis must not be a zero vector')
    axis = axis / norm
    half = 0.5 * np.asarray(angle, dtype=np.float64)[..., None]
    q = np.concatenate([np.cos(half), -P * np.sin(half) * axis], axis=-1)
    return q


def qu2ax(q):
    """Compute the (axis, angle) pair from the unit quaternion(s).

    :param q: the quaternion(s) (shape (4,) or (n, 4)).
    :return: an array with the 3 components of the axis followed by the
        angle in radians, in [0, pi].
    """
    q = qu_normalize(q)
    angle = 2 * np.arccos(np.clip(q[..., 0], -1.0, 1.0))
    s = np.linalg.norm(q[..., 1:], axis=-1, keepdims=True)
    # the axis is arbitrary for the identity, use [001]
    safe = s > 2 * epsilon
    axis = np.where(safe, -P * q[..., 1:] / np.where(safe, s, 1.0), np.array([0., 0., 1.]))
    return np.concatenate([axis, angle[..., None]], axis=-1)


def qu2ro(q):
    """Compute the Rodrigues vector(s) from the unit quaternion(s).

    The Rodrigues vector is infinite for rotations by pi.
    """
    ax = qu2ax(q)
    with np.errstate(over='ignore'):
        return ax[..., :3] * np.tan(0.5 * ax[..., 3:])


def ro2qu(rod):
    """Compute the unit quaternion(s) from the Rodrigues vector(s)."""
    rod = np.asarray(rod, dtype=np.float64)
    r = np.linalg.norm(rod, axis=-1, keepdims=True)
    angle = 2 * np.arctan(r[..., 0])
    axis = np.where(r > epsilon, rod / np.where(r > epsilon, r, 1.0), np.array([0., 0., 1.]))
    return ax2qu(axis, angle)


def eu2qu(euler):
    """Compute the unit quaternion(s) from the Bunge Euler angles (radians)."""
    return om2qu(eu2om(euler))


def qu2eu(q):
    """Compute the Bunge Euler angles (radians) from the unit quaternion(s)."""
    return om2eu(qu2om(q))


def qu2eu_zyz(q):
    """Compute the ZYZ Euler angles :math:`(\\alpha, \\beta, \\gamma)` of the
    active rotation :math:`R = g^T` described by the unit quaternion(s).

    With :math:`R = R_z(\\alpha) R_y(\\beta) R_z(\\gamma)` the quaternion
    components verify :math:`q_0 = \\cos(\\beta/2)\\cos((\\alpha+\\gamma)/2)`,
    :math:`q_3 = \\cos(\\beta/2)\\sin((\\alpha+\\gamma)/2)`,
    :math:`q_1 = -\\sin(\\beta/2)\\sin((\\alpha-\\gamma)/2)` and
    :math:`q_2 = \\sin(\\beta/2)\\cos((\\alpha-\\gamma)/2)`.

    :param q: the quaternion(s) (shape (4,) or (n, 4)).
    :return: the ZYZ Euler angles in radians.
    """
    q = np.asarray(q, dtype=np.float64)
    # components of the active rotation quaternion
    a, b, c, d = q[..., 0], -P * q[..., 1], -P * q[..., 2], -P * q[..., 3]
    beta = 2 * np.arctan2(np.sqrt(b ** 2 + c ** 2), np.sqrt(a ** 2 + d ** 2))
    s = 2 * np.arctan2(d, a)  # alpha + gamma
    t = 2 * np.arctan2(-b, c)  # alpha - gamma
    return np.stack([0.5 * (s + t), beta, 0.5 * (s - t)], axis=-1)
