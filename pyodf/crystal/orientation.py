"""
The orientation module provide the class to describe crystallographic
orientations, the elements of the rotation group SO(3) on which orientation
distribution functions are defined:

 * :py:class:`~pyodf.crystal.orientation.Orientation`

and the :py:func:`~pyodf.crystal.orientation.as_quaternions` helper to turn
any collection of orientations into a (n, 4) array of unit quaternions.
"""
import numpy as np
from pyodf.crystal.quaternion import Quaternion, qu_mult, qu_angle, qu_normalize
from pyodf.crystal.rotation import eu2om, om2eu, om2qu, qu2om, qu2ax, qu2ro, ro2qu, ax2qu
from pyodf.crystal.symmetry import Symmetry


class Orientation:
    """Crystallographic orientation class.

    This follows the passive rotation definition which means that it brings
    the sample coordinate system into coincidence with the crystal coordinate
    system. Then one may express a vector :math:`V_c` in the crystal coordinate
    system from the vector in the sample coordinate system :math:`V_s` by:

    .. math::

      V_c = g.V_s

    and inversely (because :math:`g^{-1}=g^T`):

    .. math::

      V_s = g^T.V_c

    Orientations are immutable, the product `a * b` is the orientation
    associated with the matrix product :math:`g_a.g_b` and `a.inv()` is the
    inverse rotation.
    """

    def __init__(self, matrix):
        """Initialization from the 9 components of the orientation matrix.

        :raise ValueError: if the matrix is not a proper rotation.
        """
        g = np.array(matrix, dtype=np.float64)
        if g.size != 9:
            raise ValueError('an orientation matrix must have 9 components, '
                             'got %d values' % g.size)
        g = g.reshape((3, 3))
        if not np.all(np.isfinite(g)):
            raise ValueError('orientation matrix contains non finite values')
        if not np.allclose(np.dot(g, g.T), np.eye(3), atol=1e-6) or np.linalg.det(g) < 0:
            raise ValueError('matrix is not a proper rotation:\n%s' % g)
        self._matrix = g
        self.quat = Quaternion(om2qu(g))
        self.euler = np.degrees(om2eu(g))
        self.rod = qu2ro(self.quat.quat)

    def orientation_matrix(self):
        """Returns the orientation matrix in the form of a 3x3 numpy array."""
        return self._matrix.copy()

    def __eq__(self, value: object) -> bool:
        if not isinstance(value, Orientation):
            return NotImplemented
        return np.allclose(self._matrix, value._matrix)

    def __mul__(self, other):
        """Compose two orientations, `a * b` corresponds to :math:`g_a.g_b`."""
        if not isinstance(other, Orientation):
            return NotImplemented
        return Orientation(np.dot(self._matrix, other._matrix))

    def inv(self):
        """Return the inverse orientation (the transposed matrix)."""
        return Orientation(self._matrix.T)

    def __repr__(self):
        """Provide a string representation of the class."""
        s = 'Crystal Orientation \n-------------------'
        s += '\norientation matrix = \n %s' % self._matrix.view()
        s += '\nEuler angles (degrees) = (%8.3f,%8.3f,%8.3f)' % (self.phi1(), self.Phi(), self.phi2())
        s += '\nRodrigues vector = %s' % self.rod
        s += '\nQuaternion = %s' % self.quat
        return s

    def phi1(self):
        """Convenience method to expose the first Euler angle."""
        return self.euler[0]

    def Phi(self):
        """Convenience method to expose the second Euler angle."""
        return self.euler[1]

    def phi2(self):
        """Convenience method to expose the third Euler angle."""
        return self.euler[2]

    def to_crystal(self, v):
        """Transform a vector from the sample frame to the crystal frame.

        :param ndarray v: a 3 component vector expressed in the sample frame.
        :return: the vector expressed in the crystal frame.
        """
        v = np.asarray(v, dtype=np.float64)
        if v.size != 3:
            raise ValueError('input arg must be a 3 components vector, '
                             'got %d values' % v.size)
        return np.dot(self._matrix, v)

    def to_sample(self, v):
        """Transform a vector from the crystal frame to the sample frame.

        :param ndarray v: a 3 component vector expressed in the crystal frame.
        :return: the vector expressed in the sample frame.
        """
        v = np.asarray(v, dtype=np.float64)
        if v.size != 3:
            raise ValueError('input arg must be a 3 components vector, '
                             'got %d values' % v.size)
        return np.dot(self._matrix.T, v)

    def rotation_vector(self):
        """Return the rotation vector, the rotation axis scaled by the
        rotation angle in radians.

        This is the logarithm of the rotation, it is linear in the angle for
        small rotations about a fixed axis.
        """
        ax = qu2ax(self.quat.quat)
        return ax[:3] * ax[3]

    def misorientation_angle(self, orientation, cs=None, ss=None):
        """Compute the misorientation angle with another orientation.

        If symmetries are given, the smallest angle among all the symmetric
        equivalents is returned (this is the disorientation angle).

        :param orientation: the other `Orientation` instance.
        :param cs: the crystal `Symmetry` (triclinic by default).
        :param ss: the specimen `Symmetry` (triclinic by default).
        :returns float: the misorientation angle in radians.
        """
        cs, ss = Symmetry.parse(cs), Symmetry.parse(ss)
        equivalents = symmetric_equivalents(self.quat.quat, cs, ss)
        return float(np.min(qu_angle(equivalents, orientation.quat.quat)))

    @staticmethod
    def cube():
        """Create the particular crystal orientation called Cube and which
        corresponds to euler angle (0, 0, 0)."""
        return Orientation.from_euler((0., 0., 0.))

    @staticmethod
    def brass():
        """Create the particular crystal orientation called Brass and which
        corresponds to euler angle (35.264, 45, 0)."""
        return Orientation.from_euler((35.264, 45., 0.))

    @staticmethod
    def copper():
        """Create the particular crystal orientation called Copper and which
        corresponds to euler angle (90, 35.264, 45)."""
        return Orientation.from_euler((90., 35.264, 45.))

    @staticmethod
    def s3():
        """Create the particular crystal orientation called S3 and which
        corresponds to euler angle (59, 37, 63)."""
        return Orientation.from_euler((58.980, 36.699, 63.435))

    @staticmethod
    def goss():
        """Create the particular crystal orientation called Goss and which
        corresponds to euler angle (0, 45, 0)."""
        return Orientation.from_euler((0., 45., 0.))

    @staticmethod
    def shear():
        """Create the particular crystal orientation called shear and which
        corresponds to euler angle (45, 0, 0)."""
        return Orientation.from_euler((45., 0., 0.))

    @staticmethod
    def random(seed=None):
        """Create a random crystal orientation, uniformly distributed in SO(3)."""
        return Orientation.from_quaternion(random_quaternions(1, seed=seed)[0])

    @staticmethod
    def from_euler(euler, convention='Bunge'):
        """Rotation matrix from Euler angles.

        This is the classical method to obtain an orientation matrix by 3
        successive rotations. The result depends on the convention used
        (how the successive rotation axes are chosen). In the Bunge convention,
        the first rotation is around Z, the second around the new X and the
        third one around the new Z. In the Roe convention, the second one
        is around Y.

        :param euler: the 3 Euler angles in degrees.
        :param str convention: 'Bunge' (default) or 'Roe'.
        """
        if convention == 'Roe':
            (phi1, phi, phi2) = (euler[0] + 90, euler[1], euler[2] - 90)
        else:
            (phi1, phi, phi2) = euler
        return Orientation(eu2om(np.radians([phi1, phi, phi2])))

    @staticmethod
    def from_rodrigues(rod):
        return Orientation(qu2om(ro2qu(rod)))

    @staticmethod
    def from_quaternion(q):
        """Create an orientation from a unit quaternion (4 components array
        or `Quaternion` instance)."""
        if isinstance(q, Quaternion):
            q = q.quat
        return Orientation(qu2om(qu_normalize(q)))

    @staticmethod
    def from_axis_angle(axis, angle):
        """Create the orientation associated with the rotation of the given
        angle about the given axis.

        :param axis: the rotation axis (normalized here).
        :param float angle: the rotation angle in degrees.
        :return: an instance of the `Orientation` class.
        """
        return Orientation(qu2om(ax2qu(axis, np.radians(angle))))

    @staticmethod
    def from_miller(hkl, uvw):
        """Create an orientation from the Miller indices notation (hkl)[uvw].

        The crystal plane normal (hkl) is aligned with the sample Z axis and
        the crystal direction [uvw] with the sample X axis. Indices are taken
        as cartesian components of the crystal frame. If [uvw] is not
        perpendicular to (hkl), its component along the plane normal is
        removed first.

        :param hkl: the 3 Miller indices of the plane parallel to the sample
            surface.
        :param uvw: the 3 Miller indices of the direction parallel to the
            sample X axis.
        :raise ValueError: if [uvw] is parallel to (hkl).
        :return: an instance of the `Orientation` class.
        """
        x3 = np.array(hkl, dtype=np.float64)
        x3 /= np.linalg.norm(x3)
        x1 = np.array(uvw, dtype=np.float64)
        x1 = x1 - np.dot(x1, x3) * x3
        if np.linalg.norm(x1) < 1e-9:
            raise ValueError('direction %s is parallel to the plane normal %s' % (uvw, hkl))
        x1 /= np.linalg.norm(x1)
        x2 = np.cross(x3, x1)
        # the sample axes expressed in the crystal frame are the columns of g
        g = np.array([x1, x2, x3]).transpose()
        return Orientation(g)


def random_quaternions(n, seed=None):
    """Draw n unit quaternions uniformly distributed on SO(3).

    Normalized 4D gaussian vectors are uniform on the unit sphere S3.

    :param int n: the number of quaternions.
    :param seed: seed or `numpy.random.Generator` for reproducibility.
    :return: a (n, 4) array of unit quaternions.
    """
    rng = np.random.default_rng(seed)
    return qu_normalize(rng.normal(size=(n, 4)))


def as_quaternions(orientations):
    """Turn a collection of orientations into a (n, 4) quaternion array.

    :param orientations: a single `Orientation`, a sequence of `Orientation`
        instances, a (4,) or (n, 4) quaternion array or a (3, 3) or (n, 3, 3)
        array of orientation matrices.
    :raise ValueError: if the input cannot be interpreted as orientations.
    :return: a (n, 4) array of unit quaternions.
    """
    if isinstance(orientations, Orientation):
        return orientations.quat.quat[np.newaxis]
    if isinstance(orientations, Quaternion):
        return orientations.quat[np.newaxis]
    if isinstance(orientations, (list, tuple)) and len(orientations) > 0 \
            and all(isinstance(o, Orientation) for o in orientations):
        return np.array([o.quat.quat for o in orientations])
    array = np.asarray(orientations, dtype=np.float64)
    if array.ndim in (1, 2) and array.shape[-1] == 4:
        return qu_normalize(array.reshape((-1, 4)))
    if array.ndim in (2, 3) and array.shape[-2:] == (3, 3):
        return om2qu(array.reshape((-1, 3, 3)))
    raise ValueError('cannot interpret an array of shape %s as orientations' % (array.shape,))


def symmetric_equivalents(q, cs, ss):
    """Compute all the symmetric equivalents :math:`c.g.s` of orientation(s).

    The crystal symmetry operators are left applied and the specimen
    symmetry operators are right applied.

    :param ndarray q: a (4,) or (n, 4) array of quaternions.
    :param Symmetry cs: the crystal symmetry.
    :param Symmetry ss: the specimen symmetry.
    :return: an array of shape (n_cs * n_ss, 4) for a single quaternion or
        (n, n_cs * n_ss, 4) otherwise.
    """
    q = np.asarray(q, dtype=np.float64)
    qc = cs.quaternions()
    qs = ss.quaternions()
    cq = qu_mult(qc[:, np.newaxis], q[..., np.newaxis, np.newaxis, :])  # (..., nc, 1, 4)
    cqs = qu_mult(cq, qs[np.newaxis])  # (..., nc, ns, 4)
    return cqs.reshape(q.shape[:-1] + (-1, 4))
