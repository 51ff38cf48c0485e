"""The symmetry module define the crystal and specimen symmetries used to
evaluate orientation distribution functions.
"""
import enum
import numpy as np
from pyodf.crystal.rotation import om2qu


def _axis_rotation(axis, angle):
    """Active rotation matrix of the given angle (radians) about a unit axis."""
    axis = np.asarray(axis, dtype=np.float64)
    axis = axis / np.linalg.norm(axis)
    c, s = np.cos(angle), np.sin(angle)
    K = np.array([[0., -axis[2], axis[1]],
                  [axis[2], 0., -axis[0]],
                  [-axis[1], axis[0], 0.]])
    R = c * np.eye(3) + s * K + (1 - c) * np.outer(axis, axis)
    # clean up the round off errors for the exact symmetry operators
    R[np.abs(R) < 1e-12] = 0.
    return R


def _dihedral_operators(n):
    """Proper rotations of the dihedral group with a n-fold axis along Z and
    n two-fold axes in the XY plane, the first one along X."""
    sym = [_axis_rotation([0., 0., 1.], 2 * np.pi * k / n) for k in range(n)]
    for k in range(n):
        a = np.pi * k / n
        sym.append(_axis_rotation([np.cos(a), np.sin(a), 0.], np.pi))
    return np.array(sym)


class Symmetry(enum.Enum):
    """
    Class to describe crystal (or specimen) symmetry defined by its Laue
    class symbol.
    """
    cubic = 'm-3m'
    hexagonal = '6/mmm'
    orthorhombic = 'mmm'
    tetragonal = '4/mmm'
    trigonal = '-3m'
    monoclinic = '2/m'
    triclinic = '-1'

    @staticmethod
    def from_string(s):
        """Create a `Symmetry` instance from its name or its Laue symbol.

        Both the name (like 'cubic') and the Laue class symbol (like 'm-3m',
        'm3m' or '-3m') are recognized. Point groups with the same Laue class
        (like '432' or '222') are also accepted.

        :param str s: the symmetry name or symbol.
        :raise ValueError: if the string does not describe a known symmetry.
        :return: an instance of the `Symmetry` class.
        """
        key = s.strip().lower().replace(' ', '')
        aliases = {
            'cubic': Symmetry.cubic, 'm-3m': Symmetry.cubic, 'm3m': Symmetry.cubic,
            '432': Symmetry.cubic, 'o': Symmetry.cubic,
            'hexagonal': Symmetry.hexagonal, '6/mmm': Symmetry.hexagonal, '622': Symmetry.hexagonal,
            'orthorhombic': Symmetry.orthorhombic, 'mmm': Symmetry.orthorhombic, '222': Symmetry.orthorhombic,
            'tetragonal': Symmetry.tetragonal, '4/mmm': Symmetry.tetragonal, '422': Symmetry.tetragonal,
            'trigonal': Symmetry.trigonal, '-3m': Symmetry.trigonal, 'bar3m': Symmetry.trigonal,
            '32': Symmetry.trigonal,
            'monoclinic': Symmetry.monoclinic, '2/m': Symmetry.monoclinic, '2': Symmetry.monoclinic,
            'triclinic': Symmetry.triclinic, '-1': Symmetry.triclinic, 'bar1': Symmetry.triclinic,
            '1': Symmetry.triclinic,
        }
        if key not in aliases:
            raise ValueError('unsupported symmetry: %s' % s)
        return aliases[key]

    @staticmethod
    def parse(value):
        """Return a `Symmetry` from a `Symmetry` instance, a string or None
        (which stands for the triclinic symmetry)."""
        if value is None:
            return Symmetry.triclinic
        if isinstance(value, Symmetry):
            return value
        if isinstance(value, str):
            return Symmetry.from_string(value)
        raise ValueError('cannot interpret %r as a symmetry' % (value,))

    def to_string(self):
        return self.name

    def symmetry_operators(self):
        """Define the equivalent crystal symmetries.

        Only the proper rotations of the Laue class are returned since the
        inversion centre leaves orientations unchanged. For instance in the
        cubic crystal structure there are 24 equivalent cube orientations
        (Randle & Engler, 2000).

        :return array: A numpy array of shape (n, 3, 3) where n is the \
        number of symmetries of the given crystal structure.
        """
        if self is Symmetry.cubic:
            sym = np.zeros((24, 3, 3), dtype=np.float64)
            sym[0] = np.array([[1., 0., 0.], [0., 1., 0.], [0., 0., 1.]])
            sym[1] = np.array([[0., 0., -1.], [0., -1., 0.], [-1., 0., 0.]])
            sym[2] = np.array([[0., 0., -1.], [0., 1., 0.], [1., 0., 0.]])
            sym[3] = np.array([[-1., 0., 0.], [0., 1., 0.], [0., 0., -1.]])
            sym[4] = np.array([[0., 0., 1.], [0., 1., 0.], [-1., 0., 0.]])
            sym[5] = np.array([[1., 0., 0.], [0., 0., -1.], [0., 1., 0.]])
            sym[6] = np.array([[1., 0., 0.], [0., -1., 0.], [0., 0., -1.]])
            sym[7] = np.array([[1., 0., 0.], [0., 0., 1.], [0., -1., 0.]])
            sym[8] = np.array([[0., -1., 0.], [1., 0., 0.], [0., 0., 1.]])
            sym[9] = np.array([[-1., 0., 0.], [0., -1., 0.], [0., 0., 1.]])
            sym[10] = np.array([[0., 1., 0.], [-1., 0., 0.], [0., 0., 1.]])
            sym[11] = np.array([[0., 0., 1.], [1., 0., 0.], [0., 1., 0.]])
            sym[12] = np.array([[0., 1., 0.], [0., 0., 1.], [1., 0., 0.]])
            sym[13] = np.array([[0., 0., -1.], [-1., 0., 0.], [0., 1., 0.]])
            sym[14] = np.array([[0., -1., 0.], [0., 0., 1.], [-1., 0., 0.]])
            sym[15] = np.array([[0., 1., 0.], [0., 0., -1.], [-1., 0., 0.]])
            sym[16] = np.array([[0., 0., -1.], [1., 0., 0.], [0., -1., 0.]])
            sym[17] = np.array([[0., 0., 1.], [-1., 0., 0.], [0., -1., 0.]])
            sym[18] = np.array([[0., -1., 0.], [0., 0., -1.], [1., 0., 0.]])
            sym[19] = np.array([[0., 1., 0.], [1., 0., 0.], [0., 0., -1.]])
            sym[20] = np.array([[-1., 0., 0.], [0., 0., 1.], [0., 1., 0.]])
            sym[21] = np.array([[0., 0., 1.], [0., -1., 0.], [1., 0., 0.]])
            sym[22] = np.array([[0., -1., 0.], [-1., 0., 0.], [0., 0., -1.]])
            sym[23] = np.array([[-1., 0., 0.], [0., 0., -1.], [0., -1., 0.]])
        elif self is Symmetry.hexagonal:
            sym = _dihedral_operators(6)
        elif self is Symmetry.tetragonal:
            sym = _dihedral_operators(4)
        elif self is Symmetry.trigonal:
            sym = _dihedral_operators(3)
        elif self is Symmetry.orthorhombic:
            sym = _dihedral_operators(2)
        elif self is Symmetry.monoclinic:
            # unique axis b (along Y)
            sym = np.array([np.eye(3), _axis_rotation([0., 1., 0.], np.pi)])
        elif self is Symmetry.triclinic:
            sym = np.eye(3)[np.newaxis]
        else:
            raise ValueError('warning, symmetry not supported: %s' % self)
        return sym

    def quaternions(self):
        """The symmetry operators as a (n, 4) array of unit quaternions."""
        return om2qu(self.symmetry_operators())

    def order(self):
        """Number of proper rotations in this symmetry group."""
        return len(self.symmetry_operators())
