"""The odf module provide the :py:class:`~pyodf.odf.odf.ODF` class, a
mixture model built as a weighted sum of ODF components, and the functions
to create the classical model ODFs:

 * the uniform ODF :math:`f(g) = 1`
 * unimodal ODFs defined by a modal orientation and a kernel
 * fibre ODFs defined by a crystal direction, a specimen direction and a kernel
 * ODFs given by their Fourier coefficients
 * Bingham ODFs

Model ODFs may be arbitrarily combined, for instance the classical SantaFe
sample ODF is defined by::

  cs, ss = Symmetry.cubic, Symmetry.orthorhombic
  psi = VonMisesFisherKernel(halfwidth=10 * degree)
  mod1 = Orientation.from_miller([1, 2, 2], [2, 2, 1])
  odf = 0.73 * uniform_odf(cs, ss) + 0.27 * unimodal_odf(mod1, cs, ss, psi)
"""
import numbers
import h5py
import numpy as np
from pyodf.crystal.symmetry import Symmetry
from pyodf.crystal.orientation import Orientation
from pyodf.crystal.quaternion import qu_mult
from pyodf.odf.components import (ODFComponent, UniformComponent, UnimodalComponent,
                                  FibreComponent, FourierComponent, BinghamComponent,
                                  COMPONENT_TYPES)
from pyodf.odf.kernels import VonMisesFisherKernel
from pyodf import degree


class ODF:
    """An orientation distribution function.

    The ODF is a weighted sum of components sharing the same crystal and
    specimen symmetries:

    .. math::

      f(g) = \\sum_i w_i f_i(g)

    ODF instances support the `+`, `-` operators and the multiplication by
    a scalar to create mixture models.
    """

    def __init__(self, components=None, weights=None, comment=''):
        """Create an ODF from a list of components and their weights.

        :param list components: a list of `ODFComponent` instances.
        :param list weights: the weight of each component (1 by default).
        :param str comment: a description of this ODF.
        :raise ValueError: if the components do not share the same
            symmetries or the weights do not match the components.
        """
        if components is None:
            components = []
        elif isinstance(components, ODFComponent):
            components = [components]
        if weights is None:
            weights = [1.] * len(components)
        if len(weights) != len(components):
            raise ValueError('got %d weights for %d components' % (len(weights), len(components)))
        for c in components:
            if not isinstance(c, ODFComponent):
                raise ValueError('%r is not an ODF component' % (c,))
        self.components = list(components)
        self.weights = [float(w) for w in weights]
        self.comment = comment
        self._check_symmetries(self.components)

    @staticmethod
    def _check_symmetries(components):
        if len(components) < 2:
            return
        cs, ss = components[0].cs, components[0].ss
        for c in components[1:]:
            if c.cs is not cs or c.ss is not ss:
                raise ValueError('all ODF components must have the same symmetries, '
                                 'got (%s, %s) and (%s, %s)' % (cs.to_string(), ss.to_string(),
                                                                c.cs.to_string(), c.ss.to_string()))

    @property
    def cs(self):
        """The crystal symmetry of this ODF."""
        return self.components[0].cs if self.components else Symmetry.triclinic

    @property
    def ss(self):
        """The specimen symmetry of this ODF."""
        return self.components[0].ss if self.components else Symmetry.triclinic

    def __repr__(self):
        """Provide a string representation of the class."""
        s = 'ODF'
        if self.comment:
            s += '\n  comment: %s' % self.comment
        s += '\n  crystal symmetry : %s' % self.cs.to_string()
        s += '\n  specimen symmetry: %s' % self.ss.to_string()
        for w, c in zip(self.weights, self.components):
            s += '\n\n  %s\n    weight: %.4g' % (c, w)
        return s

    def __add__(self, other):
        if isinstance(other, numbers.Number) and other == 0:
            # allows the use of sum()
            return self
        if not isinstance(other, ODF):
            return NotImplemented
        comment = self.comment or other.comment
        return ODF(self.components + other.components, self.weights + other.weights, comment=comment)

    __radd__ = __add__

    def __mul__(self, factor):
        if not isinstance(factor, numbers.Number):
            return NotImplemented
        return ODF(self.components, [factor * w for w in self.weights], comment=self.comment)

    __rmul__ = __mul__

    def __neg__(self):
        return -1 * self

    def __sub__(self, other):
        if not isinstance(other, ODF):
            return NotImplemented
        return self + (-other)

    def total_weight(self):
        """Sum of the weights, this is the mean value of the ODF since each
        component is normalized."""
        return float(np.sum(self.weights))

    def eval(self, orientations):
        """Evaluate the ODF at the given orientations.

        :param orientations: anything accepted by
            :py:func:`~pyodf.crystal.orientation.as_quaternions`.
        :return: a (n,) array with the ODF values.
        """
        values = None
        for w, c in zip(self.weights, self.components):
            v = w * c.eval(orientations)
            values = v if values is None else values + v
        if values is None:
            raise ValueError('cannot evaluate an ODF without any component')
        return values

    def grad(self, orientation, options=None, **kwargs):
        """Gradient of the ODF at the given orientation, see
        :py:func:`~pyodf.odf.gradient.grad`."""
        from pyodf.odf.gradient import grad
        return grad(self, orientation, options=options, **kwargs)

    def calc_pole_figure(self, h, r, antipodal=False, n_points=120):
        """Compute the pole figure density of the crystal direction h at the
        specimen directions r, see
        :py:meth:`~pyodf.odf.components.ODFComponent.calc_pole_figure`."""
        values = np.zeros(len(np.atleast_2d(r)), dtype=np.float64)
        for w, c in zip(self.weights, self.components):
            values += w * c.calc_pole_figure(h, r, antipodal=antipodal, n_points=n_points)
        return values

    def to_h5(self, file_path, verbose=False):
        """Save this ODF to a HDF5 file.

        Each component is stored in its own group ``component_i`` with its
        type and weight as attributes, arrays as datasets and other values
        as attributes.

        :param str file_path: the path of the file to write.
        :param bool verbose: verbose mode (False by default).
        """
        with h5py.File(file_path, 'w') as f:
            f.attrs['comment'] = self.comment
            f.attrs['n_components'] = len(self.components)
            for i, (w, c) in enumerate(zip(self.weights, self.components)):
                group = f.create_group('component_%d' % i)
                group.attrs['type'] = c.__class__.__name__
                group.attrs['weight'] = w
                for key, value in c.to_dict().items():
                    if isinstance(value, np.ndarray):
                        group.create_dataset(key, data=value)
                    else:
                        group.attrs[key] = value
                if verbose:
                    print('writing %s with weight %.4g to %s' % (c.__class__.__name__, w, file_path))

    @staticmethod
    def from_h5(file_path, verbose=False):
        """Load an ODF from a HDF5 file written by :py:meth:`to_h5`.

        :param str file_path: the path of the file to read.
        :param bool verbose: verbose mode (False by default).
        :raise ValueError: if a component type is unknown.
        :return: a new `ODF` instance.
        """
        components, weights = [], []
        with h5py.File(file_path, 'r') as f:
            comment = f.attrs['comment']
            if isinstance(comment, bytes):
                comment = comment.decode()
            for i in range(int(f.attrs['n_components'])):
                group = f['component_%d' % i]
                type_name = group.attrs['type']
                if isinstance(type_name, bytes):
                    type_name = type_name.decode()
                if type_name not in COMPONENT_TYPES:
                    raise ValueError('unknown ODF component type: %s' % type_name)
                d = {key: value for key, value in group.attrs.items() if key not in ['type', 'weight']}
                for key in group.keys():
                    d[key] = group[key][()]
                components.append(COMPONENT_TYPES[type_name].from_dict(d))
                weights.append(float(group.attrs['weight']))
                if verbose:
                    print('read %s with weight %.4g from %s' % (type_name, weights[-1], file_path))
        return ODF(components, weights, comment=comment)


def uniform_odf(cs=None, ss=None, comment=''):
    """Create the uniform ODF :math:`f(g) = 1`.

    :param cs: the crystal symmetry (`Symmetry` or string).
    :param ss: the specimen symmetry (`Symmetry` or string).
    :param str comment: a description of the ODF.
    """
    return ODF([UniformComponent(cs=cs, ss=ss)], comment=comment)


def unimodal_odf(center, cs=None, ss=None, kernel=None, comment=''):
    """Create a unimodal ODF.

    If no kernel is given the de la Vallee Poussin kernel with a halfwidth
    of 10 degrees is used.

    :param center: the modal `Orientation`.
    :param cs: the crystal symmetry (`Symmetry` or string).
    :param ss: the specimen symmetry (`Symmetry` or string).
    :param kernel: the `Kernel` defining the shape.
    :param str comment: a description of the ODF.
    """
    return ODF([UnimodalComponent(center, kernel=kernel, cs=cs, ss=ss)], comment=comment)


def fibre_odf(h, r, cs=None, ss=None, kernel=None, comment=''):
    """Create a fibre ODF.

    :param h: the crystal direction of the fibre.
    :param r: the specimen direction of the fibre.
    :param cs: the crystal symmetry (`Symmetry` or string).
    :param ss: the specimen symmetry (`Symmetry` or string).
    :param kernel: the `Kernel` defining the shape.
    :param str comment: a description of the ODF.
    """
    return ODF([FibreComponent(h, r, kernel=kernel, cs=cs, ss=ss)], comment=comment)


def fourier_odf(coefficients, cs=None, ss=None, comment=''):
    """Create an ODF from its Fourier coefficients.

    :param coefficients: the complex coefficient vector, see
        :py:class:`~pyodf.odf.components.FourierComponent` for the ordering.
    :param cs: the crystal symmetry (`Symmetry` or string).
    :param ss: the specimen symmetry (`Symmetry` or string).
    :param str comment: a description of the ODF.
    """
    return ODF([FourierComponent(coefficients, cs=cs, ss=ss)], comment=comment)


def bingham_odf(kappa, A, cs=None, ss=None, comment='', verbose=False):
    """Create a Bingham ODF.

    ::

      mod = Orientation.from_euler((45., 0., 0.))
      odf = bingham_odf(20, quaternion_basis(mod), '-3m', '-1')

    :param kappa: the 4 shape parameters or a single value (then the
        others are 0).
    :param A: 4 orthonormal quaternions, as a (4, 4) array (one quaternion
        per row) or a list of 4 `Orientation` instances.
    :param cs: the crystal symmetry (`Symmetry` or string).
    :param ss: the specimen symmetry (`Symmetry` or string).
    :param str comment: a description of the ODF.
    :param bool verbose: verbose mode (False by default).
    """
    return ODF([BinghamComponent(kappa, A, cs=cs, ss=ss, verbose=verbose)], comment=comment)


def quaternion_basis(orientation=None):
    """Return the 4 orthonormal quaternions :math:`x.e_i` where :math:`e_i`
    are the 4 unit quaternions, as a (4, 4) array.

    The first quaternion is the one of the given orientation (identity by
    default), which makes it the mode of a unimodal Bingham ODF.
    """
    basis = np.eye(4)
    if orientation is None:
        return basis
    return qu_mult(orientation.quat.quat[np.newaxis], basis)


def santafe_odf():
    """Create the classical SantaFe sample ODF.

    This is a mixture of 73% of uniform portion and 27% of a unimodal
    component centered on (122)[221] with a von Mises Fisher kernel of 10
    degrees halfwidth, with cubic crystal and orthorhombic specimen symmetry.
    """
    cs, ss = Symmetry.cubic, Symmetry.orthorhombic
    psi = VonMisesFisherKernel(halfwidth=10 * degree)
    mod1 = Orientation.from_miller([1, 2, 2], [2, 2, 1])
    return 0.73 * uniform_odf(cs, ss, comment='the SantaFe-sample ODF') \
        + 0.27 * unimodal_odf(mod1, cs, ss, kernel=psi)
