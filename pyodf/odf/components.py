"""The components module provide the elementary model ODF components.

Each component describes a probability density on SO(3) normalized to a
mean value of 1 and exposes a batched ``eval`` method:

 * :py:class:`~pyodf.odf.components.UniformComponent`
 * :py:class:`~pyodf.odf.components.UnimodalComponent`
 * :py:class:`~pyodf.odf.components.FibreComponent`
 * :py:class:`~pyodf.odf.components.FourierComponent`
 * :py:class:`~pyodf.odf.components.BinghamComponent`

The crystal symmetry (cs) and specimen symmetry (ss) are explicit arguments
of every component. A component is evaluated as the mean over all the
symmetric equivalents :math:`c.g.s` of the orientation :math:`g`, which keeps
the normalization whatever the symmetries.
"""
import math
import numpy as np
from scipy.integrate import quad
from scipy.special import ive
from pyodf.crystal.symmetry import Symmetry
from pyodf.crystal.orientation import Orientation, as_quaternions, symmetric_equivalents
from pyodf.crystal.quaternion import qu_mult
from pyodf.crystal.rotation import qu2om, om2qu, ax2qu, qu2eu_zyz
from pyodf.odf.kernels import Kernel, DeLaValleePoussinKernel

# number of orientations evaluated at once, limits the memory footprint
CHUNK_SIZE = 4096


def _unit_vectors(v):
    """Normalize a (3,) or (n, 3) array of vectors."""
    v = np.asarray(v, dtype=np.float64)
    norm = np.linalg.norm(v, axis=-1, keepdims=True)
    if np.any(norm == 0):
        raise ValueError('direction vectors must not be zero')
    return v / norm


def fibre_quaternions(h, r, n_points):
    """Sample the fibres of rotations bringing the crystal direction h onto
    the specimen directions r.

    For each direction r, a rotation :math:`g_0` verifying
    :math:`g_0^T.h = r` is built and the fibre is obtained by composing it
    with rotations of angle :math:`\\phi` about h.

    :param h: the crystal direction (3 components).
    :param r: a (m, 3) array of specimen directions.
    :param int n_points: number of points along each fibre.
    :return: a (m, n_points, 4) array of unit quaternions.
    """
    h = _unit_vectors(h)
    r = np.atleast_2d(_unit_vectors(r))
    c = r.dot(h)
    v = np.cross(r, h)
    K = np.zeros((len(r), 3, 3))
    K[:, 0, 1], K[:, 0, 2], K[:, 1, 2] = -v[:, 2], v[:, 1], -v[:, 0]
    K[:, 1, 0], K[:, 2, 0], K[:, 2, 1] = v[:, 2], -v[:, 1], v[:, 0]
    antiparallel = c < -1 + 1e-9
    denom = np.where(antiparallel, 1.0, 1 + c)
    g0 = np.eye(3) + K + np.matmul(K, K) / denom[:, np.newaxis, np.newaxis]
    if np.any(antiparallel):
        # rotation by pi about any axis perpendicular to h
        n = np.cross(h, [1., 0., 0.])
        if np.linalg.norm(n) < 1e-6:
            n = np.cross(h, [0., 1., 0.])
        n /= np.linalg.norm(n)
        g0[antiparallel] = 2 * np.outer(n, n) - np.eye(3)
    q0 = om2qu(g0)
    phis = np.linspace(0., 2 * np.pi, n_points, endpoint=False)
    q_phi = ax2qu(h, phis)
    return qu_mult(q_phi[np.newaxis, :, :], q0[:, np.newaxis, :])


class ODFComponent:
    """Base class for the ODF components.

    Subclasses implement ``_eval`` on a (n, 4) array of unit quaternions.
    """

    def __init__(self, cs=None, ss=None):
        self.cs = Symmetry.parse(cs)
        self.ss = Symmetry.parse(ss)

    def __repr__(self):
        return '%s (cs=%s, ss=%s)' % (self.__class__.__name__,
                                      self.cs.to_string(), self.ss.to_string())

    def eval(self, orientations):
        """Evaluate the density at the given orientations.

        :param orientations: anything accepted by
            :py:func:`~pyodf.crystal.orientation.as_quaternions`.
        :return: a (n,) array with the density values.
        """
        q = as_quaternions(orientations)
        values = np.empty(len(q), dtype=np.float64)
        for start in range(0, len(q), CHUNK_SIZE):
            values[start:start + CHUNK_SIZE] = self._eval(q[start:start + CHUNK_SIZE])
        return values

    def _eval(self, q):
        raise NotImplementedError

    def grad(self, orientation, options=None, **kwargs):
        """Gradient of the density at the given orientation, see
        :py:func:`~pyodf.odf.gradient.grad`."""
        from pyodf.odf.gradient import grad
        return grad(self, orientation, options=options, **kwargs)

    def calc_pole_figure(self, h, r, antipodal=False, n_points=120):
        """Compute the pole figure density of the crystal direction h at the
        specimen directions r.

        The value is the mean density along the fibre of all the rotations
        bringing h onto r. When antipodal is True the densities for h and -h
        are averaged.

        :param h: the crystal direction (3 components).
        :param r: a (3,) or (m, 3) array of specimen directions.
        :param bool antipodal: whether to use antipodal symmetry.
        :param int n_points: number of points sampled along each fibre.
        :return: a (m,) array of pole figure densities (mean 1 on the sphere).
        """
        r = np.atleast_2d(r)
        hs = [h, -np.asarray(h, dtype=np.float64)] if antipodal else [h]
        values = np.zeros(len(r), dtype=np.float64)
        for hh in hs:
            q = fibre_quaternions(hh, r, n_points)
            values += self.eval(q.reshape((-1, 4))).reshape((len(r), n_points)).mean(axis=1)
        return values / len(hs)

    def to_dict(self):
        return {'cs': self.cs.to_string(), 'ss': self.ss.to_string()}


class UniformComponent(ODFComponent):
    """The uniform ODF component :math:`f(g) = 1`."""

    def _eval(self, q):
        return np.ones(len(q), dtype=np.float64)

    def calc_pole_figure(self, h, r, antipodal=False, n_points=None):
        return np.ones(len(np.atleast_2d(r)), dtype=np.float64)

    @staticmethod
    def from_dict(d):
        return UniformComponent(cs=d['cs'], ss=d['ss'])


class UnimodalComponent(ODFComponent):
    """A unimodal ODF component.

    .. math::

      f(g; x) = \\psi(\\angle(g, x))

    is specified by a radially symmetric kernel function :math:`\\psi`
    centered at a modal orientation :math:`x`.
    """

    def __init__(self, center, kernel=None, cs=None, ss=None):
        ODFComponent.__init__(self, cs=cs, ss=ss)
        if isinstance(center, Orientation):
            center = center.quat.quat
        self.center = as_quaternions(center)[0]
        self.kernel = kernel if kernel is not None else DeLaValleePoussinKernel()
        self._modes = symmetric_equivalents(self.center, self.cs, self.ss)

    def __repr__(self):
        center = Orientation.from_quaternion(self.center)
        return '%s\n    center: (%.1f, %.1f, %.1f)\n    kernel: %s' % (
            ODFComponent.__repr__(self), center.phi1(), center.Phi(), center.phi2(), self.kernel)

    def _eval(self, q):
        t = np.abs(np.dot(q, self._modes.T))
        return np.mean(self.kernel.eval_cos(t), axis=1)

    def calc_pole_figure(self, h, r, antipodal=False, n_points=None):
        """Closed form pole figure through the Radon transform of the kernel."""
        h = _unit_vectors(h)
        r = np.atleast_2d(_unit_vectors(r))
        # crystal direction h expressed in the specimen frame for each mode
        hs = np.einsum('kji,j->ki', qu2om(self._modes), h)
        cos_theta = np.dot(r, hs.T)
        values = self.kernel.radon(cos_theta)
        if antipodal:
            values = 0.5 * (values + self.kernel.radon(-cos_theta))
        return np.mean(values, axis=1)

    def to_dict(self):
        d = ODFComponent.to_dict(self)
        d.update({'center': self.center, 'kernel_name': self.kernel.name,
                  'kernel_kappa': self.kernel.kappa})
        return d

    @staticmethod
    def from_dict(d):
        kernel = Kernel.from_dict({'name': d['kernel_name'], 'kappa': d['kernel_kappa']})
        return UnimodalComponent(d['center'], kernel=kernel, cs=d['cs'], ss=d['ss'])


class FibreComponent(ODFComponent):
    """A fibre ODF component.

    A fibre is the set of rotations mapping a crystal direction h onto a
    specimen direction r, i.e. :math:`g^T.h = r` with the passive convention.
    The density is

    .. math::

      f(g; h, r) = \\hat{\\psi}(\\angle(g^T.h, r))

    where :math:`\\hat{\\psi}` is the Radon transform of the kernel.
    """

    def __init__(self, h, r, kernel=None, cs=None, ss=None):
        ODFComponent.__init__(self, cs=cs, ss=ss)
        self.h = _unit_vectors(h)
        self.r = _unit_vectors(r)
        if self.h.shape != (3,) or self.r.shape != (3,):
            raise ValueError('fibre directions must have 3 components')
        self.kernel = kernel if kernel is not None else DeLaValleePoussinKernel()
        # symmetric equivalents of the crystal and specimen directions
        self._hs = np.dot(self.cs.symmetry_operators(), self.h)
        self._rs = np.dot(self.ss.symmetry_operators(), self.r)

    def __repr__(self):
        return '%s\n    h: %s\n    r: %s\n    kernel: %s' % (
            ODFComponent.__repr__(self), self.h, self.r, self.kernel)

    def _eval(self, q):
        g = qu2om(q)
        # g^T.h for all symmetric equivalents of h: shape (n, n_cs, 3)
        hs = np.einsum('nji,kj->nki', g, self._hs)
        cos_theta = np.einsum('nki,li->nkl', hs, self._rs)
        values = self.kernel.radon(cos_theta)
        return values.reshape((len(q), -1)).mean(axis=1)

    def to_dict(self):
        d = ODFComponent.to_dict(self)
        d.update({'h': self.h, 'r': self.r, 'kernel_name': self.kernel.name,
                  'kernel_kappa': self.kernel.kappa})
        return d

    @staticmethod
    def from_dict(d):
        kernel = Kernel.from_dict({'name': d['kernel_name'], 'kappa': d['kernel_kappa']})
        return FibreComponent(d['h'], d['r'], kernel=kernel, cs=d['cs'], ss=d['ss'])


def wigner_d(l, beta):
    """Compute the Wigner small d matrix of degree l.

    .. math::

      d^l_{mn}(\\beta) = \\sum_s (-1)^{m-n+s}
        \\frac{\\sqrt{(l+m)!(l-m)!(l+n)!(l-n)!}}{(l+n-s)!s!(m-n+s)!(l-m-s)!}
        \\cos(\\beta/2)^{2l+n-m-2s} \\sin(\\beta/2)^{m-n+2s}

    :param int l: the degree.
    :param beta: the angle(s) in radians, shape (k,).
    :return: an array of shape (k, 2l+1, 2l+1), indices ordered from -l to l.
    """
    beta = np.atleast_1d(np.asarray(beta, dtype=np.float64))
    c = np.cos(0.5 * beta)
    s = np.sin(0.5 * beta)
    f = math.factorial
    d = np.zeros((len(beta), 2 * l + 1, 2 * l + 1), dtype=np.float64)
    for m in range(-l, l + 1):
        for n in range(-l, l + 1):
            pre = math.sqrt(f(l + m) * f(l - m) * f(l + n) * f(l - n))
            for k in range(max(0, n - m), min(l + n, l - m) + 1):
                coef = (-1) ** (m - n + k) * pre / (f(l + n - k) * f(k) * f(m - n + k) * f(l - m - k))
                d[:, m + l, n + l] += coef * c ** (2 * l + n - m - 2 * k) * s ** (m - n + 2 * k)
    return d


def fourier_size(bandwidth):
    """Number of Fourier coefficients up to the given bandwidth."""
    return sum((2 * l + 1) ** 2 for l in range(bandwidth + 1))


class FourierComponent(ODFComponent):
    """An ODF component given by its Fourier coefficients.

    .. math::

      f(g) = \\Re \\sum_{l=0}^{L} \\sum_{m,n=-l}^{l} C^l_{mn} D^l_{mn}(g)

    The Wigner D functions :math:`D^l_{mn} = e^{-im\\alpha} d^l_{mn}(\\beta) e^{-in\\gamma}`
    are evaluated with the ZYZ Euler angles of the rotation :math:`g^T`.
    The coefficients are given as a vector ordered by degree l, each block
    being the (2l+1)x(2l+1) matrix :math:`C^l` flattened row by row
    (m from -l to l, then n from -l to l):

    .. math::

      C = [C_0, C_1^{-1-1}, C_1^{-10}, \\ldots, C_1^{11}, C_2^{-2-2}, \\ldots, C_L^{LL}]

    :math:`C_0` is the mean value of the ODF and should be 1.
    """

    def __init__(self, coefficients, cs=None, ss=None):
        ODFComponent.__init__(self, cs=cs, ss=ss)
        C = np.asarray(coefficients, dtype=np.complex128).ravel()
        L = 0
        while fourier_size(L) < len(C):
            L += 1
        if len(C) == 0 or fourier_size(L) != len(C):
            raise ValueError('wrong number of Fourier coefficients: %d (expected %d or %d)'
                             % (len(C), fourier_size(max(L - 1, 0)), fourier_size(L)))
        self.coefficients = C
        self.bandwidth = L

    def __repr__(self):
        return '%s\n    bandwidth: %d' % (ODFComponent.__repr__(self), self.bandwidth)

    def coefficient_block(self, l):
        """Return the (2l+1)x(2l+1) matrix of coefficients of degree l."""
        if not 0 <= l <= self.bandwidth:
            raise ValueError('degree %d outside [0, %d]' % (l, self.bandwidth))
        start = fourier_size(l - 1) if l > 0 else 0
        return self.coefficients[start:start + (2 * l + 1) ** 2].reshape((2 * l + 1, 2 * l + 1))

    def _eval(self, q):
        equivalents = symmetric_equivalents(q, self.cs, self.ss)
        n_sym = equivalents.shape[1]
        alpha, beta, gamma = qu2eu_zyz(equivalents.reshape((-1, 4))).T
        values = np.zeros(len(alpha), dtype=np.complex128)
        for l in range(self.bandwidth + 1):
            m = np.arange(-l, l + 1)
            d = wigner_d(l, beta)
            ea = np.exp(-1j * np.outer(alpha, m))
            eg = np.exp(-1j * np.outer(gamma, m))
            values += np.einsum('mn,km,kmn,kn->k', self.coefficient_block(l), ea, d, eg)
        return values.real.reshape((len(q), n_sym)).mean(axis=1)

    def to_dict(self):
        d = ODFComponent.to_dict(self)
        d['coefficients'] = self.coefficients
        return d

    @staticmethod
    def from_dict(d):
        return FourierComponent(d['coefficients'], cs=d['cs'], ss=d['ss'])


def bingham_normalization(kappa):
    """Compute the normalization constant of the Bingham distribution on the
    unit quaternion sphere, scaled by :math:`e^{-\\max\\kappa}`.

    The constant is the hypergeometric function of matrix argument
    :math:`{}_1F_1(1/2; 2; \\kappa)`. Using Hopf coordinates it reduces to
    the one dimensional integral

    .. math::

      \\int_0^1 e^{\\frac{\\kappa_1+\\kappa_2}{2}t + \\frac{\\kappa_3+\\kappa_4}{2}(1-t)}
        I_0\\left(\\frac{\\kappa_1-\\kappa_2}{2}t\\right)
        I_0\\left(\\frac{\\kappa_3-\\kappa_4}{2}(1-t)\\right) dt

    :param kappa: the 4 shape parameters.
    :return: :math:`{}_1F_1(1/2; 2; \\kappa) e^{-\\max\\kappa}`.
    """
    k1, k2, k3, k4 = np.asarray(kappa, dtype=np.float64)
    k_max = max(k1, k2, k3, k4)

    def integrand(t):
        return (np.exp(max(k1, k2) * t + max(k3, k4) * (1 - t) - k_max)
                * ive(0, 0.5 * (k1 - k2) * t) * ive(0, 0.5 * (k3 - k4) * (1 - t)))

    value, _ = quad(integrand, 0., 1., limit=200)
    return value


class BinghamComponent(ODFComponent):
    """A Bingham ODF component.

    .. math::

      f(g; A, \\kappa) = \\frac{1}{{}_1F_1(\\frac{1}{2}; 2; \\kappa)}
        \\exp(q^T A K A^T q)

    where q is the unit quaternion of g, A a (4x4) orthogonal matrix whose
    columns are 4 orthogonal quaternions and K the diagonal matrix of the
    shape parameters. Depending on kappa the component is unimodal (one large
    value), a fibre (two equal large values) or spherical (three).
    """

    def __init__(self, kappa, A, cs=None, ss=None, verbose=False):
        ODFComponent.__init__(self, cs=cs, ss=ss)
        kappa = np.atleast_1d(np.asarray(kappa, dtype=np.float64))
        if kappa.size == 1:
            kappa = np.array([kappa[0], 0., 0., 0.])
        if kappa.shape != (4,) or not np.all(np.isfinite(kappa)):
            raise ValueError('kappa must be a scalar or 4 finite values, got %s' % kappa)
        if isinstance(A, (list, tuple)) and all(isinstance(a, Orientation) for a in A):
            A = np.array([a.quat.quat for a in A])
        A = np.asarray(A, dtype=np.float64)
        if A.shape != (4, 4):
            raise ValueError('A must hold 4 quaternions, got shape %s' % (A.shape,))
        if not np.allclose(np.dot(A, A.T), np.eye(4), atol=1e-6):
            raise ValueError('the 4 quaternions of A must be orthonormal')
        self.kappa = kappa
        # quaternions stored as columns
        self.A = A.T
        self.C = bingham_normalization(kappa)
        if verbose:
            print('Bingham normalization constant: %g (kappa=%s)' % (self.C * np.exp(kappa.max()), kappa))

    def __repr__(self):
        return '%s\n    kappa: %s' % (ODFComponent.__repr__(self), self.kappa)

    def _eval(self, q):
        equivalents = symmetric_equivalents(q, self.cs, self.ss)
        x = np.dot(equivalents, self.A)
        exponent = np.dot(x ** 2, self.kappa) - self.kappa.max()
        return np.mean(np.exp(exponent), axis=1) / self.C

    def to_dict(self):
        d = ODFComponent.to_dict(self)
        d.update({'kappa': self.kappa, 'A': self.A.T})
        return d

    @staticmethod
    def from_dict(d):
        return BinghamComponent(d['kappa'], d['A'], cs=d['cs'], ss=d['ss'])


COMPONENT_TYPES = {cls.__name__: cls for cls in [UniformComponent, UnimodalComponent, FibreComponent,
                                                  FourierComponent, BinghamComponent]}
