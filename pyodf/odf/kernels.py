"""The kernels module define radially symmetric functions on SO(3).

A kernel :math:`\\psi` only depends on the rotation angle :math:`\\omega`
between an orientation and a modal orientation. It is used to build unimodal
and fibre model ODFs. All kernels are normalized so that their mean value
over SO(3) (with the normalized Haar measure) is 1.
"""
import numpy as np
from scipy.optimize import brentq
from scipy.special import betaln, ive
from pyodf import DEFAULT_HALFWIDTH


class Kernel:
    """Base class for SO(3) kernels.

    Subclasses implement :py:meth:`eval_cos` which gives the kernel value as
    a function of :math:`t = \\cos(\\omega/2)`, the absolute value of the dot
    product between the two unit quaternions.
    """
    name = 'kernel'

    def __init__(self, kappa):
        kappa = float(kappa)
        if not np.isfinite(kappa) or kappa <= 0:
            raise ValueError('kernel parameter kappa must be positive, got %s' % kappa)
        self.kappa = kappa

    def __repr__(self):
        return '%s kernel, kappa = %.3f, halfwidth = %.2f degrees' % (
            self.name, self.kappa, np.degrees(self.halfwidth))

    def __eq__(self, other):
        return type(self) is type(other) and np.isclose(self.kappa, other.kappa)

    def eval_cos(self, t):
        raise NotImplementedError

    def eval(self, omega):
        """Evaluate the kernel for the given rotation angle(s) in radians."""
        return self.eval_cos(np.abs(np.cos(0.5 * np.asarray(omega, dtype=np.float64))))

    @property
    def halfwidth(self):
        """The angle (radians) at which the kernel falls to half its maximum."""
        peak = self.eval(0.)
        if self.eval(np.pi) > 0.5 * peak:
            return np.pi
        return brentq(lambda w: self.eval(w) - 0.5 * peak, 0., np.pi)

    def radon(self, cos_theta, n_points=128):
        """Fibre (Radon) transform of the kernel.

        This is the mean value of the kernel along a fibre at an angle
        :math:`\\theta` from the kernel centre, i.e. the pole figure density
        of a unimodal ODF or the density of a fibre ODF. For a point of the
        fibre at rotation :math:`\\phi` around the fibre axis,
        :math:`\\cos(\\omega/2) = \\cos(\\theta/2)\\cos(\\phi/2)`, the integral
        over :math:`\\phi` is computed with a Gauss-Legendre quadrature.

        :param cos_theta: cosine(s) of the angle between the two directions.
        :param int n_points: number of quadrature points.
        :return: the transform value(s), with mean 1 over the sphere.
        """
        cos_theta = np.clip(np.asarray(cos_theta, dtype=np.float64), -1.0, 1.0)
        x, w = np.polynomial.legendre.leggauss(n_points)
        # map the nodes from [-1, 1] to [0, pi / 2]
        u = 0.25 * np.pi * (x + 1)
        w = 0.25 * np.pi * w
        c = np.sqrt(0.5 * (1 + cos_theta))
        values = self.eval_cos(c[..., np.newaxis] * np.cos(u))
        return 2 / np.pi * np.sum(values * w, axis=-1)

    def to_dict(self):
        return {'name': self.name, 'kappa': self.kappa}

    @staticmethod
    def from_dict(d):
        return get_kernel(d['name'], kappa=d['kappa'])


class DeLaValleePoussinKernel(Kernel):
    """The de la Vallee Poussin kernel.

    .. math::

      \\psi(\\omega) = \\frac{B(3/2, 1/2)}{B(3/2, \\kappa + 1/2)} \\cos^{2\\kappa}(\\omega/2)

    Its Radon transform has the closed form
    :math:`(1 + \\kappa) \\left(\\frac{1 + \\cos\\theta}{2}\\right)^\\kappa`.
    """
    name = 'de la Vallee Poussin'

    def __init__(self, kappa=None, halfwidth=None):
        if kappa is None:
            if halfwidth is None:
                halfwidth = DEFAULT_HALFWIDTH
            if not 0 < halfwidth < np.pi:
                raise ValueError('halfwidth must be in ]0, pi[, got %s' % halfwidth)
            kappa = 0.5 * np.log(0.5) / np.log(np.cos(0.5 * halfwidth))
        Kernel.__init__(self, kappa)
        self.C = np.exp(betaln(1.5, 0.5) - betaln(1.5, self.kappa + 0.5))

    def eval_cos(self, t):
        t = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
        return self.C * t ** (2 * self.kappa)

    @property
    def halfwidth(self):
        return 2 * np.arccos(0.5 ** (0.5 / self.kappa))

    def radon(self, cos_theta, n_points=None):
        cos_theta = np.clip(np.asarray(cos_theta, dtype=np.float64), -1.0, 1.0)
        return (1 + self.kappa) * (0.5 * (1 + cos_theta)) ** self.kappa


class VonMisesFisherKernel(Kernel):
    """The von Mises Fisher kernel.

    .. math::

      \\psi(\\omega) = \\frac{e^{\\kappa\\cos\\omega}}{I_0(\\kappa) - I_1(\\kappa)}

    Exponentially scaled Bessel functions are used so that large values of
    :math:`\\kappa` do not overflow.
    """
    name = 'von Mises Fisher'

    def __init__(self, kappa=None, halfwidth=None):
        if kappa is None:
            if halfwidth is None:
                halfwidth = DEFAULT_HALFWIDTH
            if not 0 < halfwidth < np.pi:
                raise ValueError('halfwidth must be in ]0, pi[, got %s' % halfwidth)
            kappa = np.log(2) / (1 - np.cos(halfwidth))
        Kernel.__init__(self, kappa)
        self.C = 1. / (ive(0, self.kappa) - ive(1, self.kappa))

    def eval_cos(self, t):
        t = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)
        cos_omega = 2 * t ** 2 - 1
        return self.C * np.exp(self.kappa * (cos_omega - 1))

    @property
    def halfwidth(self):
        c = 1 - np.log(2) / self.kappa
        if c <= -1:
            return np.pi
        return np.arccos(c)

    def radon(self, cos_theta, n_points=None):
        cos_theta = np.clip(np.asarray(cos_theta, dtype=np.float64), -1.0, 1.0)
        u = 0.5 * (1 + cos_theta)
        return self.C * ive(0, self.kappa * u) * np.exp(2 * self.kappa * (u - 1))


def get_kernel(name='de la Vallee Poussin', halfwidth=None, kappa=None):
    """Create a kernel from its name.

    ::

      psi = get_kernel('von Mises Fisher', halfwidth=10 * degree)

    :param str name: the kernel name, 'de la Vallee Poussin' (default, also
        'dlvp') or 'von Mises Fisher' (also 'vmf').
    :param float halfwidth: the kernel halfwidth in radians (10 degrees by
        default).
    :param float kappa: the kernel parameter, takes precedence over the
        halfwidth.
    :raise ValueError: if the kernel name is unknown.
    :return: a `Kernel` instance.
    """
    key = name.lower().replace(' ', '').replace('_', '')
    if key in ['delavalleepoussin', 'dlvp', 'vallee']:
        return DeLaValleePoussinKernel(kappa=kappa, halfwidth=halfwidth)
    elif key in ['vonmisesfisher', 'vmf', 'misesfisher']:
        return VonMisesFisherKernel(kappa=kappa, halfwidth=halfwidth)
    else:
        raise ValueError('unknown kernel: %s' % name)
