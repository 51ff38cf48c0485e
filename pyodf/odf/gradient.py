"""The gradient module estimates the gradient of an ODF (or of a single ODF
component) at a given orientation.

The estimate uses central finite differences along small rotations about
the three crystal axes x, y and z. For each axis :math:`e_i` and a step
:math:`\\delta`, the rotation :math:`r_i` of angle :math:`\\delta/2` about
:math:`e_i` is built and

.. math::

  g_i = \\frac{f(r_i.g) - f(r_i^{-1}.g)}{\\delta}

with :math:`g` the passive orientation matrix. Left-applying :math:`r_i` to
:math:`g` rotates the crystal about its own axis :math:`e_i`.

The six densities are computed with a single batched call to ``eval``, the
three "minus" perturbations first (x, y, z) then the three "plus"
perturbations (x, y, z). The truncation error is of order
:math:`\\delta^2`.
"""
import numpy as np
from pyodf import DEFAULT_GRAD_DELTA
from pyodf.crystal.orientation import Orientation

# the reference axes x, y, z of the crystal frame
REFERENCE_AXES = np.eye(3)


class EvaluationError(RuntimeError):
    """Raised when the density evaluation does not return one real value per
    requested orientation."""
    pass


class GradientOptions:
    """Options of the gradient estimator.

    Angles are in radians, use ``GradientOptions(delta=0.5 * degree)`` or
    ``GradientOptions.from_degrees(0.5)``.
    """

    def __init__(self, delta=DEFAULT_GRAD_DELTA):
        """Create the options.

        :param float delta: the finite difference step in radians (1 degree
            by default).
        """
        self.delta = delta

    def __repr__(self):
        return 'GradientOptions(delta=%g rad = %g degrees)' % (self.delta, np.degrees(self.delta))

    @staticmethod
    def from_degrees(delta):
        """Create the options from a step given in degrees."""
        return GradientOptions(delta=np.radians(delta))


def _check_delta(delta):
    try:
        delta = float(delta)
    except (TypeError, ValueError):
        raise ValueError('delta must be a real number, got %r' % (delta,))
    if not np.isfinite(delta) or delta <= 0:
        raise ValueError('delta must be strictly positive, got %s' % delta)
    return delta


def _check_orientation(orientation):
    """Return an `Orientation` instance from an orientation, a 3x3 matrix or
    a unit quaternion."""
    if isinstance(orientation, Orientation):
        return orientation
    array = np.asarray(orientation, dtype=np.float64)
    if array.size == 9:
        return Orientation(array)
    if array.size == 4:
        if not np.isclose(np.linalg.norm(array), 1., atol=1e-6):
            raise ValueError('quaternion %s is not normalized' % array)
        return Orientation.from_quaternion(array.ravel())
    raise ValueError('expected a single orientation, got an array of shape %s' % (array.shape,))


def perturbation_rotations(delta):
    """Build the 3 rotations of angle delta / 2 about the x, y and z axes.

    :param float delta: the finite difference step in radians.
    :return: a list of 3 `Orientation` instances.
    """
    return [Orientation.from_axis_angle(axis, np.degrees(0.5 * delta)) for axis in REFERENCE_AXES]


def perturbed_orientations(orientation, delta):
    """The 6 orientations at which the density is evaluated.

    The list holds :math:`r_i^{-1}.o` for x, y, z followed by :math:`r_i.o`
    for x, y, z, the perturbations being expressed in the crystal frame.
    """
    rots = perturbation_rotations(delta)
    return [rot.inv() * orientation for rot in rots] + [rot * orientation for rot in rots]


def grad(component, orientation, options=None, delta=None):
    """Estimate the gradient of a density at a given orientation.

    ::

      odf = unimodal_odf(Orientation.goss(), 'cubic', 'orthorhombic')
      g = grad(odf, Orientation.from_euler((5., 40., 0.)))

    :param component: any object with an ``eval(orientations)`` method
        returning one density per orientation (an `ODF` or an
        `ODFComponent`).
    :param orientation: the `Orientation` (or a 3x3 orientation matrix or a
        unit quaternion) where the gradient is computed.
    :param options: a `GradientOptions` instance.
    :param float delta: the finite difference step in radians, takes
        precedence over the options (1 degree by default).
    :raise ValueError: if delta is not strictly positive or the orientation
        is not valid, no evaluation is performed in this case.
    :raise EvaluationError: if the evaluation does not return 6 real values.
    :return: the gradient as a 3 components numpy array (rate of change per
        radian of rotation about the crystal axes x, y and z).
    """
    if delta is None:
        delta = options.delta if options is not None else DEFAULT_GRAD_DELTA
    delta = _check_delta(delta)
    orientation = _check_orientation(orientation)
    f = component.eval(perturbed_orientations(orientation, delta))
    try:
        f = np.asarray(f, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise EvaluationError('density evaluation did not return real values: %s' % e) from e
    if f.size != 6:
        raise EvaluationError('density evaluation returned %d values instead of 6' % f.size)
    f = f.ravel()
    return (f[3:] - f[:3]) / delta
