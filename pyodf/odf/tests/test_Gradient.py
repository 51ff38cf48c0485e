import unittest
import numpy as np
from pyodf import degree, DEFAULT_GRAD_DELTA
from pyodf.crystal.orientation import Orientation, as_quaternions
from pyodf.odf.kernels import VonMisesFisherKernel
from pyodf.odf.odf import unimodal_odf, santafe_odf
from pyodf.odf.gradient import (grad, GradientOptions, EvaluationError, perturbation_rotations,
                                perturbed_orientations)


class CountingComponent:
    """A density recording the orientations it is evaluated at."""

    def __init__(self, density):
        self.density = density
        self.calls = []

    def eval(self, orientations):
        self.calls.append(list(orientations))
        return np.array([self.density(o) for o in orientations])


class BrokenComponent:

    def __init__(self, values=None, error=None):
        self.values = values
        self.error = error

    def eval(self, orientations):
        if self.error is not None:
            raise self.error
        return self.values


class GradientTests(unittest.TestCase):

    def setUp(self):
        print('testing the gradient estimator')
        self.o0 = Orientation.from_euler((20., 30., 40.))

    def test_constant(self):
        c = CountingComponent(lambda o: 5.)
        g = grad(c, self.o0)
        self.assertEqual(g.shape, (3,))
        self.assertTrue(np.allclose(g, 0.))
        self.assertEqual(len(c.calls), 1)
        self.assertEqual(len(c.calls[0]), 6)

    def test_rotation_vector_density(self):
        o0_inv = self.o0.inv()
        for i in range(3):
            c = CountingComponent(lambda o: (o * o0_inv).rotation_vector()[i])
            g = grad(c, self.o0)
            expected = np.zeros(3)
            expected[i] = 1.
            self.assertTrue(np.allclose(g, expected, atol=1e-6))

    def test_linearity(self):
        f1 = lambda o: np.cos(np.radians(o.phi1())) + o.orientation_matrix()[0, 2]
        f2 = lambda o: o.quat.q1 * o.quat.q3
        g1 = grad(CountingComponent(f1), self.o0)
        g2 = grad(CountingComponent(f2), self.o0)
        g = grad(CountingComponent(lambda o: 2. * f1(o) - 3. * f2(o)), self.o0)
        self.assertTrue(np.allclose(g, 2 * g1 - 3 * g2))

    def test_step_convergence(self):
        # f(o) = g_13 is smooth with a non zero gradient
        f = lambda o: o.orientation_matrix()[0, 2]
        g_fine = grad(CountingComponent(f), self.o0, delta=1e-4)
        errors = []
        for delta in [4 * degree, 2 * degree]:
            errors.append(np.max(np.abs(grad(CountingComponent(f), self.o0, delta=delta) - g_fine)))
        # second order scheme: halving the step divides the error by 4
        self.assertLess(errors[1], 0.3 * errors[0])

    def test_invalid_delta(self):
        for delta in [0., -1. * degree, np.nan, np.inf, 'one']:
            c = CountingComponent(lambda o: 1.)
            with self.assertRaises(ValueError):
                grad(c, self.o0, delta=delta)
            self.assertEqual(len(c.calls), 0)
        c = CountingComponent(lambda o: 1.)
        with self.assertRaises(ValueError):
            grad(c, self.o0, options=GradientOptions(delta=-0.1))
        self.assertEqual(len(c.calls), 0)

    def test_invalid_orientation(self):
        c = CountingComponent(lambda o: 1.)
        for orientation in [np.ones((3, 3)), [1., 0.], np.zeros(4), np.zeros((2, 4))]:
            with self.assertRaises(ValueError):
                grad(c, orientation)
        self.assertEqual(len(c.calls), 0)
        # matrices and unit quaternions are accepted
        self.assertTrue(np.allclose(grad(c, self.o0.orientation_matrix()), 0.))
        self.assertTrue(np.allclose(grad(c, self.o0.quat.quat), 0.))

    def test_ordering(self):
        c = CountingComponent(lambda o: 0.)
        delta = 2 * degree
        grad(c, self.o0, delta=delta)
        rx, ry, rz = perturbation_rotations(delta)
        expected = [rx.inv() * self.o0, ry.inv() * self.o0, rz.inv() * self.o0,
                    rx * self.o0, ry * self.o0, rz * self.o0]
        self.assertEqual(c.calls[0], expected)
        self.assertEqual(perturbed_orientations(self.o0, delta), expected)
        # each perturbation is a rotation of delta / 2 about the reference axes
        for axis, r in zip(np.eye(3), [rx, ry, rz]):
            self.assertTrue(np.allclose(r.rotation_vector(), 0.5 * delta * axis))

    def test_ordering_contract(self):
        # only the third value differs: the minus perturbation about z
        c = BrokenComponent(values=np.array([0., 0., 1., 0., 0., 0.]))
        g = grad(c, self.o0, delta=0.5)
        self.assertTrue(np.allclose(g, [0., 0., -2.]))
        c = BrokenComponent(values=[0., 0., 0., 1., 0., 0.])
        self.assertTrue(np.allclose(grad(c, self.o0, delta=0.5), [2., 0., 0.]))

    def test_delta_selection(self):
        c = CountingComponent(lambda o: 0.)
        grad(c, self.o0)
        angle = c.calls[0][3].misorientation_angle(self.o0)
        self.assertAlmostEqual(angle, 0.5 * DEFAULT_GRAD_DELTA)
        grad(c, self.o0, options=GradientOptions.from_degrees(4.))
        self.assertAlmostEqual(c.calls[1][3].misorientation_angle(self.o0), 2 * degree)
        # the keyword takes precedence over the options
        grad(c, self.o0, options=GradientOptions(delta=4 * degree), delta=6 * degree)
        self.assertAlmostEqual(c.calls[2][3].misorientation_angle(self.o0), 3 * degree)
        self.assertTrue('GradientOptions' in repr(GradientOptions()))
        # a step of 1 degree given either way yields the same gradient
        f = CountingComponent(lambda o: o.orientation_matrix()[0, 2])
        g = grad(f, self.o0)
        self.assertTrue(np.allclose(grad(f, self.o0, options=GradientOptions.from_degrees(1.)), g))
        self.assertTrue(np.allclose(grad(f, self.o0, delta=np.radians(1.)), g))
        # per degree rate from the same six densities
        values = np.array([f.density(o) for o in f.calls[0]])
        g_deg = (values[3:] - values[:3]) / 1.
        self.assertTrue(np.allclose(g_deg, g * degree))

    def test_evaluation_errors(self):
        with self.assertRaises(EvaluationError):
            grad(BrokenComponent(values=np.ones(5)), self.o0)
        with self.assertRaises(EvaluationError):
            grad(BrokenComponent(values=np.ones(7)), self.o0)
        with self.assertRaises(EvaluationError):
            grad(BrokenComponent(values=['a', 'b', 'c', 'd', 'e', 'f']), self.o0)
        # errors raised by the evaluation propagate unchanged
        with self.assertRaises(KeyError):
            grad(BrokenComponent(error=KeyError('density')), self.o0)
        self.assertTrue(issubclass(EvaluationError, RuntimeError))

    def test_unimodal_odf(self):
        mod = Orientation.goss()
        psi = VonMisesFisherKernel(halfwidth=10 * degree)
        odf = unimodal_odf(mod, 'cubic', 'orthorhombic', psi)
        # the gradient vanishes at the mode
        self.assertTrue(np.allclose(odf.grad(mod), 0., atol=1e-6 * odf.eval(mod)[0]))
        # and points back to the mode after a rotation about x
        g = odf.grad(Orientation.from_axis_angle([1., 0., 0.], 5.) * mod)
        self.assertLess(g[0], 0.)
        self.assertLess(abs(g[1]), 1e-3 * abs(g[0]))
        self.assertLess(abs(g[2]), 1e-3 * abs(g[0]))
        # components expose the same estimator
        c = odf.components[0]
        o = Orientation.from_euler((10., 50., 20.))
        self.assertTrue(np.allclose(c.grad(o, delta=0.5 * degree), odf.grad(o, delta=0.5 * degree)))

    def test_crystal_frame(self):
        # a triclinic peak seen from a rotation about one crystal axis
        x = Orientation.from_euler((30., 50., 70.))
        odf = unimodal_odf(x, 'triclinic', 'triclinic')
        for i, axis in enumerate(np.eye(3)):
            g = odf.grad(Orientation.from_axis_angle(axis, 5.) * x)
            self.assertLess(g[i], 0.)
            others = np.delete(g, i)
            self.assertTrue(np.all(np.abs(others) < 1e-3 * abs(g[i])))
        # the perturbed orientations differ from o by rotations about crystal axes
        o = Orientation.from_axis_angle([1., 0., 0.], 5.) * x
        for p, axis in zip(perturbed_orientations(o, 2 * degree)[3:], np.eye(3)):
            self.assertTrue(np.allclose((p * o.inv()).rotation_vector(), degree * axis))

    def test_santafe(self):
        odf = santafe_odf()
        o = Orientation.from_euler((10., 50., 20.))
        g = odf.grad(o)
        # the uniform portion does not contribute
        self.assertTrue(np.allclose(g, 0.27 * odf.components[1].grad(o)))
        q = as_quaternions(perturbed_orientations(o, DEFAULT_GRAD_DELTA))
        f = odf.eval(q)
        self.assertTrue(np.allclose(g, (f[3:] - f[:3]) / DEFAULT_GRAD_DELTA))


if __name__ == '__main__':
    unittest.main()
