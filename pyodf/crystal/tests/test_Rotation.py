import unittest
import numpy as np
from pyodf.crystal.rotation import (eu2om, om2eu, om2qu, qu2om, ax2qu, qu2ax, qu2ro, ro2qu,
                                    eu2qu, qu2eu, qu2eu_zyz)
from pyodf.crystal.orientation import random_quaternions


def active_z(a):
    c, s = np.cos(a), np.sin(a)
    return np.array([[c, -s, 0.], [s, c, 0.], [0., 0., 1.]])


def active_y(a):
    c, s = np.cos(a), np.sin(a)
    return np.array([[c, 0., s], [0., 1., 0.], [-s, 0., c]])


class RotationTests(unittest.TestCase):

    def setUp(self):
        print('testing the rotation conversions')
        self.q = random_quaternions(20, seed=42)

    def same_rotations(self, q1, q2):
        return np.allclose(np.abs(np.sum(q1 * q2, axis=-1)), 1.)

    def test_om2qu_qu2om(self):
        g = qu2om(self.q)
        self.assertEqual(g.shape, (20, 3, 3))
        for gi in g:
            self.assertTrue(np.allclose(np.dot(gi, gi.T), np.eye(3)))
            self.assertAlmostEqual(np.linalg.det(gi), 1.)
        self.assertTrue(self.same_rotations(om2qu(g), self.q))
        # rotations by pi are handled by the other branches
        for axis in np.eye(3):
            q = ax2qu(axis, np.pi)
            self.assertTrue(self.same_rotations(om2qu(qu2om(q)), q))

    def test_euler(self):
        euler = qu2eu(self.q)
        self.assertTrue(np.all(euler >= 0))
        self.assertTrue(np.allclose(eu2om(euler), qu2om(self.q)))
        self.assertTrue(self.same_rotations(eu2qu(euler), self.q))
        g = eu2om(np.radians([30., 0., 0.]))
        self.assertTrue(np.allclose(om2eu(g), np.radians([30., 0., 0.])))

    def test_bunge_matrix(self):
        # rotation of 90 degrees about Z: the sample X axis is the crystal -Y axis
        g = eu2om(np.radians([90., 0., 0.]))
        self.assertTrue(np.allclose(np.dot(g, [1., 0., 0.]), [0., -1., 0.]))

    def test_axis_angle(self):
        q = ax2qu([0., 0., 2.], np.pi / 3)
        ax = qu2ax(q)
        self.assertTrue(np.allclose(ax[:3], [0., 0., 1.]))
        self.assertAlmostEqual(ax[3], np.pi / 3)
        # passive rotation matrix
        g = qu2om(q)
        self.assertTrue(np.allclose(g, active_z(np.pi / 3).T))
        self.assertTrue(np.allclose(qu2ax([1., 0., 0., 0.]), [0., 0., 1., 0.]))
        with self.assertRaises(ValueError):
            ax2qu([0., 0., 0.], 1.)

    def test_rodrigues(self):
        rod = qu2ro(self.q)
        self.assertTrue(self.same_rotations(ro2qu(rod), self.q))
        self.assertTrue(np.allclose(qu2ro([1., 0., 0., 0.]), np.zeros(3)))

    def test_zyz(self):
        for q in self.q[:5]:
            alpha, beta, gamma = qu2eu_zyz(q)
            R = np.dot(active_z(alpha), np.dot(active_y(beta), active_z(gamma)))
            self.assertTrue(np.allclose(R, qu2om(q).T))
        self.assertEqual(qu2eu_zyz(self.q).shape, (20, 3))


if __name__ == '__main__':
    unittest.main()
