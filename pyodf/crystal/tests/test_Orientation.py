import unittest
import numpy as np
from pyodf.crystal.orientation import (Orientation, as_quaternions, random_quaternions,
                                       symmetric_equivalents)
from pyodf.crystal.quaternion import Quaternion
from pyodf.crystal.symmetry import Symmetry


class OrientationTests(unittest.TestCase):

    def setUp(self):
        print('testing the Orientation class')

    def test_Orientation(self):
        o = Orientation.from_euler([180., 0., 0.])
        g = o.orientation_matrix()
        self.assertAlmostEqual(g[0, 0], -1.)
        self.assertAlmostEqual(g[1, 1], -1.)
        self.assertAlmostEqual(g[2, 2], 1.)
        self.assertAlmostEqual(o.phi1(), 180.)

    def test_invalid_matrix(self):
        with self.assertRaises(ValueError):
            Orientation(np.ones((3, 3)))
        with self.assertRaises(ValueError):
            Orientation(np.diag([1., 1., -1.]))
        with self.assertRaises(ValueError):
            Orientation(np.eye(2))
        with self.assertRaises(ValueError):
            Orientation([[np.nan, 0., 0.], [0., 1., 0.], [0., 0., 1.]])

    def test_euler_round_trip(self):
        euler = (30., 40., 50.)
        o = Orientation.from_euler(euler)
        self.assertTrue(np.allclose(o.euler, euler))
        self.assertEqual(Orientation.from_quaternion(o.quat), o)
        self.assertEqual(Orientation.from_rodrigues(o.rod), o)

    def test_product_and_inverse(self):
        a = Orientation.random(seed=1)
        b = Orientation.random(seed=2)
        ab = a * b
        self.assertTrue(np.allclose(ab.orientation_matrix(),
                                    np.dot(a.orientation_matrix(), b.orientation_matrix())))
        self.assertEqual(a * a.inv(), Orientation.cube())
        self.assertEqual((a * b).inv(), b.inv() * a.inv())

    def test_rotation_vector(self):
        o = Orientation.from_axis_angle([0., 0., 1.], 30.)
        self.assertTrue(np.allclose(o.rotation_vector(), [0., 0., np.pi / 6]))
        o = Orientation.from_axis_angle([0., 0., 1.], -30.)
        self.assertTrue(np.allclose(o.rotation_vector(), [0., 0., -np.pi / 6]))
        self.assertTrue(np.allclose(Orientation.cube().rotation_vector(), np.zeros(3)))

    def test_frames(self):
        o = Orientation.from_euler((90., 0., 0.))
        v = o.to_crystal([1., 0., 0.])
        self.assertTrue(np.allclose(v, [0., -1., 0.]))
        self.assertTrue(np.allclose(o.to_sample(v), [1., 0., 0.]))
        with self.assertRaises(ValueError):
            o.to_crystal([1., 0.])

    def test_misorientation_angle(self):
        o1 = Orientation.cube()
        o2 = Orientation.from_axis_angle([0., 0., 1.], 95.)
        self.assertAlmostEqual(np.degrees(o1.misorientation_angle(o2)), 95.)
        self.assertAlmostEqual(np.degrees(o1.misorientation_angle(o2, cs=Symmetry.cubic)), 5.)
        self.assertAlmostEqual(o1.misorientation_angle(Orientation.goss(), cs='cubic'),
                               np.radians(45.))

    def test_from_miller(self):
        self.assertEqual(Orientation.from_miller([0, 0, 1], [1, 0, 0]), Orientation.cube())
        o = Orientation.from_miller([1, 2, 2], [2, 2, 1])
        # the plane normal is aligned with the sample Z axis
        self.assertTrue(np.allclose(o.to_sample(np.array([1., 2., 2.]) / 3), [0., 0., 1.]))
        self.assertTrue(np.allclose(o.to_crystal([1., 0., 0.]), np.array([10., 2., -7.]) / np.sqrt(153)))
        with self.assertRaises(ValueError):
            Orientation.from_miller([1, 1, 0], [2, 2, 0])

    def test_ideal_orientations(self):
        self.assertTrue(np.allclose(Orientation.goss().euler, [0., 45., 0.]))
        self.assertTrue(np.allclose(Orientation.brass().euler, [35.264, 45., 0.]))
        self.assertTrue(np.allclose(Orientation.copper().euler, [90., 35.264, 45.]))
        self.assertEqual(Orientation.random(seed=7), Orientation.random(seed=7))

    def test_as_quaternions(self):
        o = Orientation.goss()
        self.assertEqual(as_quaternions(o).shape, (1, 4))
        self.assertEqual(as_quaternions(o.quat).shape, (1, 4))
        self.assertEqual(as_quaternions([o, o, Orientation.cube()]).shape, (3, 4))
        self.assertEqual(as_quaternions(o.orientation_matrix()).shape, (1, 4))
        self.assertEqual(as_quaternions(np.array([o.orientation_matrix()] * 4)).shape, (4, 4))
        q = random_quaternions(6, seed=0)
        self.assertTrue(np.allclose(as_quaternions(q), q))
        self.assertTrue(np.allclose(as_quaternions(2 * q[0]), q[:1]))
        with self.assertRaises(ValueError):
            as_quaternions(np.zeros((5, 3)))

    def test_random_quaternions(self):
        q = random_quaternions(1000, seed=5)
        self.assertEqual(q.shape, (1000, 4))
        self.assertTrue(np.allclose(np.linalg.norm(q, axis=1), 1.))
        self.assertTrue(np.allclose(q, random_quaternions(1000, seed=5)))

    def test_symmetric_equivalents(self):
        q = Orientation.brass().quat.quat
        eq = symmetric_equivalents(q, Symmetry.cubic, Symmetry.orthorhombic)
        self.assertEqual(eq.shape, (96, 4))
        qs = random_quaternions(3, seed=8)
        self.assertEqual(symmetric_equivalents(qs, Symmetry.hexagonal, Symmetry.triclinic).shape, (3, 12, 4))
        # c.g.s with the matrix product convention
        c = Symmetry.cubic.symmetry_operators()[5]
        s = Symmetry.orthorhombic.symmetry_operators()[2]
        g = Orientation.brass().orientation_matrix()
        target = Quaternion(Orientation(np.dot(c, np.dot(g, s))).quat.quat)
        self.assertTrue(any(Quaternion(e) == target for e in eq))


if __name__ == '__main__':
    unittest.main()
