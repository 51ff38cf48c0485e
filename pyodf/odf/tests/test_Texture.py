import os
import shutil
import tempfile
import unittest
import numpy as np
import matplotlib
matplotlib.use('Agg')
from matplotlib import pyplot as plt
from pyodf import degree
from pyodf.crystal.orientation import Orientation
from pyodf.odf.odf import santafe_odf, unimodal_odf, uniform_odf
from pyodf.odf.texture import (PoleFigure, calc_pole_figure, hemisphere_grid, projection_radius,
                               plot_pdf, calc_sections, plot_sections)


class TextureTests(unittest.TestCase):

    def setUp(self):
        print('testing the texture module')
        self.test_dir = tempfile.mkdtemp()
        self.odf = santafe_odf()

    def tearDown(self):
        plt.close('all')
        shutil.rmtree(self.test_dir)

    def test_projection(self):
        for proj in ['equal area', 'stereo', 'flat']:
            self.assertAlmostEqual(projection_radius(0., proj), 0.)
            self.assertAlmostEqual(projection_radius(0.5 * np.pi, proj), 1.)
        with self.assertRaises(ValueError):
            projection_radius(0., 'mercator')
        with self.assertRaises(ValueError):
            PoleFigure(self.odf, proj='mercator')

    def test_hemisphere_grid(self):
        phis, psis, directions = hemisphere_grid(10 * degree)
        self.assertEqual(phis.shape, (10, 37))
        self.assertEqual(directions.shape, (10, 37, 3))
        self.assertTrue(np.allclose(np.linalg.norm(directions, axis=-1), 1.))
        self.assertTrue(np.all(directions[..., 2] >= -1e-12))

    def test_calc_pole_figure(self):
        _, _, directions = hemisphere_grid(15 * degree)
        values = calc_pole_figure(uniform_odf('cubic'), [1, 1, 1], directions)
        self.assertEqual(values.shape, directions.shape[:2])
        self.assertTrue(np.allclose(values, 1.))
        # a cube texture has a maximum of the 001 pole figure at the center
        odf = unimodal_odf(Orientation.cube(), 'cubic', 'orthorhombic')
        values = calc_pole_figure(odf, [0, 0, 1], directions)
        self.assertAlmostEqual(values[0, 0], values.max())
        self.assertEqual(calc_pole_figure(odf, [0, 0, 1], [0., 0., 1.]).shape, ())
        with self.assertRaises(ValueError):
            calc_pole_figure(odf, [0, 0, 1], np.ones((4, 2)))

    def test_plot_pdf(self):
        pf = plot_pdf(self.odf, [[1, 0, 0], [1, 1, 0]], antipodal=True, resolution=10 * degree,
                      display=False, save_as='png', output_dir=self.test_dir)
        self.assertEqual(len(pf.values), 2)
        self.assertTrue(os.path.exists(os.path.join(self.test_dir, 'pole_figures.png')))
        for values in pf.values:
            self.assertGreater(values.max(), 0.73)
            self.assertGreater(values.min(), 0.7)

    def test_sections(self):
        phi2s, phi1, Phi, values = calc_sections(self.odf, sections=3, phi1_max=90., resolution=15.)
        self.assertTrue(np.allclose(phi2s, [0., 30., 60.]))
        self.assertEqual(phi1.shape, (7, 7))
        self.assertEqual(values.shape, (3, 7, 7))
        self.assertTrue(np.all(values > 0.7))
        with self.assertRaises(ValueError):
            calc_sections(self.odf, sections=0)
        plot_sections(self.odf, sections=2, phi1_max=90., resolution=15., display=False, save_as='png',
                      output_dir=self.test_dir)
        self.assertTrue(os.path.exists(os.path.join(self.test_dir, 'odf_sections.png')))


if __name__ == '__main__':
    unittest.main()
