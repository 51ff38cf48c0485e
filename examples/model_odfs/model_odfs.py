#!/usr/bin/env python
import os
import numpy as np
from pyodf import degree, get_output_dir
from pyodf.crystal.symmetry import Symmetry
from pyodf.crystal.orientation import Orientation
from pyodf.odf.kernels import VonMisesFisherKernel
from pyodf.odf.odf import (uniform_odf, unimodal_odf, fibre_odf, fourier_odf, bingham_odf,
                           quaternion_basis)
from pyodf.odf.texture import plot_pdf, plot_sections
from pyodf.odf.gradient import grad
from matplotlib import pyplot as plt

'''
Walk through the model ODFs: uniform, unimodal, fibre, Fourier and Bingham
ODFs and their combination into the classical SantaFe sample ODF.
The pole figures and ODF sections are written to the output directory.
'''
output_dir = get_output_dir(os.environ.get('PYODF_EXAMPLES_OUTPUT'))

# the uniform ODF
cs = Symmetry.cubic
ss = Symmetry.orthorhombic
odf = uniform_odf(cs, ss)
print(odf)

# a unimodal ODF centered on (122)[221] with a von Mises Fisher kernel
x = Orientation.from_miller([1, 2, 2], [2, 2, 1])
psi = VonMisesFisherKernel(halfwidth=10 * degree)
odf = unimodal_odf(x, cs, ss, psi)
print(odf)
plot_pdf(odf, [[1, 0, 0], [1, 1, 0]], antipodal=True, display=False, save_as='png', output_dir=output_dir)
os.replace(output_dir / 'pole_figures.png', output_dir / 'unimodal_pole_figures.png')

# a fibre ODF mapping the crystal direction [001] onto the specimen X axis
h = [0, 0, 1]
r = [1, 0, 0]
odf = fibre_odf(h, r, cs, ss, psi)
print(odf)
plot_pdf(odf, [[1, 0, 0], [1, 1, 0]], antipodal=True, display=False, save_as='png', output_dir=output_dir)
os.replace(output_dir / 'pole_figures.png', output_dir / 'fibre_pole_figures.png')

# an ODF given by its Fourier coefficients
C = np.concatenate([[1.], np.eye(3).ravel(), np.eye(5).ravel()])
odf = fourier_odf(C, 'triclinic', 'triclinic')
print(odf)
plot_sections(odf, sections=6, phi1_max=360., Phi_max=180., phi2_max=360., resolution=10.,
              display=False, save_as='png', output_dir=output_dir)
os.replace(output_dir / 'odf_sections.png', output_dir / 'fourier_sections.png')

# Bingham ODFs with trigonal crystal symmetry
cs = Symmetry.trigonal
ss = Symmetry.triclinic
mod = Orientation.from_euler((45., 0., 0.))
for name, kappa, A in [('unimodal', 20, quaternion_basis(mod)),
                       ('fibre', [-10, -10, 10, 10], quaternion_basis()),
                       ('spherical', [-10, 10, 10, 10], quaternion_basis())]:
    odf = bingham_odf(kappa, A, cs, ss, comment='Bingham %s ODF' % name, verbose=True)
    print(odf)
    plot_sections(odf, sections=6, phi1_max=360., Phi_max=180., phi2_max=120., resolution=10.,
                  display=False, save_as='png', output_dir=output_dir)
    os.replace(output_dir / 'odf_sections.png', output_dir / ('bingham_%s_sections.png' % name))
    plt.close('all')

# combining model ODFs: the SantaFe sample
cs = Symmetry.cubic
ss = Symmetry.orthorhombic
psi = VonMisesFisherKernel(halfwidth=10 * degree)
mod1 = Orientation.from_miller([1, 2, 2], [2, 2, 1])
odf = 0.73 * uniform_odf(cs, ss, comment='the SantaFe-sample ODF') \
      + 0.27 * unimodal_odf(mod1, cs, ss, psi)
print(odf)
plot_pdf(odf, [[1, 0, 0], [1, 1, 0]], antipodal=True, display=False, save_as='png', output_dir=output_dir)
os.replace(output_dir / 'pole_figures.png', output_dir / 'santafe_pole_figures.png')

# the gradient vanishes at the mode and points towards it nearby
print('gradient at the mode: %s' % grad(odf, mod1))
print('gradient 5 degrees away: %s' % grad(odf, Orientation.from_axis_angle([1, 0, 0], 5.) * mod1))
print('figures written to %s' % output_dir)
plt.close('all')
