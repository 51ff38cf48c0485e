"""The texture module provide the tools to visualize model ODFs.

 * :py:class:`~pyodf.odf.texture.PoleFigure` computes and plots pole
   figures (the density of a crystal direction in the specimen frame) as
   filled contours on the upper hemisphere.
 * :py:func:`~pyodf.odf.texture.plot_sections` plots ODF sections at
   constant :math:`\\varphi_2` in the Bunge Euler space.
"""
import numpy as np
from matplotlib import pyplot as plt, cm
from tqdm import tqdm
from pyodf import degree, get_output_dir
from pyodf.crystal.rotation import eu2qu


def projection_radius(psi, proj='equal area'):
    """Radius in the projection plane of a direction at an angle psi from
    the pole figure axis, normalized to 1 at the equator.

    :param psi: the polar angle(s) in radians.
    :param str proj: 'equal area' (Lambert, default), 'stereo'
        (stereographic) or 'flat'.
    """
    if proj == 'equal area':
        return np.sqrt(2) * np.sin(0.5 * psi)
    elif proj == 'stereo':
        return np.tan(0.5 * psi)
    elif proj == 'flat':
        return np.sin(psi)
    raise ValueError('unknown projection: %s' % proj)


def hemisphere_grid(resolution=5 * degree):
    """Regular grid of specimen directions on the upper hemisphere.

    The azimuth phi goes from 0 to 2 pi (closed) and the polar angle psi
    from 0 to pi / 2.

    :param float resolution: the angular step in radians (5 degrees by default).
    :return: phis, psis (2D arrays of shape (n_psi, n_phi)) and the unit
        directions (shape (n_psi, n_phi, 3)).
    """
    n_phi = int(round(2 * np.pi / resolution)) + 1
    n_psi = int(round(0.5 * np.pi / resolution)) + 1
    phis, psis = np.meshgrid(np.linspace(0, 2 * np.pi, n_phi), np.linspace(0, 0.5 * np.pi, n_psi))
    directions = np.stack([np.sin(psis) * np.cos(phis),
                           np.sin(psis) * np.sin(phis),
                           np.cos(psis)], axis=-1)
    return phis, psis, directions


def calc_pole_figure(odf, hkl, directions, antipodal=False, resolution=None):
    """Compute the pole figure density of the crystal direction hkl.

    This is the mean value of the ODF along the fibre of all the rotations
    bringing hkl onto each specimen direction. Since the ODF is invariant
    under the crystal symmetry, this is also the mean over the symmetric
    equivalents of hkl.

    :param odf: an `ODF` (or an `ODFComponent`).
    :param hkl: the crystal direction (3 components).
    :param directions: the specimen directions, shape (3,) or (..., 3).
    :param bool antipodal: average the densities of hkl and -hkl.
    :param float resolution: the angular step in radians along the fibres
        (3 degrees by default).
    :return: the densities with the shape of directions without the last axis.
    """
    directions = np.asarray(directions, dtype=np.float64)
    if directions.shape[-1] != 3:
        raise ValueError('specimen directions must have 3 components, got shape %s'
                         % (directions.shape,))
    n_points = 120 if resolution is None else max(int(round(2 * np.pi / resolution)), 4)
    values = odf.calc_pole_figure(hkl, directions.reshape((-1, 3)), antipodal=antipodal, n_points=n_points)
    return values.reshape(directions.shape[:-1])


class PoleFigure:
    """A class to compute and plot the pole figures of an ODF.

    ::

      odf = santafe_odf()
      pf = PoleFigure(odf, hkls=[[1, 0, 0], [1, 1, 0], [1, 1, 1]], antipodal=True)
      pf.plot_pole_figures(display=False, save_as='png')
    """

    def __init__(self, odf, hkls=([0, 0, 1],), proj='equal area', antipodal=False,
                 resolution=5 * degree, verbose=False):
        """Create a PoleFigure object associated with an ODF.

        :param odf: the `ODF` to plot.
        :param hkls: a list of crystal directions.
        :param str proj: projection type, 'equal area' (default), 'stereo'
            or 'flat'.
        :param bool antipodal: whether to use antipodal symmetry.
        :param float resolution: the angular step of the grid in radians.
        :param bool verbose: verbose mode (False by default).
        """
        projection_radius(0., proj)
        self.odf = odf
        self.hkls = [np.asarray(hkl, dtype=np.float64) for hkl in np.atleast_2d(hkls)]
        self.proj = proj
        self.antipodal = antipodal
        self.resolution = resolution
        self.verbose = verbose
        self.values = None

    def compute(self):
        """Compute the pole figure densities on the hemisphere grid.

        :return: a list of 2D arrays, one per crystal direction.
        """
        phis, psis, directions = hemisphere_grid(self.resolution)
        hkls = tqdm(self.hkls, desc='computing pole figures') if self.verbose else self.hkls
        self.values = []
        for hkl in hkls:
            self.values.append(calc_pole_figure(self.odf, hkl, directions, antipodal=self.antipodal))
        if self.verbose:
            for hkl, v in zip(self.hkls, self.values):
                print('pole figure %s: min %.3f max %.3f' % (hkl, v.min(), v.max()))
        return self.values

    def plot_pf_background(self, ax, labels=True):
        """Function to plot the background of the pole figure.

        :param ax: a reference to a pyplot ax to draw the background.
        :param bool labels: add labels to axes (True by default).
        """
        an = np.linspace(0, 2 * np.pi, 100)
        ax.plot(np.cos(an), np.sin(an), 'k-')
        ax.plot([-1, 1], [0, 0], 'k-', linewidth=0.5)
        ax.plot([0, 0], [-1, 1], 'k-', linewidth=0.5)
        if labels:
            ax.annotate('X', (1.01, 0.0), xycoords='data', fontsize=16,
                        horizontalalignment='left', verticalalignment='center')
            ax.annotate('Y', (0.0, 1.01), xycoords='data', fontsize=16,
                        horizontalalignment='center', verticalalignment='bottom')

    def plot_pf_contour(self, ax, hkl, values, levels=10, cmap=cm.jet):
        """Plot a pole figure using filled contours.

        :param ax: a reference to a pyplot ax to draw the contours.
        :param hkl: the crystal direction, used in the title.
        :param values: the 2D array of densities on the hemisphere grid.
        :return: the contour set.
        """
        phis, psis, _ = hemisphere_grid(self.resolution)
        radius = projection_radius(psis, self.proj) / projection_radius(0.5 * np.pi, self.proj)
        x, y = radius * np.cos(phis), radius * np.sin(phis)
        cs = ax.contourf(x, y, values, levels=levels, cmap=cmap)
        self.plot_pf_background(ax)
        ax.axis([-1.1, 1.1, -1.1, 1.1])
        ax.axis('off')
        ax.set_title('%s pole figure' % ''.join('%g' % i for i in hkl))
        return cs

    def plot_pole_figures(self, display=True, save_as='pdf', output_dir=None):
        """Plot and save a picture with all the pole figures.

        :param bool display: display the plot if True, else save a picture of
            the pole figures (True by default).
        :param str save_as: file format used to save the image such as pdf
            or png ('pdf' by default).
        :param output_dir: the directory where to save the picture (see
            :py:func:`~pyodf.get_output_dir`).
        :return: the matplotlib figure.
        """
        if self.values is None:
            self.compute()
        n = len(self.hkls)
        fig = plt.figure(figsize=(4 * n + 1, 4))
        cs = None
        for i, (hkl, values) in enumerate(zip(self.hkls, self.values)):
            ax = fig.add_subplot(1, n, i + 1, aspect='equal')
            cs = self.plot_pf_contour(ax, hkl, values)
        fig.colorbar(cs, ax=fig.axes, shrink=0.8)
        if display:
            plt.show()
        else:
            file_path = get_output_dir(output_dir) / ('pole_figures.%s' % save_as)
            if self.verbose:
                print('saving pole figures to %s' % file_path)
            plt.savefig(file_path, format=save_as)
        return fig


def plot_pdf(odf, hkls, antipodal=False, proj='equal area', resolution=5 * degree,
             display=True, save_as='pdf', output_dir=None, verbose=False):
    """Plot the pole figures of an ODF.

    :param odf: the `ODF` to plot.
    :param hkls: a list of crystal directions.
    :param bool antipodal: whether to use antipodal symmetry.
    :param str proj: projection type, 'equal area' (default), 'stereo' or 'flat'.
    :param float resolution: the angular step of the grid in radians.
    :param bool display: show the figure, else save it.
    :param str save_as: file format of the saved figure.
    :param output_dir: the directory where to save the figure.
    :param bool verbose: verbose mode (False by default).
    :return: the `PoleFigure` instance.
    """
    pf = PoleFigure(odf, hkls, proj=proj, antipodal=antipodal, resolution=resolution, verbose=verbose)
    pf.plot_pole_figures(display=display, save_as=save_as, output_dir=output_dir)
    return pf


def calc_sections(odf, sections=6, phi1_max=360., Phi_max=90., phi2_max=90., resolution=5., verbose=False):
    """Compute ODF sections at constant phi2.

    :param odf: the `ODF` to evaluate.
    :param int sections: the number of sections.
    :param float phi1_max: upper bound of phi1 in degrees.
    :param float Phi_max: upper bound of Phi in degrees.
    :param float phi2_max: the sections are taken at phi2 values regularly
        spaced in [0, phi2_max[ (degrees).
    :param float resolution: the grid step in degrees.
    :param bool verbose: verbose mode (False by default).
    :return: phi2 values, the (phi1, Phi) grids and the values with
        shape (sections, n_Phi, n_phi1).
    """
    if sections < 1:
        raise ValueError('the number of sections must be positive, got %s' % sections)
    phi2s = np.linspace(0., phi2_max, sections, endpoint=False)
    phi1 = np.linspace(0., phi1_max, int(round(phi1_max / resolution)) + 1)
    Phi = np.linspace(0., Phi_max, int(round(Phi_max / resolution)) + 1)
    phi1_grid, Phi_grid = np.meshgrid(phi1, Phi)
    values = np.empty((sections,) + phi1_grid.shape, dtype=np.float64)
    iterator = tqdm(enumerate(phi2s), total=sections, desc='computing sections') if verbose \
        else enumerate(phi2s)
    for i, phi2 in iterator:
        euler = np.stack([phi1_grid, Phi_grid, np.full_like(phi1_grid, phi2)], axis=-1)
        q = eu2qu(np.radians(euler.reshape((-1, 3))))
        values[i] = odf.eval(q).reshape(phi1_grid.shape)
    return phi2s, phi1_grid, Phi_grid, values


def plot_sections(odf, sections=6, phi1_max=360., Phi_max=90., phi2_max=90., resolution=5.,
                  display=True, save_as='pdf', output_dir=None, verbose=False):
    """Plot ODF sections at constant phi2.

    ::

      odf = santafe_odf()
      plot_sections(odf, sections=6, phi1_max=90., display=False, save_as='png')

    :param odf: the `ODF` to plot.
    :param int sections: the number of sections (6 by default).
    :param bool display: show the figure, else save it.
    :param str save_as: file format of the saved figure.
    :param output_dir: the directory where to save the figure.
    :param bool verbose: verbose mode (False by default).
    :return: the matplotlib figure.

    The other parameters are passed to :py:func:`calc_sections`.
    """
    phi2s, phi1_grid, Phi_grid, values = calc_sections(odf, sections, phi1_max, Phi_max, phi2_max,
                                                       resolution, verbose)
    n_cols = min(sections, 3)
    n_rows = int(np.ceil(sections / n_cols))
    fig, axes = plt.subplots(n_rows, n_cols, figsize=(4 * n_cols, 3 * n_rows), squeeze=False)
    levels = np.linspace(values.min(), values.max(), 11)
    if levels[0] == levels[-1]:
        levels = 10
    cs = None
    for i, ax in enumerate(axes.ravel()):
        if i >= sections:
            ax.axis('off')
            continue
        cs = ax.contourf(phi1_grid, Phi_grid, values[i], levels=levels, cmap=cm.jet)
        ax.set_xlim(0, phi1_max)
        ax.set_ylim(Phi_max, 0)
        ax.set_title(r'$\varphi_2$ = %g' % phi2s[i])
        ax.set_xlabel(r'$\varphi_1$')
        ax.set_ylabel(r'$\Phi$')
    fig.colorbar(cs, ax=axes.ravel().tolist(), shrink=0.8)
    if display:
        plt.show()
    else:
        file_path = get_output_dir(output_dir) / ('odf_sections.%s' % save_as)
        if verbose:
            print('saving ODF sections to %s' % file_path)
        plt.savefig(file_path, format=save_as)
    return fig
