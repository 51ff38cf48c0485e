"""A package to define model orientation distribution functions (ODF) for
crystallographic texture analysis.

.. moduleauthor:: Henry Proudhon <henry.proudhon@mines-paristech.fr>

"""

__version__ = '0.1.0'

import math
import os
import pathlib as pl

# one degree expressed in radians, use as ``10 * degree``
degree = math.pi / 180

DEFAULT_HALFWIDTH = 10 * degree
DEFAULT_GRAD_DELTA = 1 * degree


def get_output_dir(output_dir=None):
    """Get the directory where figures and data files are written.

    The directory is taken from the argument if given, then from the
    `PYODF_OUTPUT` environment variable and defaults to `~/.pyodf_output`.
    It is created if it does not exist yet.

    :param output_dir: an optional path to use.
    :return: the output directory as a `pathlib.Path` instance.
    """
    if output_dir is None:
        output_dir = os.environ.get("PYODF_OUTPUT", pl.Path.home() / ".pyodf_output")
    output_dir = pl.Path(output_dir)
    if not output_dir.exists():
        output_dir.mkdir(parents=True)
    return output_dir
