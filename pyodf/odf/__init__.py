"""The odf package defines model orientation distribution functions.

   * :py:mod:`~pyodf.odf.kernels` radially symmetric functions on SO(3)
   * :py:mod:`~pyodf.odf.components` the elementary ODF components
   * :py:mod:`~pyodf.odf.odf` the `ODF` mixture and the model constructors
   * :py:mod:`~pyodf.odf.gradient` finite difference gradient of an ODF
   * :py:mod:`~pyodf.odf.texture` pole figures and ODF sections

"""
