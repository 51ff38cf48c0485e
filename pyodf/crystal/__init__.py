"""The crystal package describes crystallographic orientations.

   * :py:mod:`~pyodf.crystal.quaternion` unit quaternions
   * :py:mod:`~pyodf.crystal.rotation` conversions between rotation representations
   * :py:mod:`~pyodf.crystal.symmetry` the Laue classes and their rotations
   * :py:mod:`~pyodf.crystal.orientation` the `Orientation` class

"""
