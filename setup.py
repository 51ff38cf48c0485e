import os
import setuptools
import pyodf

with open('README.rst', 'r') as f:
    long_description = f.read()

## Load requirements.txt and format for setuptools.setup
requirements = []
here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, "requirements.txt")) as fid:
    content = fid.read().split("\n")
    for line in content:
        if line.startswith("#") or line.startswith(" ") or line == "":
            continue
        requirements.append(line)

all_packages = setuptools.find_packages(".", exclude=("examples", "examples.*")) \
    + ["pyodf.examples"] + ["pyodf.examples." + x for x in setuptools.find_packages("examples")]

setuptools.setup(
    name="pyodf",
    version=pyodf.__version__,
    author="Henry Proudhon",
    author_email="henry.proudhon@mines-paristech.fr",
    description="An open-source Python package to define and evaluate model orientation distribution functions",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    packages=all_packages,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 4 - Beta",
    ],
    python_requires='>=3.7',
    install_requires=requirements,
    extras_require={'test': ['pytest']},
    include_package_data=False,
    package_dir={'pyodf.examples': 'examples'},
    license="MIT license",
)
