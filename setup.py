"""A setuptools based setup module.
See:
https://packaging.python.org/guides/distributing-packages-using-setuptools/
https://github.com/pypa/sampleproject
"""

from setuptools import setup
from os import path
from io import open


here = path.abspath(path.dirname(__file__))
# Get the long description from the README file
with open(path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

# Get version
main_ns = {}
with open(path.join(here, "elpitopo", "_version.py")) as ver_file:
    exec(ver_file.read(), main_ns)
VERSION = main_ns["__version__"]
# Arguments marked as "Required" below must be included for upload to PyPI.
# Fields marked as "Optional" may be commented out.

setup(
    name="elpitopo-python",  # Required
    version=VERSION,  # Required
    description="Topology editing of elastic principal graphs",  # Optional
    long_description=long_description,  # Optional
    long_description_content_type="text/markdown",  # Optional (see note above)
    classifiers=[  # Optional
        # How mature is this project? Common values are
        #   3 - Alpha
        #   4 - Beta
        #   5 - Production/Stable
        "Development Status :: 3 - Alpha",
        # Pick your license as you wish
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
    ],
    keywords="machine_learning graphs principal_graphs single_cell",  # Optional
    packages=["elpitopo", "elpitopo.src"],
    python_requires=">=3.8",
    install_requires=[
        "numpy >=1.16.2",
        "pandas >=0.23.4",
        "numba >=0.49.1",
        "scipy >=1.8.0",
        "python_igraph >=0.10",
        "networkx >=2.7",
    ],
    zip_safe=False,
    extras_require={
        "tests": ["pytest", "pytest-cov"],
    },
)
