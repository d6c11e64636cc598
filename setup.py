import pathlib
import re
import sys

from setuptools import find_packages, setup

__license__ = "BSD-3"

# Check Python version, no point installing if unsupported version inplace
min_version = (3, 11)
if sys.version_info < min_version:
    py_version = ".".join(str(n) for n in sys.version_info)
    msg = (
        f"Python-{'.'.join(map(str, min_version))} or greater is required, "
        f"Python-{py_version} used."
    )
    raise RuntimeError(msg)


PACKAGE_DIR = "src"

here = pathlib.Path(__file__).parent

version_text = (here / PACKAGE_DIR / "patristic" / "_version.py").read_text()
__version__ = re.search(r'__version__ = "([^"]+)"', version_text).group(1)

short_description = "Rooted weighted trees, Newick, patristic distances and neighbour joining"

long_description = (here / "README.md").read_text()

setup(
    name="patristic",
    version=__version__,
    description=short_description,
    long_description=long_description,
    long_description_content_type="text/markdown",
    platforms=["any"],
    license=__license__,
    keywords=[
        "biology",
        "phylogeny",
        "evolution",
        "bioinformatics",
        "newick",
        "neighbour joining",
    ],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Programming Language :: Python :: 3.14",
    ],
    python_requires=">=3.11",
    packages=find_packages(where=PACKAGE_DIR),
    package_dir={"": PACKAGE_DIR},
    install_requires=[
        "chardet",
        "numpy",
        "numba>0.53",
        "scitrack",
        "tqdm",
        "typing_extensions",
    ],
    extras_require={
        "test": [
            "nox",
            "pytest",
            "pytest-cov",
        ],
        "dev": [
            "nox",
            "pytest",
            "pytest-cov",
            "ruff",
        ],
    },
)
