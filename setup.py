"""Setup script for pcspace.

pcspace is pure Python; the statistical work is delegated to NumPy, SciPy
and statsmodels, so no extension modules are compiled.

Usage:
    # Install package
    pip install -e .

    # Install with test dependencies
    pip install -e ".[test]"
"""

from pathlib import Path

from setuptools import find_packages, setup

HERE = Path(__file__).parent


def read_version() -> str:
    """Read __version__ from the package without importing it."""
    for line in (HERE / "pcspace" / "__init__.py").read_text(encoding="utf-8").splitlines():
        if line.startswith("__version__"):
            return line.split("=", 1)[1].strip().strip("\"'")
    raise RuntimeError("Unable to find __version__ in pcspace/__init__.py")


if __name__ == "__main__":
    setup(
        name="pcspace",
        version=read_version(),
        description="Class-informative principal components for single-cell classification",
        python_requires=">=3.10",
        packages=find_packages(include=["pcspace", "pcspace.*"]),
        install_requires=[
            "numpy>=1.24",
            "scipy>=1.11",
            "pandas>=2.0",
            "anndata>=0.9",
            "statsmodels>=0.14",
            "tqdm>=4.60",
            "typing_extensions>=4.5",
        ],
        extras_require={
            "test": ["pytest>=7.0"],
        },
    )
