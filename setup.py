"""
Setup script for ndmat

Pure-Python package with a src/ layout:
1. Version is read from src/ndmat/__init__.py
2. Runtime dependencies are numpy (storage) and scipy (recursive filters)
3. The ``test`` extra installs pytest
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/ndmat/__init__.py
def get_version():
    version_file = Path("src/ndmat/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="ndmat",
    version=get_version(),
    description="N-dimensional column-major matrices with image filtering",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20",
        "scipy>=1.6",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    zip_safe=True,
)
