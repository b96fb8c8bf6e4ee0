#!/usr/bin/env python
import os

from setuptools import find_packages, setup


def get_version():
    version = {}
    with open(os.path.join("src", "layerpaint", "version.py")) as f:
        exec(f.read(), version)
    return version["__version__"]


setup(
    name="layerpaint",
    version=get_version(),
    description="Layered raster painting engine with mask-gated border effects",
    license="MIT",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "Pillow>=10.0.0",
        "attrs>=23.1.0",
        "scipy",
        "scikit-image",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["layerpaint=layerpaint.__main__:main"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Multimedia :: Graphics",
    ],
)
