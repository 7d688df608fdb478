from setuptools import find_packages, setup

with open("README.rst") as f:
    long_description = f.read()

setup(
    name="regionstat",
    version="0.1.0",
    description="Regional statistics from classified rasters and polygons",
    long_description=long_description,
    license="MIT",
    packages=find_packages(include=["regionstat", "regionstat.*"]),
    package_dir={"regionstat": "regionstat"},
    test_suite="regionstat.tests",
    python_requires=">=3.10",
    install_requires=[
        "affine<3",
        "dask",
        "geopandas>=1.0",
        "loguru",
        "numpy",
        "pandas",
        "pyproj",
        "rasterio>=1",
        "shapely>=2",
        "xarray>=0.11",
    ],
    extras_require={
        "test": ["pytest", "pytest-cov"],
        "dev": ["black", "pytest", "pytest-cov"],
    },
    classifiers=[
        # https://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: GIS",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
    keywords="zonal statistics raster polygon regions",
)
