# copyright ##################################### #
# This file is part of the Pwlfunctions Package.  #
# Copyright (c) CERN, 2021.                       #
# ############################################### #

from setuptools import setup, find_packages
from pathlib import Path

version_file = Path(__file__).parent / 'pwlfunctions/_version.py'
dd = {}
with open(version_file.absolute(), 'r') as fp:
    exec(fp.read(), dd)
__version__ = dd['__version__']

setup(
    name='pwlfunctions',
    version=__version__,
    description='Continuous piecewise linear functions of one variable',
    long_description=("Continuous piecewise linear functions of one variable"
                      "\nwith exact arithmetic, min/max, composition and "
                      "convex meet."),
    packages=find_packages(include=['pwlfunctions', 'pwlfunctions.*']),
    python_requires='>=3.8',
    install_requires=['numpy'],
    license='Apache 2.0',
    extras_require={
        'tests': ['pytest'],
    },
)
