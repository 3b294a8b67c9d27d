#!/usr/bin/env python
import os
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open(os.path.join(os.path.dirname(__file__), "VERSION"), "r") as fh:
    version = fh.read().strip()

setup(name='gpreg',
      version=version,
      author='Emmanuel Vazquez',
      author_email='emmanuel.vazquez@centralesupelec.fr',
      description='GPreg: Gaussian process regression posterior engine',
      long_description=long_description,
      long_description_content_type="text/markdown",
      classifiers=[
          "Programming Language :: Python :: 3",
          "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
          "Operating System :: OS Independent",
      ],
      packages=find_packages(exclude=["tests", "tests.*", "examples"]),
      license='GPLv3',
      install_requires=[
             "numpy",
             "scipy>=1.8.0",
         ],
      extras_require={
          "torch": ["torch"],
          "dev": ["pytest"],
      },
      python_requires=">=3.8",
      )
