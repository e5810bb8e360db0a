#!/usr/bin/env python
# -*- encoding: utf-8 -*-

"""Setup Module for Blogit"""

import io
import re

from glob import glob
from os.path import basename, dirname, join, splitext

from setuptools import find_packages, setup


def read(*names, **kwargs):
    """Helper method to read files"""
    return io.open(
        join(dirname(__file__), *names),
        encoding=kwargs.get("encoding", "utf8"),
    ).read()


install_requires = [
    "bleach>=4.1.0",
    "inflection>=0.5.1",
    "python-dateutil>=2.8.2",
]

testing_requires = [
    "mock==5.1.0",
    "pytest-cov>=4.1.0",
    "pytest-mock==3.12.0",
    "pytest>=7.4.3",
]

types_requires = [
    "types-bleach>=6.0.0",
    "types-mock>=0.1.3",
    "types-python-dateutil>=0.1.6",
]

dev_requires = (
    types_requires
    + testing_requires
    + [
        "black>=23.11.0",
        "check-manifest>=0.49",
        "coverage>=7.3.2",
        "pre-commit>=2.16.0",
        "tox>=4.11.3",
        "twine>=4.0.2",
    ]
)

setup(
    name="blogit",
    version="0.1.0",
    license="BSD 3-Clause License",
    description="Blogging engine models: posts, listings, comments and tags",
    long_description="%s\n%s"
    % (
        re.compile("^.. start-badges.*^.. end-badges", re.M | re.S).sub(
            "", read("README.rst")
        ),
        re.sub(":[a-z]+:`~?(.*?)`", r"``\1``", read("CHANGELOG.rst")),
    ),
    packages=find_packages("src"),
    package_dir={"": "src"},
    py_modules=[splitext(basename(path))[0] for path in glob("src/*.py")],
    include_package_data=True,
    zip_safe=False,
    python_requires=">=3.11",
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: News/Diary",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords=["blog", "blogging", "posts", "domain model"],
    install_requires=install_requires,
    extras_require={
        "test": testing_requires,
        "tests": testing_requires,
        "testing": testing_requires,
        "dev": dev_requires,
        "all": dev_requires,
    },
)
