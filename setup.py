#!/usr/bin/env python

from os.path import abspath, dirname, join

from setuptools import setup

with open(join(dirname(abspath(__file__)), 'rangeutils', 'version.py')) as version_file:
    exec(compile(version_file.read(), "version.py", 'exec'))

setup(name='rangeutils',
      version=version,
      description="Ranges, range sets and range maps over arbitrary ordered types",
      packages=['rangeutils'],
      # 3.8 and up, but not Python 4
      python_requires='~=3.8',
      install_requires=[
          'immutablecollections>=0.12.0',
          'attrs>=21.4.0',
          'typing_extensions',
          'sortedcontainers>=2.4.0',
      ],
      extras_require={
          'test': [
              'pytest',
              'hypothesis',
          ],
      },
      package_data={'rangeutils': ['py.typed']},
      classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ]
      )
