"""
easydb - a client for the easydb.io hosted database
https://github.com/easydb-io/easydb-python
"""

import os.path
# Always prefer setuptools over distutils
from setuptools import setup, find_packages


def read_text(filepath):
    with open(filepath, "r", encoding="utf-8") as f:
        return f.read()


here = os.path.dirname(__file__)
# Get the long description from the README file
long_description = read_text(os.path.join(here, 'README.md'))


def read_version_string(version_file):
    for line in read_text(version_file).splitlines():
        if line.startswith('__version__'):
            delim = '"' if '"' in line else "'"
            return line.split(delim)[1]
    else:
        raise RuntimeError("Unable to find version string.")


version = read_version_string(os.path.join(here, "easydb/version.py"))

requirements = [
    line for line in read_text(os.path.join(here, 'requirements.txt')).splitlines()
    if line.strip() and not line.startswith('#')
]

setup(
    name='easydb',
    version=version,
    description='easydb - a client for the easydb.io hosted key/value database',
    long_description=long_description,
    long_description_content_type='text/markdown',
    # The project's main homepage.
    url='https://easydb.io',
    author='easydb contributors',
    license='Apache-2.0 OR MIT',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Operating System :: OS Independent',
        'Topic :: Database',
        'Topic :: Database :: Front-Ends',
        'Topic :: Software Development :: Libraries',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'License :: OSI Approved :: Apache Software License',
        'License :: OSI Approved :: MIT License',
    ],
    keywords='easydb easydb.io database key-value client',
    packages=find_packages(exclude=['contrib', 'docs', 'data', 'examples', 'tests']),
    python_requires='>=3.8',
    install_requires=requirements,
    extras_require={
        'tests': [
            'pytest>=7.0',
        ],
    },
    package_data={
        'easydb': ['config/default/*.conf']
    },
    include_package_data=True,
    # To provide executable scripts, use entry points in preference to the
    # "scripts" keyword. Entry points provide cross-platform support and allow
    # pip to create the appropriate form of executable for the target platform.
    entry_points={
        'console_scripts': [
            'easydb = easydb.cli.__main__:main',
        ],
    },
)
