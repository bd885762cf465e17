from setuptools import setup

required = ['highspy>=1.7',
            'numpy']

import os
import re
HERE = os.path.abspath(os.path.dirname(__file__))


def read(*parts):
    try:
        with open(os.path.join(HERE, *parts)) as f:
            return f.read()
    except IOError:
        return "mipbuilder"


def find_version():
    version_file = read('mipbuilder', 'version.py')
    parts = [re.search(r"^mipbuilder_version_%s = (\d+)" % p, version_file, re.M).group(1)
             for p in ('major', 'minor', 'micro')]
    return '.'.join(parts)


ss = str(read('README.rst'))

setup(
    name = 'mipbuilder',
    packages = ['mipbuilder'],
    version = find_version(),
    description = 'Incremental, batched building of linear and mixed-integer models',
    long_description='%s\n' % ss,
    keywords = ['optimization', 'linear programming', 'mip', 'highs'],
    license = 'Apache License 2.0',
    python_requires = '>=3.8',
    install_requires=required,
    extras_require={'test': ['pytest']},
    classifiers = ["Development Status :: 4 - Beta",
                   "Intended Audience :: Developers",
                   "Intended Audience :: Science/Research",
                   "Operating System :: OS Independent",
                   "Topic :: Scientific/Engineering",
                   "Topic :: Scientific/Engineering :: Mathematics",
                   "Topic :: Software Development :: Libraries",
                   "License :: OSI Approved :: Apache Software License",
                   "Programming Language :: Python",
                   "Programming Language :: Python :: 3"
                   ],
)
