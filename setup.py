"""Install gerrit-github."""

import re

from setuptools import find_packages, setup


def is_requirement(line):
    """
    Return True if the requirement line is a package requirement.

    Returns:
        bool: True if the line is not blank, a comment,
        a URL, or an included file
    """
    return line and line.strip() and not line.startswith(('-r', '#', '-e', 'git+', '-c'))


def get_requirements(path):
    with open(path) as f:
        lines = f.readlines()
    return [line.strip() for line in lines if is_requirement(line)]


version = ''
with open('gerrit_github/__init__.py', 'r') as fd:
    version = re.search(r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
                        fd.read(), re.MULTILINE).group(1)

if not version:
    raise RuntimeError('Cannot find version information')


setup(
    name="gerrit_github",
    version=version,
    description="GitHub webhooks and pull request import for Gerrit",
    long_description=open('README.rst').read(),
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=get_requirements("requirements.txt"),
    extras_require={
        "test": get_requirements("requirements-test.txt"),
    },
    license='Apache 2.0',
    classifiers=(
        'License :: OSI Approved :: Apache Software License',
        'Framework :: Flask',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3.12',
    ),
    zip_safe=False,
)
