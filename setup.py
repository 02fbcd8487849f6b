#!/usr/bin/env python3

""" Build script for the underbar library. """

import glob
import os
import shutil

from setuptools import Command as stCommand, find_packages, setup


def iglob_all(*patterns):
    """ Yield each unique file path that matches one of many glob <patterns>. """
    seen = set()
    for pattern in patterns:
        for path in glob.iglob(pattern, recursive=True):
            if path not in seen:
                yield path
                seen.add(path)


class Command(stCommand):
    """ setuptools Command with default fields and methods defined. """
    user_options = []
    def initialize_options(self):
        pass
    def finalize_options(self):
        pass


class CommandNamespace:
    """ Contains all custom command classes for use in setuptools.setup().
        Any command here may be run by name, e.g. > python3 setup.py clean. """

    class clean(Command):
        description = "Remove all build and test-generated files."
        def run(self):
            for path in iglob_all('.pytest_cache', 'build', 'dist', '*.egg-info', '**/__pycache__'):
                if os.path.isdir(path):
                    shutil.rmtree(path)
                elif os.path.exists(path):
                    os.remove(path)

    class test(Command):
        description = "Run all unit tests."
        def run(self):
            import pytest
            raise SystemExit(pytest.main(["test"]))


setup(
    name="underbar",
    version="1.0.0",
    description="Collection and function-combinator primitives: reduce, flatten, zip, once, memoize and friends.",
    packages=find_packages(exclude=("test", "test.*")),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={"test": ["pytest"]},
    cmdclass={name: cls for name, cls in vars(CommandNamespace).items() if isinstance(cls, type)},
)
