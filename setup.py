#!python

import os.path
import sys

from setuptools import find_packages, setup

sys.path.insert(0, os.path.abspath(os.path.join("src", "nfasim")))
from version import versionstring  # noqa: E402

if __name__ == "__main__":
    setup(
        name="NFASim",
        version=versionstring(),
        package_dir={"": "src"},
        packages=find_packages("src"),
        description="Build and step through nondeterministic finite automata.",
        long_description=open("README.md").read(),
        long_description_content_type="text/markdown",
        license="Two-clause BSD license",
        keywords="automaton nfa epsilon simulation",
        zip_safe=True,
        install_requires=[
            "cached-property==1.5.2",
            "loguru==0.7.2",
        ],
        extras_require={
            "test": [
                "pytest==8.3.2",
            ],
        },
        entry_points={
            "console_scripts": [
                "nfasim=nfasim.simulator:main",
            ],
        },
        classifiers=[
            "Programming Language :: Python :: 3",
            "Development Status :: 4 - Beta",
            "Intended Audience :: Developers",
            "Intended Audience :: Education",
            "License :: OSI Approved :: BSD License",
            "Natural Language :: English",
            "Operating System :: OS Independent",
            "Programming Language :: Python :: 3.8",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
            "Topic :: Software Development :: Libraries :: Python Modules",
        ],
    )
