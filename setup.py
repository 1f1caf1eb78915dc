#!/usr/bin/python
# -*- encoding: utf-8 -*-
import ast
import re

from setuptools import find_packages
from setuptools import setup

## The version number is kept in one place only, as
## minicaldav.__version__
_version_re = re.compile(r"__version__\s+=\s+(.*)")
with open("minicaldav/__init__.py", "rb") as f:
    version = str(
        ast.literal_eval(_version_re.search(f.read().decode("utf-8")).group(1))
    )

if __name__ == "__main__":
    test_packages = [
        "pytest",
        "pytest-cov",
        "coverage",
        "PyYAML",
    ]

    setup(
        name="minicaldav",
        version=version,
        description="Small CalDAV (RFC4791) client with a lenient icalendar parser",
        long_description=open("README.md").read(),
        long_description_content_type="text/markdown",
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: Developers",
            "License :: OSI Approved :: GNU General " "Public License (GPL)",
            "Operating System :: OS Independent",
            "Programming Language :: Python",
            "Programming Language :: Python :: 3",
            "Topic :: Office/Business :: Scheduling",
            "Topic :: Software Development :: Libraries " ":: Python Modules",
        ],
        keywords="caldav icalendar webdav",
        license="GPL",
        python_requires=">=3.8",
        packages=find_packages(exclude=["tests"]),
        include_package_data=True,
        zip_safe=False,
        install_requires=[
            "lxml",
            "requests",
            "typing_extensions",
        ],
        extras_require={
            "yaml": ["PyYAML"],
            "test": test_packages,
        },
    )
