#!/usr/bin/env python3
import setuptools

setuptools.setup(
    name="snowflake-check",
    version="0.1.0",
    packages=["snowflake_check"],
    python_requires=">=3.11",
    install_requires=[
        "click",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "snowflake = snowflake_check.cli:main",
        ],
    },
    author="",
    description="Command-line tool to check multi-line imports and line widths in source files",
    license="MIT",
)
