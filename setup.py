"""
Setup script for the stateless accumulator package.
"""

from setuptools import setup, find_packages

with open("requirements-dev.txt", "r") as f:
    dev_requirements = [
        line.strip() for line in f if line.strip() and not line.startswith("#")
    ]

setup(
    name="stateless-accumulator",
    version="0.1.0",
    description="Batched RSA accumulator engine for stateless ledgers",
    author="BTP Research Project",
    packages=find_packages(include=["stateless_accum", "stateless_accum.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "python-json-logger>=2.0",
    ],
    extras_require={
        "dev": dev_requirements,
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
