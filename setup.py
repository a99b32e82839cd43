from setuptools import setup, find_packages

setup(
    name="webheal",
    version="1.0.0",
    packages=find_packages(include=["webheal", "webheal.*"]),
    install_requires=[
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
        "selenium>=4.10.0",
        "requests>=2.28.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "webheal=webheal.cli:main",
        ],
    },
)
