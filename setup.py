"""Package metadata for envmerge."""

from setuptools import find_packages, setup

setup(
    name="envmerge",
    version="0.1.0",
    description="Merge multiple .env files while preserving comments and handling conflicts",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "click>=8.1",
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "envmerge=envmerge.cli:main",
        ],
    },
)
