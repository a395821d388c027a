from pathlib import Path

from setuptools import setup, find_packages

# Read the version without importing the package and its dependencies
about = {}
exec((Path(__file__).parent / "pfmt" / "version.py").read_text(), about)
__version__ = about["__version__"]

setup(
    name="pfmt",
    version=__version__,
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "lark>=1.1.5",
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "typer>=0.9.0",
        "pydantic>=2.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pfmt=pfmt.main:app",
        ],
    },
    python_requires=">=3.10",
)
