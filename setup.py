import logging
import pathlib
import shutil
import sys

from setuptools import find_packages, setup

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.DEBUG)


def clean_built():
    """
    Remove common build directories in a Python project.
    """
    dirs_to_remove = [
        "__pycache__",
        ".pytest_cache",
        "*.egg-info",
        "build",
    ]

    for path in pathlib.Path(".").rglob("*"):
        if path.is_dir() and any(path.match(d) for d in dirs_to_remove):
            shutil.rmtree(path, ignore_errors=True)
            logger.info(f"Removed directory: {path}")


if __name__ == "__main__":
    if "clean" in sys.argv:
        clean_built()

    setup(
        name="hectx",
        version="0.1.0",
        description="Parameter validation and modulus-switching chain for BFV/CKKS/BGV homomorphic encryption.",
        packages=find_packages(include=["hectx", "hectx.*"]),
        python_requires=">=3.10",
        install_requires=[
            "numpy",
            "loguru",
            "joblib",
        ],
        extras_require={
            "test": ["pytest"],
        },
    )
