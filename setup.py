# rotation_rtpc/setup.py
import re

import os
from setuptools import find_packages
from setuptools import setup


def get_version_from_init():
    """Reads the __version__ string from rotation_rtpc/__init__.py."""
    init_py_path = os.path.join(
        os.path.dirname(os.path.abspath(__file__)), "rotation_rtpc", "__init__.py"
    )
    try:
        with open(init_py_path, "r", encoding="utf-8") as f:
            version_file_content = f.read()
        version_match = re.search(
            r"^__version__\s*=\s*['\"]([^'\"]*)['\"]",
            version_file_content,
            re.M,
        )
        if version_match:
            return version_match.group(1)
        raise RuntimeError(
            f"Unable to find __version__ string in {init_py_path}."
        )
    except FileNotFoundError as exc:
        raise RuntimeError(
            f"{init_py_path} not found. Ensure you are in the correct directory."
        ) from exc


try:
    with open("README.md", "r", encoding="utf-8") as f:
        long_description = f.read()
except FileNotFoundError:
    long_description = (
        "Turns object rotation into audio trigger events and RTPC values."
    )


setup(
    name="rotation-rtpc",
    version=get_version_from_init(),
    description="Turns object rotation into audio trigger events and RTPC values.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where=".", include=["rotation_rtpc", "rotation_rtpc.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Games/Entertainment",
    ],
    python_requires=">=3.8",
    install_requires=[
        "click>=8.0",  # For the replay tool
        "rich>=10.0.0",  # For the replay result tables
    ],
    extras_require={
        "test": [
            "pytest>=6.0",
            "pytest-asyncio>=0.21",
            "pytest-mock>=3.0",
        ],
        "dev": [
            "pytest>=6.0",
            "pytest-asyncio>=0.21",
            "pytest-mock>=3.0",
            "flake8>=3.9",
            "black>=21.0",
            "mypy>=0.900",
        ],
    },
    entry_points={
        "console_scripts": [
            "rotation-rtpc-replay=rotation_rtpc.replay:main",
        ],
    },
    keywords="audio rtpc rotation orientation game sound hysteresis asyncio",
)
