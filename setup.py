"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/zackees/precache"
KEYWORDS = "flutter precache artifacts engine toolchain cache download"
HERE = os.path.dirname(os.path.abspath(__file__))


if __name__ == "__main__":
    setup(
        name="precache",
        version="0.1.0",
        description="Selectively populate the cache of toolchain binary artifacts",
        maintainer="Zachary Vorhies",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        install_requires=[
            "requests",
            "tqdm",
            "psutil",
        ],
        extras_require={
            "test": ["pytest"],
        },
        entry_points={
            "console_scripts": [
                "precache=precache.cli:main",
            ],
        },
        include_package_data=True)
