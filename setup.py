"""Setup script for Deckhand."""

from setuptools import find_packages, setup

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="deckhand",
    version="1.0.0",
    description="Zero-downtime symlink deployments driven by pluggable lifecycle tasks",
    author="Deckhand Engineering",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"deckhand": ["resources/maintenance/*", "resources/maintenance/**/*"]},
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.4"],
    },
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "deckhand=deckhand.__main__:main",
        ],
    },
)
