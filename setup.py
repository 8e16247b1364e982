"""
iCOW — Island City On a Wedge flood-defense valuation engine.
Research-grade coastal adaptation cost/damage simulation package.
"""

from setuptools import setup, find_packages

setup(
    name="icow-engine",
    version="1.0.0",
    description="Coastal flood-defense valuation engine with zone-based damage, "
                "dike failure, adaptive quadrature and Monte Carlo hazard integration.",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24",
        "gymnasium>=0.29",
        "scipy>=1.10",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
        ],
    },
)
