from __future__ import annotations

from setuptools import find_packages, setup  # type: ignore


setup(
    name="wxoracle",
    version="0.1.0",
    description="Authorization-gated, append-only weather data registry with an HTTP API",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "fastapi",
        "uvicorn",
        "httpx",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
