"""Setup script for case-event-generator package following Cosmic Python pattern."""

from setuptools import setup, find_namespace_packages

setup(
    name="case-event-generator",
    version="1.0.0",
    description="Synthetic case event generator - simulated surveillance case lifecycle records",
    author="Case Event Generator Team",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["case_events*", "shared*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        "sqlalchemy>=2.0",
        "redis",
        "faker",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-cov",
            "fakeredis",
        ],
        "dev": [
            "black",
            "flake8",
            "mypy",
            "pre-commit",
        ],
    },
    entry_points={
        "console_scripts": [
            "case-event-generator=case_events.entrypoints.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Healthcare Industry",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.11",
        "Topic :: Scientific/Engineering :: Medical Science Apps.",
    ],
)
