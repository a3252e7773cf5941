"""Setup configuration for reviewstats"""

from setuptools import setup, find_packages

setup(
    name="pr-review-stats",
    version="0.1.0",
    description=(
        "Working-hours review timings for GitHub pull requests: initial "
        "response time and approval time per reviewer."
    ),
    author="PR Review Stats Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "tzdata>=2023.3",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
)
