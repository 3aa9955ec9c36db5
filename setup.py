"""
Block Filter Index Setup
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="blockfilter-index",
    version="0.3.0",
    author="Block Filter Index Team",
    description="Reorg-safe persistent index of compact block filters",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["blockfilter", "blockfilter.*"]),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-timeout>=2.2.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
        "Topic :: System :: Distributed Computing",
    ],
    keywords="blockchain compact-block-filters bip157 bip158 sqlite index",
)
