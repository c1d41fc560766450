from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="lucenesearch",
    version="0.1.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Lucene-style full-text search over application models",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/lucenesearch",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    package_data={"config": ["default_config.yaml"]},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Database",
        "Topic :: Text Processing :: Indexing",
    ],
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21.0",
        "msgpack>=1.0.0",
        "pyyaml>=6.0",
        "pyparsing>=3.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "mypy>=1.0.0",
        ],
    },
)
