from setuptools import find_packages, setup

setup(
    name="htmltrim",
    version="1.0.0",
    description="Strip HTML comments and redundant whitespace on the way out, leaving <pre> blocks intact",
    author="GAHEOS",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["htmltrim=htmltrim.cli:main"],
    },
)
