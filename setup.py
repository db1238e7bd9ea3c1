from setuptools import setup, find_packages

setup(
    name="csss-lang",
    version="0.1.0",
    description="CSSS — CSS-shaped scripting language that transpiles to JavaScript",
    packages=find_packages(include=["csss", "csss.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "csss=csss.cli:main",
        ],
    },
)
