from setuptools import setup, find_packages


setup(
    name="pman",
    version="0.1",
    packages=find_packages(include=["pman", "pman.*"]),
    description="Codec and command line tool for PMAN game asset archives.",
    python_requires=">=3.8",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "pman=pman.cli:main",
        ]
    },
)
