from setuptools import setup, find_packages

setup(
    name="docscan",
    version="0.1.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    package_dir={"": "."},
    python_requires=">=3.9",
    install_requires=[
        "opencv-python",
        "numpy",
        "Pillow",
        "pillow-heif",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["docscan=docscan.cli:main"],
    },
)
