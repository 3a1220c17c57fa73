# setup.py
from setuptools import setup, find_packages

setup(
    name="twinlog",
    version="1.0.0",
    description="Leveled console and rotating file logging with colorized output",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "colorlog>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Topic :: System :: Logging",
    ],
)
