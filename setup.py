# setup.py
from setuptools import setup, find_packages

setup(
    name="dirshape",
    version="1.0.0",
    description="Typed directory contracts bound to real filesystem locations",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'dirshape=dirshape.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
