# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="orgviz",
    version="1.0.0",
    description="Compile folder hierarchies into JSON trees for circle-packing organization views",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["orgviz", "orgviz.*"]),
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'orgviz=orgviz.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
