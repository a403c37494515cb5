"""Setup script for materia package."""

from setuptools import setup, find_packages

setup(
    name='materia',
    version='1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'materia': ['data/*.yaml', 'config/*.yaml'],
    },
    include_package_data=True,
    python_requires='>=3.10',
    install_requires=[
        'numpy>=1.20.0',
        'scipy>=1.9.0',
        'matplotlib>=3.3.0',
        'pyyaml>=6.0',
        'pymatgen>=2023.1.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
)
