from setuptools import setup, find_packages
import re

# Read version from paytax/__init__.py
with open('paytax/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='paytax',
    version=version,
    packages=find_packages(include=['paytax', 'paytax.*']),
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'paytax=paytax.cli.__main__:main',
        ],
    },
    author='Personal',
    description='Per-period payroll tax withholding engine.',
    python_requires='>=3.11',
)
