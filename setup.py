from setuptools import setup, find_packages

with open('requirements.txt') as f:
    required = f.read().splitlines()

setup(
    name = 'simplejsonconfig',
    version = '0.1.0',
    description = 'File-backed JSON configuration singletons for extension modules',
    packages = find_packages(include=['simplejsonconfig', 'simplejsonconfig.*']),
    python_requires = '>=3.10',
    install_requires = required,
    extras_require = {'test': ['pytest>=7.0']}
)
