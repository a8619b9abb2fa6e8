from setuptools import setup, find_packages
import re

# Read version from payecalc/__init__.py
with open('payecalc/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='payecalc',
    version=version,
    packages=find_packages(include=['payecalc', 'payecalc.*']),
    package_data={
        'payecalc': ['tax_rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'mcp': [
            'mcp[cli]>=1.0.0,<2',
        ],
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'paye-calc=payecalc.cli.__main__:main',
            'paye-calc-mcp=payecalc.mcp.server:run_server',
        ],
    },
    author='Personal',
    description='Nigerian PAYE tax, statutory deduction and relief engine.',
    python_requires='>=3.10',
)
