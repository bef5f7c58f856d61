from setuptools import setup, find_packages
import re

# Read version from lgupay/__init__.py
with open('lgupay/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='lgu-payroll',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'lgupay': ['payroll-rules/*.yaml'],
    },
    install_requires=[
        'PyYAML>=6.0',
        'click>=8.0',
        'pydantic>=2.0.0',
        'rich>=13.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'lgu-payroll=lgupay.cli.__main__:main',
        ],
    },
    author='LGU HRMO',
    description='Payroll calculation engine for Philippine local-government units.',
    python_requires='>=3.10',
)
