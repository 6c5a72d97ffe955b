"""
GeoIndex Setup Script

Install with: pip install -e .
Tests:        pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name='geoindex',
    version='0.1.0',
    description='Geospatial secondary index over a wide-column store',
    author='GeoIndex Team',
    packages=find_packages(include=['geoindex', 'geoindex.*']),
    package_data={
        'geoindex.config': ['*.yaml'],
    },
    install_requires=[
        'sqlalchemy>=2.0.0',
        'aiosqlite>=0.19.0',
        'greenlet>=3.0.0',
        'pydantic>=2.5.0',
        'pyyaml>=6.0.1',
        'structlog>=23.1.0',
    ],
    extras_require={
        'postgres': [
            'asyncpg>=0.29.0',
        ],
        'test': [
            'pytest>=7.4.0',
            'pytest-asyncio>=0.23.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'geoindex=geoindex.cli:run',
        ],
    },
    python_requires='>=3.11',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Database',
        'Topic :: Scientific/Engineering :: GIS',
    ],
)
