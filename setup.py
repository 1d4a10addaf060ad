"""Setup script for the hog-cache package"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_file = Path(__file__).parent / 'README.md'
long_description = readme_file.read_text() if readme_file.exists() else ''

setup(
    name='hog-cache',
    version='1.0.0',
    description='Histogram of Oriented Gradients with cached cell histograms for fast windowed retrieval',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.24.0',
        'pandas>=2.0.0',
        'opencv-python>=4.8.0',
        'tqdm>=4.66.0',
        'pyyaml>=6.0',
        'joblib>=1.3.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.4.0',
        ]
    },
    entry_points={
        'console_scripts': [
            'hog-extract=scripts.extract_hog:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
)
