from setuptools import setup, find_packages

# Read the contents of your README file
from pathlib import Path
this_directory = Path(__file__).parent
long_description = (this_directory / "planesom/README.md").read_text() # Use the library's README

setup(
    name='planesom',
    version='0.1.0', # Corresponds to __version__ in __init__.py
    description='A PyTorch-based Self-Organizing Map (SOM) trainer for 2D point clouds.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_packages(where=".", include=['planesom', 'planesom.*']),
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Operating System :: OS Independent',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    python_requires='>=3.9',
    install_requires=[
        'torch>=2.0',
        'matplotlib>=3.5',
        'tqdm',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'planesom=planesom.cli:main',
        ],
    },
    keywords='som, self-organizing map, kohonen map, pytorch, machine learning, visualization',
)
