from pathlib import Path

from setuptools import find_packages, setup

ROOT = Path(__file__).parent


setup(
    name='storekit-receipts',
    version='0.1',
    description="App Store receipt validation with transparent sandbox redirect",
    long_description=(ROOT / 'README.md').read_text(),
    long_description_content_type='text/markdown',
    install_requires=[line for line in (ROOT / 'requirements.txt').read_text().split('\n') if line.strip()],
    extras_require={
        'test': ['pytest'],
        'lint': ['ruff', 'mypy', 'codespell', 'types-requests'],
    },
    package_dir={'': 'src'},
    packages=find_packages('src'),
    python_requires='>=3.10',
    entry_points={
        'console_scripts': [
            'storekit-receipts=storekit_receipts._internal.cli:main',
        ],
    },
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
)
