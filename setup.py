from setuptools import setup, find_packages

with open('requirements.txt') as f:
    required = f.read().splitlines()

setup(
    name='mlcc',
    version='0.1.0',
    url='https://github.com/awslabs/ml-container-creator',
    description='Configuration resolution and validation engine for ML serving container projects',
    packages=find_packages(exclude=['test', 'test.*']),
    package_data={'mlcc.registry': ['data/*.yaml']},
    install_requires=required,
    extras_require={
        'test': ['pytest', 'pytest-cov'],
    },
    python_requires='>=3.10',
)
