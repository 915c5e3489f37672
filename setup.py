from setuptools import find_packages, setup

setup(
    name='rzcomponents',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.9',
    install_requires=[
        'Click',
        'graphviz',
        'pulumi>=3.0.0,<4.0.0',
        'pulumi-aws>=6.0.0,<7.0.0'
    ],
    extras_require={
        'test': ['pytest']
    },
)
