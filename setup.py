#!/usr/bin/env python
from setuptools import setup, find_packages

with open("README.md", "r", encoding='utf-8') as fh:
    long_description = fh.read()

setup(
    name="ecsmanage",
    version="0.2.0",
    description="Bulk operations on the services in AWS ECS clusters",
    long_description=long_description,
    long_description_content_type="text/markdown",
    keywords=['aws', 'ecs', 'devops'],
    classifiers=[
       "Programming Language :: Python :: 3"
    ],
    packages=find_packages(exclude=['*.test', '*.test.*']),
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        "boto3 >= 1.17",
        "cement>=3.0.0",
        "click >= 6.7",
        "colorlog",
        "PyYAML >= 5.1",
        "tabulate >= 0.8.1",
    ],
    extras_require={
        'test': [
            "mock",
            "pytest",
            "testfixtures",
        ],
    },
    entry_points={'console_scripts': [
        'ecsmanage = ecsmanage.main:main',
    ]}
)
