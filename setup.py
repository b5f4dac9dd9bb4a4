from setuptools import setup, find_namespace_packages


setup(
    name='launchpad_core',
    version='0.1',
    packages=find_namespace_packages(where="src", include=["launchpad_core*"]),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        'click>=8.1',
        'loguru>=0.7',
        'pydantic>=2.0',
        'flask>=2.3',
        'flask-openapi3>=3.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'launchpad_core = launchpad_core.main:main',
        ],
    },
)
