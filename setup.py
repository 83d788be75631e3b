from setuptools import setup, find_packages

setup(
    name='pg-repl-inspector',
    version='0.1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.8',
    install_requires=[
        'click',
        'psycopg2-binary',
        'toml',
        'PyYAML',
        'jinja2',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'pg-repl-inspector=repl_inspector.main:main',
        ],
    },
    include_package_data=True,
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
