from setuptools import setup, find_packages

setup(
    name="ccmash",
    description="Memory-hard proof of work: seed hashes, caches, datasets and hashimoto",
    long_description=open("README.md", 'r').read(),
    long_description_content_type='text/markdown',

    install_requires=[
        "numpy>=1.20",
        "pycryptodome>=3.10",
        "ptpython",
    ],

    extras_require={
        "test": [
            "pytest",
        ],
    },

    packages=find_packages(exclude=["tests", "tests.*", "performance"]),

    setup_requires=["setuptools_scm"],
    use_scm_version={
        "write_to": "ccmash/scmversion.py",
        "write_to_template": "__version__ = '{version}'\n",
        "fallback_version": "0.0.0",
    },

    include_package_data=True,

    entry_points={
        'console_scripts': [
            'ccmash-version=ccmash.scripts.version:main',
            'ccmash-seedhash=ccmash.scripts.seedhash:main',
            'ccmash-makedag=ccmash.scripts.makedag:main',
            'ccmash-compute=ccmash.scripts.compute:main',
            'ccmash-repl=ccmash.scripts.repl:main',
        ],
    },

    license="BSD-3-Clause",
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',

        'Intended Audience :: Developers',

        'License :: OSI Approved :: BSD License',

        'Operating System :: MacOS :: MacOS X',
        'Operating System :: POSIX',

        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
)
