from setuptools import setup

setup(
    name='pytracks',
    version='0.1.0',
    description='Read binned genomic signal tracks from SQLite track databases',
    install_requires=['pandas', 'numpy'],
    extras_require={'test': ['pytest']},
    packages=['pytracks'],
    python_requires='>=3.10',
    zip_safe=False
)
