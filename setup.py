"""
Setup file
Install Flutter Kernel with core dependencies via:
- pip install -e <local_repo_path>
To run the tests, optional libraries definded as extras are necessary:
- pip install -e <repo_path>[test]
"""

from setuptools import setup, find_packages


def my_setup():
    setup(name='FlutterKernel',
          version='2025.01',
          description="""The Flutter Kernel Software calculates the flutter velocity of structures in supersonic flow using
          piston theory aerodynamics, as well as the sensitivities of the flutter velocity with respect to design
          parameters.""",
          long_description=open('README.md', encoding='utf8').read(),
          long_description_content_type='text/markdown',
          license='BSD 3-Clause License',
          packages=find_packages(exclude=['tests', 'tests.*']),
          entry_points={'console_scripts': ['flutter-kernel=flutterkernel.program_flow:command_line_interface']},
          python_requires='>=3.10',
          install_requires=['matplotlib',
                            'numpy',
                            'scipy',
                            'h5py',
                            ],
          extras_require={'test': ['pytest',
                                   'pytest-cov',
                                   'flake8',
                                   'pylint',
                                   ]},
          )


if __name__ == '__main__':
    my_setup()
