"""
Packaging script for PyPI.
"""
import setuptools

setuptools.setup(
	name='sortie-smt',
	author='Beth Kjos',
	author_email='kjosib@gmail.com',
	version='0.0.1',
	packages=['sortie', "sortie.adapters", ],
	entry_points={
		'console_scripts': ["sortie = sortie.cmdline:main"],
	},
	license='MIT',
	description='A front end for SMT-LIB2 constraint scripts over Booleans and Reals',
	long_description=open('README.md').read(),
	long_description_content_type="text/markdown",
	classifiers=[
		"Programming Language :: Python :: 3.12",
		"License :: OSI Approved :: MIT License",
		"Operating System :: OS Independent",
		"Development Status :: 3 - Alpha",
		"Intended Audience :: Developers",
		"Intended Audience :: Science/Research",
		"Topic :: Software Development :: Compilers",
		"Topic :: Scientific/Engineering :: Mathematics",
		"Environment :: Console",
    ],
	python_requires='>=3.9',
	install_requires=[
		"booze-tools>=0.6.2.1",
		"z3-solver>=4.12",
	],
	extras_require={
		"test": ["pytest"],
	},
)
