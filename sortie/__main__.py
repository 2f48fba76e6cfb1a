"""
Run a script with `py -m sortie problem.smt2`.
The details are in cmdline.
"""
from .cmdline import main

main()
