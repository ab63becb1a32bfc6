"""
Lets `python -m treelox [script]` stand in for the `treelox` console script.
"""
from treelox.cmdline import main

main()
