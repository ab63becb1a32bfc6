"""
A tree-walking interpreter for the Lox scripting language.
"""
