"""
Extension modules used as discovery fixtures.
"""
