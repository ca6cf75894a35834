"""
Version 1 of the Tourisma API.
"""
