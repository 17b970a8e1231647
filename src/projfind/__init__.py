"""
Project File Finder - Core Package

Locates the root of the project a file belongs to, catalogs the project's
files with readable labels, and runs source searches scoped to the project.
"""

__version__ = "0.1.0"
__author__ = "Project File Finder Team"
