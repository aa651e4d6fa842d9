import os
import sys

sys.path.insert(0, os.path.abspath("../.."))

project = "Hotel Front Desk"
copyright = "2025, Hotel Front Desk contributors"
author = "Hotel Front Desk contributors"
release = "0.1.0"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
]

napoleon_numpy_docstring = True

templates_path = ["_templates"]
exclude_patterns: list[str] = []

html_theme = "sphinx_rtd_theme"
html_static_path = ["_static"]
