# Configuration file for the Sphinx documentation builder.

import os
import sys
from datetime import datetime

# Add project src to sys.path so autodoc can import the package
sys.path.insert(0, os.path.abspath("../src"))

project = "optiondax-pricing"
author = "Option DAX developers"
current_year = datetime.now().year
copyright = f"{current_year}, {author}"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.autosummary",
    "sphinx.ext.viewcode",
    "sphinx.ext.doctest",
]

autosummary_generate = True

templates_path = ["_templates"]
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

html_theme = "furo"
html_static_path = ["_static"]

# Docstrings use the NumPy layout
napoleon_google_docstring = False
napoleon_numpy_docstring = True

# matplotlib is optional at import time
autodoc_mock_imports = ["matplotlib"]

# Primary document
master_doc = "index"
