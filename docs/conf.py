# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

import os
import sys

sys.path.insert(0, os.path.abspath("../src"))

# -- Project information -----------------------------------------------------

project = 'dimq'
copyright = '2026, dimq contributors'
author = 'dimq contributors'
html_title = 'dimq Docs'

# -- General configuration ---------------------------------------------------

extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.napoleon',
    'sphinx.ext.viewcode',
    'sphinx_copybutton',
    "myst_parser"
]

autodoc_member_order = "bysource"
napoleon_numpy_docstring = True

templates_path = ['_templates']
exclude_patterns = ['_build', 'Thumbs.db', '.DS_Store']


# -- Options for HTML output -------------------------------------------------

html_theme = "furo"

html_theme_options = {
    # Show project name at top of the sidebar
    "sidebar_hide_name": False,

    # Handy keyboard nav (j/k) through the sidebar
    "navigation_with_keys": True,
}


source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}
