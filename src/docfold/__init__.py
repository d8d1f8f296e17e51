"""
docfold - layered configuration composition for documentation sites

docfold folds theme/extension defaults, the site's own app config and
environment overrides into one runtime configuration tree.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
