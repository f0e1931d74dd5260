"""
Utilities Package for the batch converter.

Modules:
    - format_utils.py: Locale-independent number formatting and parsing, and
      console formatting of a batch.
    - path_utils.py: The default existence check for input files and output
      directory normalisation.
"""
