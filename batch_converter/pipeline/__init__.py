"""
This package contains the conversion pipeline of the batch converter.

The pipeline orchestrates a session: it loads the batch file left by the
previous run, lets the editor apply changes, writes the batch file back and
launches the backend process that performs the actual conversion.
"""
