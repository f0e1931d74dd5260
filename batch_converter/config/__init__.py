"""
Configuration Package for the batch converter.

This package centralizes the static settings of the application: the name and
location of the batch descriptor file, the element names of its XML format,
the recognised collision generation types, logging formats, and the optional
user overrides loaded from `config.user.yaml`. Keeping them here lets the
codec, the editor and the pipeline agree on one set of names without
hardcoding strings in several places.
"""
