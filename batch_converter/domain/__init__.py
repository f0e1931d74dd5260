"""
This package contains the core domain model of the batch converter.

The domain layer describes a batch conversion as the application sees it,
independently of the XML document it is stored in, the command line that edits
it and the backend process that consumes it.

Modules:
    exceptions.py: Custom exception types separating recoverable descriptor
                   problems, fatal stream failures and rejected edits.
    descriptor.py: `ClipDescriptor`, `FileEntry` and `BatchDescriptor`, the
                   ordered in-memory representation of a batch.
"""
