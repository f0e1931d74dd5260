"""
The batch converter package.

It collects FBX conversion jobs (input file, collision mesh to generate and
named animation clips) into a batch, stores the batch as `batch.xml` and starts
the backend process that reads that file and performs the conversion.

Subpackages:
    config: Constants and user overrides.
    domain: The batch model and the exception hierarchy.
    services: The descriptor codec, the editor and the notifiers.
    pipeline: Loading, saving and handing the batch to the backend.
    utils: Number formatting and filesystem helpers.
"""
