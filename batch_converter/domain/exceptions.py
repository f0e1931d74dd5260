"""
Defines custom exception types for the batch converter.

These exceptions separate the recoverable problems of the descriptor codec
(a malformed document, a duplicate key) from the fatal ones (a stream that
cannot be read or written) and from the validation failures raised while the
user edits a batch. Callers catch the narrowest class they can handle.

All custom exceptions inherit from the base `BatchConverterException`.
"""


class BatchConverterException(Exception):
    """Base class for all custom exceptions in the batch converter."""

    pass


# --- Descriptor Document Exceptions ---
class DescriptorException(BatchConverterException):
    """Base class for problems with the content of a batch descriptor."""

    pass


class StructuralDecodeException(DescriptorException):
    """
    Raised when a document does not follow the expected element grammar.

    This covers missing or out-of-order elements, a document that ends before
    the root element closes, unparsable numbers and missing attributes. The
    decoder never lets it reach its caller: it is converted into an empty batch
    plus a notification.
    """

    pass


class DuplicateKeyException(StructuralDecodeException):
    """
    Raised when a file path or a clip name is added twice.

    File paths are unique within a batch, clip names are unique within a file.
    During decode it is a structural error; from the model mutators it reaches
    the host directly.
    """

    pass


class DescriptorEncodeException(DescriptorException):
    """Raised when a batch holds content that cannot be written as XML."""

    pass


# --- Stream Exceptions ---
class BatchIOException(BatchConverterException):
    """
    Base class for failures of the underlying stream.

    Unlike descriptor problems these are fatal: the call is aborted and nothing
    written so far is considered valid.
    """

    pass


class SourceFailure(BatchIOException):
    """Raised when the source stream cannot be read."""

    pass


class SinkFailure(BatchIOException):
    """Raised when the sink stream cannot be written."""

    pass


# --- Editing Exceptions ---
class EditException(BatchConverterException):
    """Base class for rejected edits of a batch."""

    pass


class InvalidClipException(EditException):
    """
    Raised when clip values are not valid numbers, when the begin frame comes
    after the end frame, or when the frame rate is negative.
    """

    pass


class InvalidCollisionTypeException(EditException):
    """Raised when a file is added without one of the known collision types."""

    pass


class UnknownFileException(EditException):
    """Raised when an edit refers to a file that is not part of the batch."""

    pass


class EmptyBatchException(EditException):
    """Raised when a conversion is requested for a batch without files."""

    pass


class MissingOutputDirException(EditException):
    """Raised when a conversion is requested without an output directory."""

    pass


# --- Backend Exceptions ---
class BackendLaunchException(BatchConverterException):
    """Raised when the backend process cannot be started."""

    pass
