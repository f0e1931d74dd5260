"""
Services Package for the batch converter.

This package contains the service layer: the classes and functions that do the
actual work on a batch, between the pipeline that decides when things happen
and the domain model that holds the data.

- **Descriptor codec (`batch_decoder`, `batch_encoder`):**
  Reads and writes the batch descriptor document. The decoder turns any
  malformed document into an empty batch plus a notification; the encoder
  skips entries whose input file is missing and only fails when the output
  stream cannot be written.

- **Editing (`batch_editor`):**
  Validates user edits (clip ranges, frame rates, collision types) before they
  reach the model.

- **Notification (`notification_service`):**
  The `Severity` levels and the notifiers that report recoverable problems on
  the console, in a text log file, or in memory.
"""
