"""Carbon footprint, sink, gap and offset accounting for operational sites."""

__version__ = "0.1.0"
