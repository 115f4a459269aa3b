"""AMQP 0-9-1 wire-format building blocks: fields, frames, addresses and metadata."""

__version__ = "4.1.4"