"""Backend services."""

from services.payload import (
    PayloadError,
    first_present,
    normalise_input,
    read_payload,
    split_in_two,
)

__all__ = [
    "PayloadError",
    "first_present",
    "normalise_input",
    "read_payload",
    "split_in_two",
]
