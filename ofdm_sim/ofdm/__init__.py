"""Frame builder: pilots, data slots and cyclic prefix."""

from .frame import (
    DATA,
    NULL,
    PILOT,
    add_cyclic_prefix,
    data_indices,
    extract_data,
    extract_pilots,
    insert_pilots,
    num_data_subcarriers,
    pilot_indices,
    remove_cyclic_prefix,
    subcarrier_map,
)

__all__ = [
    "PILOT",
    "DATA",
    "NULL",
    "pilot_indices",
    "data_indices",
    "num_data_subcarriers",
    "insert_pilots",
    "extract_pilots",
    "extract_data",
    "subcarrier_map",
    "add_cyclic_prefix",
    "remove_cyclic_prefix",
]
