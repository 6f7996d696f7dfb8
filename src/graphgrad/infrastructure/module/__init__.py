"""
Module persistence helpers.
"""

from ._serialization_weights import (
    load_state_dict,
    payload_to_states,
    save_state_dict,
    states_to_payload,
)

__all__ = [
    save_state_dict.__name__,
    load_state_dict.__name__,
    states_to_payload.__name__,
    payload_to_states.__name__,
]
