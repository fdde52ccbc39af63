from .base import Transport
from .http import HttpTransport, encode_mutation, parse_mutation_response

__all__ = [
    "Transport",
    "HttpTransport",
    "encode_mutation",
    "parse_mutation_response",
]
