# Area: Agent
"""
Agent channel - everything that touches the wire.

This package handles:
- The Socket.IO connection to the local agent
- Protobuf encoding of commands and decoding of pushes
- Correlating each command with its acknowledgement
"""

from .transport import AgentTransport
from .correlator import AgentResponse, Correlator, ResponseStatus, decode_ack

__all__ = [
    "AgentTransport",
    "AgentResponse",
    "Correlator",
    "ResponseStatus",
    "decode_ack",
]
