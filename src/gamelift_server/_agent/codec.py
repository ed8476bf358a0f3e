# Area: Agent
"""
gamelift_server._agent.codec — Agent wire codec
================================================

The agent speaks protobuf (proto2, package
``com.amazon.whitewater.auxproxy.pbuffer``). Outbound commands are
emitted as binary messages under their fully qualified message name;
pushes and response data arrive as protobuf JSON.

Message classes are built at import time from the ``MESSAGES`` table
below through ``descriptor_pb2`` so no generated ``_pb2`` module is
needed. The table follows the agent schema field for field.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

from google.protobuf import descriptor_pb2, descriptor_pool, json_format, message_factory
from google.protobuf.message import DecodeError

from ..errors import DecodeFailureError


PACKAGE = "com.amazon.whitewater.auxproxy.pbuffer"

_FDP = descriptor_pb2.FieldDescriptorProto

_SCALARS = {
    "string": _FDP.TYPE_STRING,
    "bool": _FDP.TYPE_BOOL,
    "int32": _FDP.TYPE_INT32,
    "int64": _FDP.TYPE_INT64,
    "double": _FDP.TYPE_DOUBLE,
}

# {enum_name: [(value_name, number), ...]}
ENUMS: Dict[str, List[Tuple[str, int]]] = {
    "GameLiftResponseStatus": [
        ("OK", 0),
        ("ERROR_400", 1),
        ("ERROR_500", 2),
        ("UNRECOGNIZED", -1),
    ],
}

# {message_name: [(field_name, number, type, label), ...]}
# type is a scalar name, another message/enum name, or "map<key,value>".
MESSAGES: Dict[str, List[Tuple[str, int, str, str]]] = {
    # ── Status ──
    "GameLiftResponse": [
        ("status", 1, "GameLiftResponseStatus", "optional"),
        ("responseData", 2, "string", "optional"),
        ("errorMessage", 3, "string", "optional"),
    ],
    # ── Models ──
    "GameProperty": [
        ("key", 1, "string", "optional"),
        ("value", 2, "string", "optional"),
    ],
    "GameSession": [
        ("gameSessionId", 1, "string", "optional"),
        ("fleetId", 2, "string", "optional"),
        ("name", 3, "string", "optional"),
        ("maxPlayers", 4, "int32", "optional"),
        ("joinable", 5, "bool", "optional"),
        ("gameProperties", 6, "GameProperty", "repeated"),
        ("port", 7, "int32", "optional"),
        ("ipAddress", 8, "string", "optional"),
        ("gameSessionData", 9, "string", "optional"),
        ("matchmakerData", 10, "string", "optional"),
        ("dnsName", 11, "string", "optional"),
    ],
    "AttributeValue": [
        ("type", 1, "int32", "optional"),
        ("S", 2, "string", "optional"),
        ("N", 3, "double", "optional"),
        ("SL", 4, "string", "repeated"),
        ("SDM", 5, "map<string,double>", "repeated"),
    ],
    "Player": [
        ("playerId", 1, "string", "optional"),
        ("playerAttributes", 2, "map<string,AttributeValue>", "repeated"),
        ("team", 3, "string", "optional"),
        ("latencyInMs", 4, "map<string,int32>", "repeated"),
    ],
    "PlayerSession": [
        ("playerSessionId", 1, "string", "optional"),
        ("playerId", 2, "string", "optional"),
        ("gameSessionId", 3, "string", "optional"),
        ("fleetId", 4, "string", "optional"),
        ("ipAddress", 5, "string", "optional"),
        ("status", 6, "string", "optional"),
        ("creationTime", 7, "int64", "optional"),
        ("terminationTime", 8, "int64", "optional"),
        ("port", 9, "int32", "optional"),
        ("playerData", 10, "string", "optional"),
        ("dnsName", 11, "string", "optional"),
    ],
    # ── Pushes ──
    "UpdateGameSession": [
        ("gameSession", 1, "GameSession", "optional"),
        ("updateReason", 2, "string", "optional"),
        ("backfillTicketId", 3, "string", "optional"),
    ],
    "TerminateProcess": [
        ("terminationTime", 1, "int64", "optional"),
    ],
    "ActivateGameSession": [
        ("gameSession", 1, "GameSession", "optional"),
    ],
    # ── Requests ──
    "ProcessReady": [
        ("logPathsToUpload", 1, "string", "repeated"),
        ("port", 2, "int32", "optional"),
    ],
    "ProcessEnding": [],
    "ReportHealth": [
        ("healthStatus", 1, "bool", "required"),
    ],
    "GameSessionActivate": [
        ("gameSessionId", 1, "string", "optional"),
        ("maxPlayers", 2, "int32", "optional"),
    ],
    "GameSessionTerminate": [
        ("gameSessionId", 1, "string", "optional"),
    ],
    "UpdatePlayerSessionCreationPolicy": [
        ("gameSessionId", 1, "string", "optional"),
        ("newPlayerSessionCreationPolicy", 2, "string", "optional"),
    ],
    "AcceptPlayerSession": [
        ("gameSessionId", 1, "string", "optional"),
        ("playerSessionId", 2, "string", "optional"),
    ],
    "RemovePlayerSession": [
        ("gameSessionId", 1, "string", "optional"),
        ("playerSessionId", 2, "string", "optional"),
    ],
    "DescribePlayerSessionsRequest": [
        ("gameSessionId", 1, "string", "optional"),
        ("playerId", 2, "string", "optional"),
        ("playerSessionId", 3, "string", "optional"),
        ("playerSessionStatusFilter", 4, "string", "optional"),
        ("nextToken", 5, "string", "optional"),
        ("limit", 6, "int32", "optional"),
    ],
    "BackfillMatchmakingRequest": [
        ("ticketId", 1, "string", "optional"),
        ("gameSessionArn", 2, "string", "optional"),
        ("matchmakingConfigurationArn", 3, "string", "optional"),
        ("players", 4, "Player", "repeated"),
    ],
    "StopMatchmakingRequest": [
        ("ticketId", 1, "string", "optional"),
        ("gameSessionArn", 2, "string", "optional"),
        ("matchmakingConfigurationArn", 3, "string", "optional"),
    ],
    "GetInstanceCertificate": [],
    # ── Responses ──
    "BackfillMatchmakingResponse": [
        ("ticketId", 1, "string", "optional"),
    ],
    "DescribePlayerSessionsResponse": [
        ("nextToken", 1, "string", "optional"),
        ("playerSessions", 2, "PlayerSession", "repeated"),
    ],
    "GetInstanceCertificateResponse": [
        ("certificatePath", 1, "string", "optional"),
        ("certificateChainPath", 2, "string", "optional"),
        ("privateKeyPath", 3, "string", "optional"),
        ("hostName", 4, "string", "optional"),
    ],
}

_LABELS = {
    "optional": _FDP.LABEL_OPTIONAL,
    "required": _FDP.LABEL_REQUIRED,
    "repeated": _FDP.LABEL_REPEATED,
}


def full_name(message_name: str) -> str:
    """Fully qualified name; also the event name a command is emitted under."""
    return f"{PACKAGE}.{message_name}"


def _set_type(field: descriptor_pb2.FieldDescriptorProto, type_name: str) -> None:
    if type_name in _SCALARS:
        field.type = _SCALARS[type_name]
    elif type_name in ENUMS:
        field.type = _FDP.TYPE_ENUM
        field.type_name = f".{full_name(type_name)}"
    else:
        field.type = _FDP.TYPE_MESSAGE
        field.type_name = f".{full_name(type_name)}"


def _add_map_entry(
    message: descriptor_pb2.DescriptorProto,
    field: descriptor_pb2.FieldDescriptorProto,
    field_name: str,
    map_type: str,
) -> None:
    key_type, value_type = map_type[len("map<"):-1].split(",")
    entry_name = field_name[0].upper() + field_name[1:] + "Entry"

    entry = message.nested_type.add(name=entry_name)
    entry.options.map_entry = True
    for name, number, type_name in (("key", 1, key_type), ("value", 2, value_type)):
        entry_field = entry.field.add(name=name, number=number, label=_FDP.LABEL_OPTIONAL)
        _set_type(entry_field, type_name.strip())

    field.type = _FDP.TYPE_MESSAGE
    field.type_name = f".{full_name(message.name)}.{entry_name}"


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="gamelift_server/sdk.proto",
        package=PACKAGE,
        syntax="proto2",
    )
    for enum_name, values in ENUMS.items():
        enum = file_proto.enum_type.add(name=enum_name)
        for value_name, number in values:
            enum.value.add(name=value_name, number=number)

    for message_name, fields in MESSAGES.items():
        message = file_proto.message_type.add(name=message_name)
        for field_name, number, type_name, label in fields:
            field = message.field.add(
                name=field_name,
                number=number,
                label=_LABELS[label],
                json_name=field_name,
            )
            if type_name.startswith("map<"):
                _add_map_entry(message, field, field_name, type_name)
            else:
                _set_type(field, type_name)
    return file_proto


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file().SerializeToString())

_CLASSES: Dict[str, type] = {
    name: message_factory.GetMessageClass(_POOL.FindMessageTypeByName(full_name(name)))
    for name in MESSAGES
}


def message_class(message_name: str) -> type:
    """Return the protobuf class for a schema message name."""
    try:
        return _CLASSES[message_name]
    except KeyError:
        raise KeyError(f"Unknown agent message: {message_name}") from None


def encode(message_name: str, fields: Dict[str, Any]) -> bytes:
    """
    Serialize a command to protobuf bytes.

    Args:
        message_name: Schema message name, e.g. "ProcessReady"
        fields: Field values keyed by wire (camelCase) name; None values are skipped

    Returns:
        The binary frame payload
    """
    message = message_class(message_name)()
    json_format.ParseDict(
        {k: v for k, v in fields.items() if v is not None},
        message,
    )
    return message.SerializeToString()


def decode(message_name: str, raw: Any) -> Dict[str, Any]:
    """
    Decode a payload received from the agent into a plain dict.

    Accepts protobuf JSON text, an already-parsed dict, or protobuf bytes.
    Keys keep their wire (camelCase) names; absent fields are omitted.

    Raises:
        DecodeFailureError: If the payload does not match the message
    """
    message = message_class(message_name)()
    try:
        if isinstance(raw, (bytes, bytearray)):
            message.ParseFromString(bytes(raw))
        elif isinstance(raw, dict):
            json_format.ParseDict(raw, message, ignore_unknown_fields=True)
        elif isinstance(raw, str):
            json_format.Parse(raw or "{}", message, ignore_unknown_fields=True)
        else:
            raise DecodeFailureError(message_name, raw, f"unsupported payload type {type(raw).__name__}")
    except (json_format.ParseError, DecodeError, json.JSONDecodeError, TypeError, ValueError) as e:
        raise DecodeFailureError(message_name, raw, str(e)) from e
    return json_format.MessageToDict(message, preserving_proto_field_name=True)
