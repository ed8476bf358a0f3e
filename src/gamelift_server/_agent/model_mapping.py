# Area: Agent
"""
gamelift_server._agent.model_mapping — Wire dicts <-> public models
===================================================================

Translates the camelCase dicts produced by the codec into the public
pydantic models, and request models into command fields.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..models import (
    AttributeValue,
    DescribePlayerSessionsRequest,
    GameProperty,
    GameSession,
    Player,
    PlayerSession,
)

# Hostname reported for sessions on a local agent without a DNS name
LOCALHOST_IP = "127.0.0.1"
LOCALHOST_NAME = "localhost"

# Wire discriminator of AttributeValue
ATTR_NONE = 0
ATTR_STRING = 1
ATTR_DOUBLE = 2
ATTR_STRING_LIST = 3
ATTR_STRING_DOUBLE_MAP = 4


# ══════════════════════════════════════════════════════════════
# INBOUND
# ══════════════════════════════════════════════════════════════

def to_game_session(fields: Dict[str, Any]) -> GameSession:
    """Build a GameSession from a decoded wire GameSession dict."""
    return GameSession(
        game_session_id=fields.get("gameSessionId"),
        fleet_id=fields.get("fleetId"),
        name=fields.get("name"),
        maximum_player_session_count=int(fields.get("maxPlayers", 0)),
        ip_address=fields.get("ipAddress"),
        port=int(fields.get("port", 0)),
        dns_name=fields.get("dnsName"),
        game_session_data=fields.get("gameSessionData"),
        matchmaker_data=fields.get("matchmakerData"),
        game_properties=[
            GameProperty(key=p.get("key", ""), value=p.get("value", ""))
            for p in fields.get("gameProperties", [])
        ],
    )


def _millis_to_datetime(value: Any) -> Optional[datetime]:
    if value in (None, "", "0", 0):
        return None
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


def to_player_session(fields: Dict[str, Any]) -> PlayerSession:
    """Build a PlayerSession; a local agent's sessions get dns 'localhost'."""
    ip_address = fields.get("ipAddress")
    dns_name = fields.get("dnsName")
    if dns_name is None and ip_address == LOCALHOST_IP:
        dns_name = LOCALHOST_NAME

    return PlayerSession(
        player_session_id=fields.get("playerSessionId"),
        player_id=fields.get("playerId"),
        game_session_id=fields.get("gameSessionId"),
        fleet_id=fields.get("fleetId"),
        ip_address=ip_address,
        dns_name=dns_name,
        port=int(fields.get("port", 0)),
        status=fields.get("status"),
        player_data=fields.get("playerData"),
        creation_time=_millis_to_datetime(fields.get("creationTime")),
        termination_time=_millis_to_datetime(fields.get("terminationTime")),
    )


# ══════════════════════════════════════════════════════════════
# OUTBOUND
# ══════════════════════════════════════════════════════════════

def describe_request_fields(request: DescribePlayerSessionsRequest, max_limit: int) -> Dict[str, Any]:
    """Command fields for DescribePlayerSessionsRequest; limit capped at max_limit."""
    status = request.player_session_status_filter
    return {
        "gameSessionId": request.game_session_id,
        "playerId": request.player_id,
        "playerSessionId": request.player_session_id,
        "playerSessionStatusFilter": status.value if status is not None else None,
        "nextToken": request.next_token,
        "limit": min(request.limit, max_limit) if request.limit is not None else None,
    }


def _attribute_fields(value: AttributeValue) -> Dict[str, Any]:
    if value.s is not None:
        return {"type": ATTR_STRING, "S": value.s}
    if value.n is not None:
        return {"type": ATTR_DOUBLE, "N": value.n}
    if value.sl is not None:
        return {"type": ATTR_STRING_LIST, "SL": list(value.sl)}
    if value.sdm is not None:
        return {"type": ATTR_STRING_DOUBLE_MAP, "SDM": dict(value.sdm)}
    return {"type": ATTR_NONE}


def player_fields(player: Player) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "playerId": player.player_id,
        "playerAttributes": {
            name: _attribute_fields(value)
            for name, value in player.player_attributes.items()
        },
        "latencyInMs": dict(player.latency_in_ms),
    }
    if player.team is not None:
        fields["team"] = player.team
    return fields


def players_fields(players: List[Player]) -> List[Dict[str, Any]]:
    return [player_fields(p) for p in players]
