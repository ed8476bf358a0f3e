# Area: Server Tests
"""Tests for the GameLiftServer call surface."""

import json

import pytest
from pydantic import ValidationError

from conftest import ok_with, session_payload
from gamelift_server import (
    AgentTimeoutError,
    AttributeValue,
    DescribePlayerSessionsRequest,
    GameLiftServer,
    Player,
    PlayerSessionCreationPolicy,
    PlayerSessionStatus,
    PreconditionViolationError,
    ProcessParameters,
    ProcessState,
    ProtocolFailureError,
    StartMatchBackfillRequest,
    StopMatchBackfillRequest,
)


@pytest.fixture
def connected(server):
    assert server.init_sdk() is True
    return server


@pytest.fixture
def ready(connected):
    connected.process_ready(ProcessParameters(port=1337, log_paths_to_upload=["logs/a.log"]))
    return connected


@pytest.fixture
def bound(ready, fake_transport, wait_until):
    assert fake_transport.push("StartGameSession", session_payload("gs-1")) is True
    assert wait_until(lambda: ready.state == ProcessState.SESSION_BOUND)
    return ready


@pytest.fixture
def activated(bound):
    bound.activate_game_session()
    return bound


class TestInitSdk:
    """Tests for connecting."""

    def test_connects(self, server):
        assert server.state == ProcessState.DISCONNECTED
        assert server.init_sdk() is True
        assert server.state == ProcessState.CONNECTED

    def test_second_init_is_noop(self, connected):
        assert connected.init_sdk() is True
        assert connected.state == ProcessState.CONNECTED

    def test_unreachable_agent_returns_false(self, fake_transport):
        fake_transport.connect_result = False
        server = GameLiftServer(transport=fake_transport)
        assert server.init_sdk() is False
        assert server.state == ProcessState.DISCONNECTED
        server.destroy()

    def test_sdk_version(self, server):
        assert server.get_sdk_version() == "3.4.0"


class TestPreconditions:
    """Tests that calls in the wrong state never reach the agent."""

    @pytest.mark.parametrize("call", [
        lambda s: s.process_ready(ProcessParameters()),
        lambda s: s.process_ending(),
        lambda s: s.activate_game_session(),
        lambda s: s.terminate_game_session(),
        lambda s: s.describe_player_sessions(DescribePlayerSessionsRequest()),
        lambda s: s.get_instance_certificate(),
        lambda s: s.stop_match_backfill(StopMatchBackfillRequest(
            ticket_id="t", configuration_name="c", game_session_arn="a",
        )),
    ])
    def test_before_connect(self, server, fake_transport, call):
        with pytest.raises(PreconditionViolationError):
            call(server)
        assert fake_transport.frames == []

    @pytest.mark.parametrize("call", [
        lambda s: s.activate_game_session(),
        lambda s: s.terminate_game_session(),
        lambda s: s.update_player_session_creation_policy("DENY_ALL"),
        lambda s: s.accept_player_session("psess-1"),
        lambda s: s.remove_player_session("psess-1"),
    ])
    def test_session_calls_require_bound_session(self, ready, fake_transport, call):
        before = fake_transport.commands()
        with pytest.raises(PreconditionViolationError, match="SESSION_BOUND"):
            call(ready)
        assert fake_transport.commands() == before

    def test_accept_player_requires_activation(self, bound, fake_transport):
        with pytest.raises(PreconditionViolationError, match="not been activated"):
            bound.accept_player_session("psess-1")
        assert "AcceptPlayerSession" not in fake_transport.commands()

    def test_process_ready_requires_parameters(self, connected):
        with pytest.raises(ValueError):
            connected.process_ready(None)


class TestProcessReady:
    """Tests for readiness declaration."""

    def test_sends_port_and_log_paths(self, ready, fake_transport):
        assert fake_transport.last("ProcessReady") == {
            "port": 1337, "logPathsToUpload": ["logs/a.log"],
        }
        assert ready.state == ProcessState.READY

    def test_first_health_report_is_immediate(self, ready, fake_transport, wait_until):
        assert wait_until(lambda: fake_transport.count("ReportHealth") >= 1)
        assert fake_transport.last("ReportHealth") == {"healthStatus": True}

    def test_unhealthy_predicate_is_reported(self, connected, fake_transport, wait_until):
        connected.process_ready(ProcessParameters(on_health_check=lambda: False))
        assert wait_until(lambda: fake_transport.count("ReportHealth") >= 1)
        assert fake_transport.last("ReportHealth") == {"healthStatus": False}

    def test_rejected_declaration_raises(self, connected, fake_transport):
        fake_transport.respond("ProcessReady", {"status": "ERROR_400", "errorMessage": "port in use"})
        with pytest.raises(ProtocolFailureError, match="port in use"):
            connected.process_ready(ProcessParameters(port=1))
        assert connected.state == ProcessState.CONNECTED
        assert fake_transport.push("StartGameSession", session_payload("gs-1")) is False

    def test_rejected_redeclaration_keeps_previous(self, ready, fake_transport):
        fake_transport.respond("ProcessReady", {"status": "ERROR_400", "errorMessage": "port in use"})
        with pytest.raises(ProtocolFailureError):
            ready.process_ready(ProcessParameters(port=2))
        assert ready.state == ProcessState.READY
        assert ready._session.process_parameters.port == 1337

    def test_session_pushed_right_after_ack_is_bound(self, connected, fake_transport, wait_until):
        started, push_acks = [], []
        fake_transport.after_ack("ProcessReady", lambda: push_acks.append(
            fake_transport.push("StartGameSession", session_payload("gs-1"))
        ))

        connected.process_ready(ProcessParameters(port=1337, on_start_game_session=started.append))

        assert push_acks == [True]
        assert wait_until(lambda: len(started) == 1)
        assert started[0].game_session_id == "gs-1"
        assert connected.get_game_session_id() == "gs-1"
        assert connected.state == ProcessState.SESSION_BOUND

    def test_timeout_raises(self, connected, fake_transport):
        fake_transport.hold("ProcessReady")
        with pytest.raises(AgentTimeoutError):
            connected.process_ready(ProcessParameters())
        assert connected.state == ProcessState.CONNECTED


class TestGameSessionCalls:
    """Tests for activate/terminate and player policy."""

    def test_session_without_id_is_refused(self, ready, fake_transport):
        payload = json.dumps({"gameSession": {"fleetId": "fleet-1"}})
        assert fake_transport.push("StartGameSession", payload) is False
        assert ready.state == ProcessState.READY
        assert ready.get_game_session_id() is None

    def test_bound_session_descriptor(self, bound):
        game_session = bound.get_game_session()
        assert game_session.game_session_id == "gs-1"
        assert game_session.ip_address == "10.0.0.5"
        assert bound.state == ProcessState.SESSION_BOUND

    def test_activate_sends_bound_id(self, activated, fake_transport):
        assert fake_transport.last("GameSessionActivate") == {"gameSessionId": "gs-1"}

    def test_terminate_clears_bound_id(self, activated, fake_transport):
        activated.terminate_game_session()
        assert fake_transport.last("GameSessionTerminate") == {"gameSessionId": "gs-1"}
        assert activated.get_game_session_id() is None
        assert activated.state == ProcessState.READY

    def test_failed_terminate_keeps_session(self, bound, fake_transport):
        fake_transport.respond("GameSessionTerminate", {"status": "ERROR_500"})
        with pytest.raises(ProtocolFailureError):
            bound.terminate_game_session()
        assert bound.get_game_session_id() == "gs-1"

    def test_update_policy(self, bound, fake_transport):
        bound.update_player_session_creation_policy(PlayerSessionCreationPolicy.DENY_ALL)
        assert fake_transport.last("UpdatePlayerSessionCreationPolicy") == {
            "gameSessionId": "gs-1", "newPlayerSessionCreationPolicy": "DENY_ALL",
        }

    def test_invalid_policy_raises(self, bound):
        with pytest.raises(ValueError):
            bound.update_player_session_creation_policy("SOMETIMES")


class TestPlayerSessions:
    """Tests for player session calls."""

    def test_accept_and_remove(self, activated, fake_transport):
        activated.accept_player_session("psess-1")
        activated.remove_player_session("psess-1")
        expected = {"gameSessionId": "gs-1", "playerSessionId": "psess-1"}
        assert fake_transport.last("AcceptPlayerSession") == expected
        assert fake_transport.last("RemovePlayerSession") == expected

    def test_empty_player_session_id_raises(self, activated):
        with pytest.raises(ValueError):
            activated.accept_player_session("")

    def test_agent_rejection_surfaces_message(self, activated, fake_transport):
        fake_transport.respond("AcceptPlayerSession", False, "player session expired")
        with pytest.raises(ProtocolFailureError) as exc_info:
            activated.accept_player_session("psess-1")
        assert exc_info.value.agent_message == "player session expired"

    def test_describe_maps_response(self, connected, fake_transport):
        fake_transport.respond("DescribePlayerSessionsRequest", *ok_with({
            "nextToken": "next",
            "playerSessions": [{
                "playerSessionId": "psess-1",
                "playerId": "player-1",
                "gameSessionId": "gs-1",
                "ipAddress": "127.0.0.1",
                "port": 7777,
                "status": "RESERVED",
                "creationTime": "1700000000000",
            }],
        }))
        result = connected.describe_player_sessions(DescribePlayerSessionsRequest(
            player_id="player-1", player_session_status_filter=PlayerSessionStatus.RESERVED,
        ))
        assert result.next_token == "next"
        player_session = result.player_sessions[0]
        assert player_session.player_session_id == "psess-1"
        assert player_session.dns_name == "localhost"
        assert player_session.creation_time.year == 2023
        assert fake_transport.last("DescribePlayerSessionsRequest") == {
            "playerId": "player-1", "playerSessionStatusFilter": "RESERVED",
        }

    def test_describe_limit_is_capped(self, connected, fake_transport):
        connected.describe_player_sessions(DescribePlayerSessionsRequest(limit=5000))
        assert fake_transport.last("DescribePlayerSessionsRequest")["limit"] == 1024

    def test_describe_small_limit_is_kept(self, connected, fake_transport):
        connected.describe_player_sessions(DescribePlayerSessionsRequest(limit=5))
        assert fake_transport.last("DescribePlayerSessionsRequest")["limit"] == 5

    def test_describe_rejects_non_positive_limit(self):
        with pytest.raises(ValidationError):
            DescribePlayerSessionsRequest(limit=0)


class TestMatchBackfill:
    """Tests for matchmaking backfill."""

    def test_start_returns_ticket(self, connected, fake_transport):
        fake_transport.respond("BackfillMatchmakingRequest", *ok_with({"ticketId": "ticket-7"}))
        result = connected.start_match_backfill(StartMatchBackfillRequest(
            configuration_name="arn:config",
            game_session_arn="arn:gs-1",
            players=[Player(
                player_id="player-1",
                team="red",
                player_attributes={"skill": AttributeValue(n=23.0)},
                latency_in_ms={"us-west-2": 30},
            )],
        ))
        assert result.ticket_id == "ticket-7"
        sent = fake_transport.last("BackfillMatchmakingRequest")
        assert sent["matchmakingConfigurationArn"] == "arn:config"
        assert sent["gameSessionArn"] == "arn:gs-1"
        assert sent["players"][0]["playerAttributes"]["skill"] == {"type": 2, "N": 23.0}
        assert sent["players"][0]["latencyInMs"] == {"us-west-2": 30}

    def test_start_keeps_caller_ticket_when_agent_omits_it(self, connected):
        result = connected.start_match_backfill(StartMatchBackfillRequest(
            configuration_name="arn:config", game_session_arn="arn:gs-1", ticket_id="mine",
        ))
        assert result.ticket_id == "mine"

    def test_configuration_name_is_required(self):
        with pytest.raises(ValidationError):
            StartMatchBackfillRequest(game_session_arn="arn:gs-1")

    def test_stop(self, connected, fake_transport):
        connected.stop_match_backfill(StopMatchBackfillRequest(
            ticket_id="ticket-7", configuration_name="arn:config", game_session_arn="arn:gs-1",
        ))
        assert fake_transport.last("StopMatchmakingRequest") == {
            "ticketId": "ticket-7",
            "gameSessionArn": "arn:gs-1",
            "matchmakingConfigurationArn": "arn:config",
        }


class TestInstanceCertificate:
    """Tests for get_instance_certificate."""

    def test_maps_paths(self, connected, fake_transport):
        fake_transport.respond("GetInstanceCertificate", *ok_with({
            "certificatePath": "/certs/cert.pem",
            "certificateChainPath": "/certs/chain.pem",
            "privateKeyPath": "/certs/key.pem",
            "hostName": "instance-1.example.com",
        }))
        result = connected.get_instance_certificate()
        assert result.certificate_path == "/certs/cert.pem"
        assert result.private_key_path == "/certs/key.pem"
        assert result.host_name == "instance-1.example.com"
