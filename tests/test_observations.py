import json
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from openbadger.observations import (
    SCHEMA_VERSION,
    Addresses,
    BatchRequest,
    BatchResponse,
    Emitter,
    Evidence,
    Identifiers,
    Observation,
    Target,
    ValidationError,
)

OBSERVED_AT = datetime(2026, 4, 4, 12, 0, 0, tzinfo=timezone.utc)


def _base(**overrides):
    values = dict(
        schema_version=SCHEMA_VERSION,
        observation_id="obs-1",
        type="icmp.alive",
        scope="sighting",
        site_id="site-1",
        emitter=Emitter(kind="collector"),
        observed_at=OBSERVED_AT,
        facts={},
        evidence=Evidence(),
    )
    values.update(overrides)
    return Observation(**values)


def test_valid_observation():
    observation = _base(
        facts={"rtt_ms": 1.2},
        evidence=Evidence(confidence=0.9, source_protocol="icmp"),
    )
    observation.validate()
    assert observation.to_dict()["facts"] == {"rtt_ms": 1.2}


@pytest.mark.parametrize(
    "overrides, want",
    [
        ({"schema_version": ""}, "observation schema_version is invalid"),
        ({"observation_id": ""}, "observation observation_id is required"),
        ({"type": ""}, "observation type is required"),
        ({"scope": "invalid"}, "observation scope is invalid"),
        ({"site_id": ""}, "observation site_id is required"),
        ({"emitter": None}, "observation emitter is required"),
        ({"observed_at": None}, "observation observed_at is required"),
        ({"facts": None}, "observation facts is required"),
        ({"evidence": None}, "observation evidence is required"),
    ],
)
def test_observation_validate_errors(overrides, want):
    with pytest.raises(ValidationError) as info:
        _base(**overrides).validate()
    assert str(info.value) == want


def test_scope_is_case_insensitive():
    for scope in (" Asset ", "RELATIONSHIP", "sighting"):
        observation = _base(scope=scope)
        observation.validate()
        assert observation.scope == scope


def test_batch_request_validate_empty():
    with pytest.raises(ValidationError) as info:
        BatchRequest().validate()
    assert str(info.value) == "observations are required"


def test_batch_request_validate_reports_index():
    batch = BatchRequest(observations=[_base(), _base(type="")])
    with pytest.raises(ValidationError) as info:
        batch.validate()
    assert str(info.value) == "observations[1]: observation type is required"


def test_observation_to_dict_omits_empty_optional_fields():
    data = _base().to_dict()
    assert data["observed_at"] == "2026-04-04T12:00:00Z"
    assert data["emitter"] == {"kind": "collector"}
    assert data["evidence"] == {}
    for key in ("job_id", "target", "identifiers", "addresses", "relations", "raw"):
        assert key not in data


def test_observation_round_trip_through_json():
    observation = _base(
        job_id="job-1",
        target=Target(input="10.0.0.1", ip="10.0.0.1", protocol="icmp", port=7),
        identifiers=Identifiers(hostnames=["host-a"], mac_addresses=["02:00:00:00:00:01"]),
        addresses=Addresses(ip_addresses=["10.0.0.1"], vlan_ids=[10], interface_index=3),
        facts={"rtt_ms": 1.2},
        relations=[{"type": "connected"}],
        evidence=Evidence(
            confidence=0.9,
            source_protocol="icmp",
            first_seen=OBSERVED_AT,
            last_seen=OBSERVED_AT.replace(microsecond=250000),
            packet_count=4,
        ),
        raw={"ttl": 64},
    )
    text = json.dumps(observation.to_dict())
    restored = Observation.from_dict(json.loads(text))
    assert restored == observation


def test_observation_from_dict_zero_time_is_missing():
    data = _base().to_dict()
    data["observed_at"] = "0001-01-01T00:00:00Z"
    restored = Observation.from_dict(data)
    assert restored.observed_at is None
    with pytest.raises(ValidationError, match="observed_at is required"):
        restored.validate()


def test_observation_from_dict_parses_offsets():
    data = _base().to_dict()
    data["observed_at"] = "2026-04-04T14:00:00.5+02:00"
    restored = Observation.from_dict(data)
    assert restored.observed_at == replace(_base(), observed_at=OBSERVED_AT.replace(microsecond=500000)).observed_at


def test_observation_from_dict_rejects_bad_time():
    data = _base().to_dict()
    data["observed_at"] = "yesterday"
    with pytest.raises(ValueError, match="invalid timestamp"):
        Observation.from_dict(data)


def test_batch_round_trip():
    batch = BatchRequest(observations=[_base(), _base(observation_id="obs-2")])
    assert BatchRequest.from_dict(batch.to_dict()) == batch
    assert [item["observation_id"] for item in batch.to_dict()["observations"]] == ["obs-1", "obs-2"]


def test_batch_response_round_trip():
    response = BatchResponse(accepted=2)
    assert response.to_dict() == {"accepted": 2}
    assert BatchResponse.from_dict({"accepted": 2}) == response
    assert BatchResponse.from_dict({}).accepted == 0