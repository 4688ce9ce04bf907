import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from cardano_healthcheck.apps.chains.slots import TimeSettings

GENESIS_TIME = datetime(2017, 9, 23, 21, 44, 51, tzinfo=timezone.utc)


@pytest.fixture
def time_settings():
    # 100 one-second slots per epoch keeps the arithmetic readable
    return TimeSettings(
        genesis_time=GENESIS_TIME,
        slots_per_epoch=100,
        slot_duration=timedelta(seconds=1),
    )


@pytest.fixture
def shelley_genesis():
    return {
        "systemStart": "2017-09-23T21:44:51Z",
        "epochLength": 432000,
        "slotLength": 1,
        "networkMagic": 764824073,
    }


@pytest.fixture
def byron_genesis():
    return {
        "startTime": 1506203091,
        "protocolConsts": {"k": 2160, "protocolMagic": 764824073},
        "blockVersionData": {"slotDuration": "20000"},
    }


@dataclass
class NodeFiles:
    config_file: Path
    genesis_file: Path


@pytest.fixture
def node_files(tmp_path, shelley_genesis):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"hasPrometheus": ["127.0.0.1", 12798], "Protocol": "Cardano"}))

    genesis_file = tmp_path / "shelley-genesis.json"
    genesis_file.write_text(json.dumps(shelley_genesis))

    return NodeFiles(config_file=config_file, genesis_file=genesis_file)
