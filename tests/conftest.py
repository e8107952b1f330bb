import logging
from pathlib import Path

import pytest

from tests.utils import FakeCluster

SMCP_MANIFEST = str(
    Path(__file__).parent.parent.joinpath("deploy", "resources", "servicemesh", "smcp.yaml")
)


@pytest.fixture
def cluster(monkeypatch):
    from meshboard.resources import utils

    cluster = FakeCluster()
    monkeypatch.setattr(utils, "core_v1_api", cluster.core_v1_api)
    monkeypatch.setattr(utils, "custom_api", cluster.custom_api)
    return cluster


@pytest.fixture
def logger():
    return logging.getLogger("meshboard.tests")


@pytest.fixture
def smcp_manifest(monkeypatch):
    from meshboard.configuration import configuration

    monkeypatch.setattr(configuration, "SMCP_MANIFEST", SMCP_MANIFEST)
    return SMCP_MANIFEST
