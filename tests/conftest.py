"""Shared pytest fixtures for the construct tests."""

import aws_cdk as cdk
import pytest

from cdk_constructs.environment import ApplicationEnvironment
from cdk_constructs.parameter_store.store import InMemoryParameterStore
from tests.parameters import network_parameters


@pytest.fixture
def stack() -> cdk.Stack:
    """An environment-agnostic stack in a fresh app."""
    return cdk.Stack(cdk.App(), "TestStack")


@pytest.fixture
def application_environment() -> ApplicationEnvironment:
    return ApplicationEnvironment("myapp", "prod")


@pytest.fixture
def network_store() -> InMemoryParameterStore:
    """A store that already holds the parameters of a Network in "prod"."""
    return InMemoryParameterStore(network_parameters("prod"))
