from unittest.mock import MagicMock

import pytest
from aws_cdk.assertions import Template
from botocore.exceptions import ClientError
from hypothesis import given
from hypothesis import strategies as st

from cdk_constructs.config.config import ABSENT_MARKER
from cdk_constructs.exceptions import NotFoundError, ValidationError
from cdk_constructs.parameter_store.naming import key_name
from cdk_constructs.parameter_store.store import (
    CloudFormationParameterStore,
    InMemoryParameterStore,
    SsmParameterStore,
)
from tests.parameters import split_key_name

environment_names = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789-"), min_size=1, max_size=20
)
components = st.from_regex(r"[A-Za-z0-9_.]{1,20}", fullmatch=True)


def client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetParameter")


# =============================================================================
# Key names
# =============================================================================


class TestKeyName:
    def test_key_name(self) -> None:
        assert key_name("prod", "Network", "vpcId") == "prod-Network-vpcId"

    def test_environment_may_contain_dashes(self) -> None:
        assert key_name("prod-myapp", "Database", "secretArn") == "prod-myapp-Database-secretArn"

    @pytest.mark.parametrize(
        "environment_name, producing_kind, field_name",
        [
            ("", "Network", "vpcId"),
            (None, "Network", "vpcId"),
            ("prod", "", "vpcId"),
            ("prod", "Network", ""),
            ("prod", "My-Network", "vpcId"),
            ("prod", "Network", "vpc-id"),
        ],
    )
    def test_invalid_components(self, environment_name, producing_kind, field_name) -> None:
        with pytest.raises(ValidationError):
            key_name(environment_name, producing_kind, field_name)

    @given(environment_names, components, components)
    def test_split_returns_components(self, environment_name, producing_kind, field_name) -> None:
        key = key_name(environment_name, producing_kind, field_name)
        assert split_key_name(key) == (environment_name, producing_kind, field_name)

    @given(
        st.tuples(environment_names, components, components),
        st.tuples(environment_names, components, components),
    )
    def test_distinct_components_never_collide(self, first, second) -> None:
        """Invariant: two different triples never map to the same key."""
        if first != second:
            assert key_name(*first) != key_name(*second)


# =============================================================================
# In-memory store
# =============================================================================


class TestInMemoryParameterStore:
    def test_get_returns_written_value(self, stack) -> None:
        store = InMemoryParameterStore()
        store.put(stack, "prod-Network-vpcId", "vpc-1")
        assert store.get(stack, "prod-Network-vpcId") == "vpc-1"
        assert "prod-Network-vpcId" in store

    def test_put_overwrites(self, stack) -> None:
        store = InMemoryParameterStore()
        store.put(stack, "prod-Network-vpcId", "vpc-1")
        store.put(stack, "prod-Network-vpcId", "vpc-2")
        assert store.get(stack, "prod-Network-vpcId") == "vpc-2"

    def test_missing_key_raises_not_found(self, stack) -> None:
        store = InMemoryParameterStore()
        with pytest.raises(NotFoundError) as error:
            store.get(stack, "prod-Network-vpcId")
        assert error.value.key == "prod-Network-vpcId"
        assert "prod-Network-vpcId" in str(error.value)

    def test_not_found_is_a_key_error(self, stack) -> None:
        with pytest.raises(KeyError):
            InMemoryParameterStore().get(stack, "prod-Network-vpcId")

    def test_environments_are_isolated(self, stack) -> None:
        store = InMemoryParameterStore()
        store.put(stack, key_name("staging", "Network", "vpcId"), "vpc-staging")

        assert store.get(stack, key_name("staging", "Network", "vpcId")) == "vpc-staging"
        with pytest.raises(NotFoundError):
            store.get(stack, key_name("prod", "Network", "vpcId"))

    @pytest.mark.parametrize("value", ["", None, 42])
    def test_put_rejects_invalid_values(self, stack, value) -> None:
        with pytest.raises(ValidationError):
            InMemoryParameterStore().put(stack, "prod-Network-vpcId", value)

    def test_put_rejects_absent_marker(self, stack) -> None:
        with pytest.raises(ValidationError):
            InMemoryParameterStore().put(stack, "prod-Network-vpcId", ABSENT_MARKER)

    def test_optional_value(self, stack) -> None:
        store = InMemoryParameterStore()
        store.put_optional(stack, "prod-Network-httpsListenerArn", "arn:listener")
        assert store.get_optional(stack, "prod-Network-httpsListenerArn") == "arn:listener"

    def test_absent_optional_value(self, stack) -> None:
        store = InMemoryParameterStore()
        store.put_optional(stack, "prod-Network-httpsListenerArn", None)

        assert store.get_optional(stack, "prod-Network-httpsListenerArn") is None
        assert store.as_dict() == {"prod-Network-httpsListenerArn": ABSENT_MARKER}

    def test_optional_value_never_written_raises_not_found(self, stack) -> None:
        with pytest.raises(NotFoundError):
            InMemoryParameterStore().get_optional(stack, "prod-Network-httpsListenerArn")

    def test_list(self, stack) -> None:
        store = InMemoryParameterStore()
        store.put_list(stack, "prod-Network-publicSubnetId", ["subnet-1", "subnet-2"])

        assert store.as_dict() == {
            "prod-Network-publicSubnetIdOne": "subnet-1",
            "prod-Network-publicSubnetIdTwo": "subnet-2",
        }
        assert store.get_list(stack, "prod-Network-publicSubnetId", 2) == ["subnet-1", "subnet-2"]

    def test_list_too_long(self, stack) -> None:
        with pytest.raises(ValidationError):
            InMemoryParameterStore().put_list(stack, "prod-Network-publicSubnetId", ["s"] * 7)

    def test_short_list_raises_not_found(self, stack) -> None:
        store = InMemoryParameterStore()
        store.put_list(stack, "prod-Network-publicSubnetId", ["subnet-1"])
        with pytest.raises(NotFoundError):
            store.get_list(stack, "prod-Network-publicSubnetId", 2)


# =============================================================================
# SSM store
# =============================================================================


class TestSsmParameterStore:
    def test_put(self, stack) -> None:
        client = MagicMock()
        SsmParameterStore(client=client).put(stack, "prod-Network-vpcId", "vpc-1")

        client.put_parameter.assert_called_once_with(
            Name="prod-Network-vpcId", Value="vpc-1", Type="String", Overwrite=True
        )

    def test_get(self, stack) -> None:
        client = MagicMock()
        client.get_parameter.return_value = {
            "Parameter": {"Name": "prod-Network-vpcId", "Value": "vpc-1"}
        }

        assert SsmParameterStore(client=client).get(stack, "prod-Network-vpcId") == "vpc-1"
        client.get_parameter.assert_called_once_with(Name="prod-Network-vpcId")

    def test_missing_parameter_raises_not_found(self, stack) -> None:
        client = MagicMock()
        client.get_parameter.side_effect = client_error("ParameterNotFound")

        with pytest.raises(NotFoundError) as error:
            SsmParameterStore(client=client).get(stack, "prod-Network-vpcId")
        assert error.value.key == "prod-Network-vpcId"

    def test_other_client_errors_propagate(self, stack) -> None:
        client = MagicMock()
        client.get_parameter.side_effect = client_error("AccessDeniedException")

        with pytest.raises(ClientError):
            SsmParameterStore(client=client).get(stack, "prod-Network-vpcId")

    def test_absent_optional_value(self, stack) -> None:
        client = MagicMock()
        client.get_parameter.return_value = {"Parameter": {"Value": ABSENT_MARKER}}

        assert SsmParameterStore(client=client).get_optional(stack, "prod-Network-x") is None


# =============================================================================
# CloudFormation store
# =============================================================================


class TestCloudFormationParameterStore:
    def test_put_creates_ssm_parameter(self, stack) -> None:
        CloudFormationParameterStore().put(stack, "prod-Network-vpcId", "vpc-1")

        Template.from_stack(stack).has_resource_properties(
            "AWS::SSM::Parameter",
            {"Name": "prod-Network-vpcId", "Type": "String", "Value": "vpc-1"},
        )

    def test_put_overwrites(self, stack) -> None:
        store = CloudFormationParameterStore()
        store.put(stack, "prod-Network-vpcId", "vpc-1")
        store.put(stack, "prod-Network-vpcId", "vpc-2")

        template = Template.from_stack(stack)
        template.resource_count_is("AWS::SSM::Parameter", 1)
        template.has_resource_properties(
            "AWS::SSM::Parameter", {"Name": "prod-Network-vpcId", "Value": "vpc-2"}
        )

    def test_put_optional_writes_absent_marker(self, stack) -> None:
        CloudFormationParameterStore().put_optional(stack, "prod-Network-httpsListenerArn", None)

        Template.from_stack(stack).has_resource_properties(
            "AWS::SSM::Parameter",
            {"Name": "prod-Network-httpsListenerArn", "Value": ABSENT_MARKER},
        )

    def test_get_adds_cloudformation_parameter(self, stack) -> None:
        CloudFormationParameterStore().get(stack, "prod-Network-vpcId")

        parameters = Template.from_stack(stack).to_json()["Parameters"]
        assert any(
            parameter["Type"] == "AWS::SSM::Parameter::Value<String>"
            and parameter["Default"] == "prod-Network-vpcId"
            for parameter in parameters.values()
        )
