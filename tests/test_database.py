import json

import pytest
from aws_cdk.assertions import Match, Template

from cdk_constructs.database.infrastructure import PostgresDatabase, sanitize_db_name
from cdk_constructs.database.models import DatabaseInputParameters
from cdk_constructs.environment import ApplicationEnvironment
from cdk_constructs.exceptions import NotFoundError
from cdk_constructs.parameter_store.store import InMemoryParameterStore


@pytest.mark.parametrize(
    "name, expected",
    [
        ("prod-myapp-database", "prodmyappdatabase"),
        ("my_app.db", "myappdb"),
        ("1st-app", "astapp"),
    ],
)
def test_sanitize_db_name(name, expected) -> None:
    assert sanitize_db_name(name) == expected


class TestPostgresDatabase:
    @pytest.fixture
    def database(self, stack, application_environment, network_store) -> PostgresDatabase:
        return PostgresDatabase(
            stack,
            "database",
            application_environment=application_environment,
            parameter_store=network_store,
        )

    @pytest.fixture
    def template(self, stack, database) -> Template:
        return Template.from_stack(stack)

    def test_db_instance(self, template) -> None:
        template.has_resource_properties(
            "AWS::RDS::DBInstance",
            {
                "AllocatedStorage": "20",
                "DBInstanceClass": "db.t3.micro",
                "Engine": "postgres",
                "EngineVersion": "15.4",
                "DBName": "prodmyappdatabase",
                "MasterUsername": "prodmyappdbUser",
                "AvailabilityZone": "eu-central-1a",
                "PubliclyAccessible": False,
            },
        )

    def test_subnet_group_uses_isolated_subnets(self, template) -> None:
        template.has_resource_properties(
            "AWS::RDS::DBSubnetGroup",
            {
                "DBSubnetGroupName": "prod-myapp-dbSubnetGroup",
                "SubnetIds": ["subnet-isolated-1", "subnet-isolated-2"],
            },
        )

    def test_security_group(self, template) -> None:
        template.has_resource_properties(
            "AWS::EC2::SecurityGroup",
            {"GroupName": "prod-myapp-dbSecurityGroup", "VpcId": "vpc-0123"},
        )

    def test_secret(self, template) -> None:
        template.has_resource_properties(
            "AWS::SecretsManager::Secret",
            {
                "Name": "prod-myapp-DatabaseSecret",
                "GenerateSecretString": Match.object_like(
                    {
                        "SecretStringTemplate": json.dumps({"username": "prodmyappdbUser"}),
                        "GenerateStringKey": "password",
                        "PasswordLength": 32,
                    }
                ),
            },
        )
        template.resource_count_is("AWS::SecretsManager::SecretTargetAttachment", 1)

    def test_publishes_parameters(self, database, network_store) -> None:
        for field_name in (
            "endpointAddress",
            "endpointPort",
            "databaseName",
            "securityGroupId",
            "secretArn",
        ):
            assert f"prod-myapp-Database-{field_name}" in network_store

    def test_custom_input_parameters(self, stack, application_environment, network_store) -> None:
        PostgresDatabase(
            stack,
            "database",
            application_environment=application_environment,
            input_parameters=DatabaseInputParameters()
            .with_storage_in_gb(100)
            .with_instance_class("db.t3.small")
            .with_postgres_version("16.1"),
            parameter_store=network_store,
        )

        Template.from_stack(stack).has_resource_properties(
            "AWS::RDS::DBInstance",
            {"AllocatedStorage": "100", "DBInstanceClass": "db.t3.small", "EngineVersion": "16.1"},
        )

    def test_requires_network(self, stack, application_environment) -> None:
        with pytest.raises(NotFoundError) as error:
            PostgresDatabase(
                stack,
                "database",
                application_environment=application_environment,
                parameter_store=InMemoryParameterStore(),
            )
        assert error.value.key.startswith("prod-Network-")


class TestDatabaseOutputParameters:
    def test_from_parameter_store(self, stack, application_environment) -> None:
        store = InMemoryParameterStore(
            {
                "prod-myapp-Database-endpointAddress": "db.example.com",
                "prod-myapp-Database-endpointPort": "5432",
                "prod-myapp-Database-databaseName": "prodmyappdatabase",
                "prod-myapp-Database-securityGroupId": "sg-database",
                "prod-myapp-Database-secretArn": "arn:aws:secretsmanager:secret",
            }
        )

        outputs = PostgresDatabase.output_parameters_from_parameter_store(
            stack, application_environment, store
        )

        assert outputs.endpoint_address == "db.example.com"
        assert outputs.endpoint_port == "5432"
        assert outputs.database_name == "prodmyappdatabase"
        assert outputs.database_security_group_id == "sg-database"
        assert outputs.database_secret_arn == "arn:aws:secretsmanager:secret"

    def test_other_application_is_not_found(self, stack) -> None:
        with pytest.raises(NotFoundError):
            PostgresDatabase.output_parameters_from_parameter_store(
                stack, ApplicationEnvironment("otherapp", "prod"), InMemoryParameterStore()
            )
