"""
Postgres database in the isolated subnets of a Network.

The Network of the same environment must have been deployed before, since
the database reads the VPC, isolated subnets and availability zones from
the parameter store.

The database publishes the following parameters, all under
"<environment>-<application>-Database-":

    endpointAddress   host name of the database
    endpointPort      port of the database
    databaseName      name of the database
    securityGroupId   security group of the database
    secretArn         secret with the fields "username" and "password"

PostgresDatabase.output_parameters_from_parameter_store() loads them in
other stacks.
"""
import json
import logging
import re

from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_rds as rds
from aws_cdk import aws_secretsmanager as secretsmanager
from constructs import Construct

from cdk_constructs.config import config
from cdk_constructs.database.models import DatabaseInputParameters, DatabaseOutputParameters
from cdk_constructs.environment import ApplicationEnvironment
from cdk_constructs.network.infrastructure import Network
from cdk_constructs.parameter_store.naming import key_name
from cdk_constructs.parameter_store.store import (
    CloudFormationParameterStore,
    ParameterStore,
)

log = logging.getLogger(__name__)


def sanitize_db_name(name: str) -> str:
    """
    Database and user names may only hold alphanumeric characters and must
    start with a letter.
    """
    name = re.sub(r"[^a-zA-Z0-9]", "", name)
    return re.sub(r"^[0-9]", "a", name)


def _parameter_name(application_environment: ApplicationEnvironment, field_name: str) -> str:
    return key_name(
        application_environment.parameter_namespace, config.DATABASE_KIND, field_name
    )


class PostgresDatabase(Construct):
    def __init__(
        self,
        scope: Construct,
        id_: str,
        application_environment: ApplicationEnvironment,
        input_parameters: DatabaseInputParameters = None,
        parameter_store: ParameterStore = None,
    ):
        super().__init__(scope, id_)

        input_parameters = input_parameters or DatabaseInputParameters()
        self.application_environment = application_environment
        self.parameter_store = parameter_store or CloudFormationParameterStore()

        # Vpc.from_lookup() would need the account at synth time, so the
        # network is described by its published parameters instead.
        network_output_parameters = Network.output_parameters_from_parameter_store(
            self, application_environment.environment_name, self.parameter_store
        )

        username = sanitize_db_name(application_environment.prefix("dbUser"))

        self.database_security_group = ec2.CfnSecurityGroup(
            self,
            "databaseSecurityGroup",
            vpc_id=network_output_parameters.vpc_id,
            group_description="Security Group for the database instance",
            group_name=application_environment.prefix("dbSecurityGroup"),
        )

        # generates a JSON object with the keys "username" and "password"
        self.database_secret = secretsmanager.Secret(
            self,
            "databaseSecret",
            secret_name=application_environment.prefix("DatabaseSecret"),
            description="Credentials to the RDS instance",
            generate_secret_string=secretsmanager.SecretStringGenerator(
                secret_string_template=json.dumps({"username": username}),
                generate_string_key="password",
                password_length=config.DATABASE_PASSWORD_LENGTH,
                exclude_characters=config.DATABASE_PASSWORD_EXCLUDED_CHARACTERS,
            ),
        )

        subnet_group = rds.CfnDBSubnetGroup(
            self,
            "dbSubnetGroup",
            db_subnet_group_description="Subnet group for the RDS instance",
            db_subnet_group_name=application_environment.prefix("dbSubnetGroup"),
            subnet_ids=list(network_output_parameters.isolated_subnets),
        )

        self.db_instance = rds.CfnDBInstance(
            self,
            "postgresInstance",
            allocated_storage=str(input_parameters.storage_in_gb),
            availability_zone=network_output_parameters.availability_zones[0],
            db_instance_class=input_parameters.instance_class,
            db_name=sanitize_db_name(application_environment.prefix("database")),
            db_subnet_group_name=subnet_group.ref,
            engine="postgres",
            engine_version=input_parameters.postgres_version,
            master_username=username,
            master_user_password=self.database_secret.secret_value_from_json(
                "password"
            ).unsafe_unwrap(),
            publicly_accessible=False,
            vpc_security_groups=[self.database_security_group.attr_group_id],
        )

        secretsmanager.CfnSecretTargetAttachment(
            self,
            "secretTargetAttachment",
            secret_id=self.database_secret.secret_arn,
            target_id=self.db_instance.ref,
            target_type="AWS::RDS::DBInstance",
        )

        log.info(
            "Postgres %s (%s) for %s",
            input_parameters.postgres_version,
            input_parameters.instance_class,
            application_environment,
        )

        self._create_output_parameters()

        application_environment.tag(self)

    @staticmethod
    def output_parameters_from_parameter_store(
        scope: Construct,
        application_environment: ApplicationEnvironment,
        parameter_store: ParameterStore = None,
    ) -> DatabaseOutputParameters:
        """
        Loads the output parameters of a PostgresDatabase deployed earlier for
        the same application and environment. Use output_parameters instead
        when the database is part of the same app.
        """
        parameter_store = parameter_store or CloudFormationParameterStore()

        def get(field_name: str) -> str:
            return parameter_store.get(
                scope, _parameter_name(application_environment, field_name)
            )

        return DatabaseOutputParameters(
            endpoint_address=get(config.PARAMETER_ENDPOINT_ADDRESS),
            endpoint_port=get(config.PARAMETER_ENDPOINT_PORT),
            database_name=get(config.PARAMETER_DATABASE_NAME),
            database_secret_arn=get(config.PARAMETER_SECRET_ARN),
            database_security_group_id=get(config.PARAMETER_SECURITY_GROUP_ID),
        )

    @property
    def output_parameters(self) -> DatabaseOutputParameters:
        return DatabaseOutputParameters(
            endpoint_address=self.db_instance.attr_endpoint_address,
            endpoint_port=self.db_instance.attr_endpoint_port,
            database_name=self.db_instance.db_name,
            database_secret_arn=self.database_secret.secret_arn,
            database_security_group_id=self.database_security_group.attr_group_id,
        )

    def _create_output_parameters(self) -> None:
        outputs = self.output_parameters
        for field_name, value in (
            (config.PARAMETER_ENDPOINT_ADDRESS, outputs.endpoint_address),
            (config.PARAMETER_ENDPOINT_PORT, outputs.endpoint_port),
            (config.PARAMETER_DATABASE_NAME, outputs.database_name),
            (config.PARAMETER_SECURITY_GROUP_ID, outputs.database_security_group_id),
            (config.PARAMETER_SECRET_ARN, outputs.database_secret_arn),
        ):
            self.parameter_store.put(
                self, _parameter_name(self.application_environment, field_name), value
            )
