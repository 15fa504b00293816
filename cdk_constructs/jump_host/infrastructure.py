import logging

from aws_cdk import CfnOutput
from aws_cdk import aws_ec2 as ec2
from constructs import Construct

from cdk_constructs.config import config
from cdk_constructs.database.models import DatabaseOutputParameters
from cdk_constructs.environment import ApplicationEnvironment
from cdk_constructs.jump_host.models import JumpHostInputParameters
from cdk_constructs.network.infrastructure import Network
from cdk_constructs.network.models import NetworkOutputParameters
from cdk_constructs.parameter_store.store import ParameterStore

log = logging.getLogger(__name__)


class JumpHost(Construct):
    """
    EC2 instance to open an SSH tunnel to the database through (a "bastion
    host"). It sits in the first public subnet of the Network and may reach
    the database's security group on the Postgres port.

    The public IP of the instance is a stack output, so it can be looked up
    in the CloudFormation console.
    """

    def __init__(
        self,
        scope: Construct,
        id_: str,
        application_environment: ApplicationEnvironment,
        input_parameters: JumpHostInputParameters,
        database_output_parameters: DatabaseOutputParameters,
        parameter_store: ParameterStore = None,
    ):
        super().__init__(scope, id_)

        network_output_parameters = Network.output_parameters_from_parameter_store(
            self, application_environment.environment_name, parameter_store
        )

        self.security_group = ec2.CfnSecurityGroup(
            self,
            "securityGroup",
            group_name=application_environment.prefix("jumpHostSecurityGroup"),
            group_description="SecurityGroup containing the jump host",
            vpc_id=network_output_parameters.vpc_id,
        )

        self._allow_access_to_jump_host()
        self._allow_access_to_database(database_output_parameters.database_security_group_id)

        self.instance = self._create_ec2_instance(
            input_parameters, network_output_parameters
        )

        CfnOutput(self, "publicIp", value=self.instance.attr_public_ip)

        application_environment.tag(self)

    @property
    def public_ip(self) -> str:
        return self.instance.attr_public_ip

    def _create_ec2_instance(
        self,
        input_parameters: JumpHostInputParameters,
        network_output_parameters: NetworkOutputParameters,
    ) -> ec2.CfnInstance:
        log.info(
            "Jump host %s with key pair %s",
            input_parameters.instance_type,
            input_parameters.key_name,
        )
        return ec2.CfnInstance(
            self,
            "jumpHostInstance",
            instance_type=input_parameters.instance_type,
            security_group_ids=[self.security_group.attr_group_id],
            image_id=ec2.MachineImage.latest_amazon_linux2023().get_image(self).image_id,
            subnet_id=network_output_parameters.public_subnets[0],
            key_name=input_parameters.key_name,
        )

    def _allow_access_to_database(self, database_security_group_id: str) -> None:
        ec2.CfnSecurityGroupIngress(
            self,
            "IngressFromJumpHost",
            source_security_group_id=self.security_group.attr_group_id,
            group_id=database_security_group_id,
            from_port=config.POSTGRES_PORT,
            to_port=config.POSTGRES_PORT,
            ip_protocol="TCP",
        )

    def _allow_access_to_jump_host(self) -> None:
        ec2.CfnSecurityGroupIngress(
            self,
            "IngressFromOutside",
            group_id=self.security_group.attr_group_id,
            from_port=config.SSH_PORT,
            to_port=config.SSH_PORT,
            ip_protocol="TCP",
            cidr_ip=config.ANYWHERE_IPV4,
        )
