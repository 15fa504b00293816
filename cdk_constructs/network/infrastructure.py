import logging

from aws_cdk import Tags
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_ecs as ecs
from aws_cdk import aws_elasticloadbalancingv2 as elbv2
from constructs import Construct

from cdk_constructs.config import config
from cdk_constructs.network.models import NetworkInputParameters, NetworkOutputParameters
from cdk_constructs.parameter_store.naming import key_name
from cdk_constructs.parameter_store.store import (
    CloudFormationParameterStore,
    ParameterStore,
)

log = logging.getLogger(__name__)


def _parameter_name(environment_name: str, field_name: str) -> str:
    return key_name(environment_name, config.NETWORK_KIND, field_name)


class Network(Construct):
    """
    Creates a base network for an application served by ECS: a VPC with two
    public and two isolated subnets, an ECS cluster, and an internet-facing
    load balancer with an HTTP and an optional HTTPS listener. Services in
    other stacks attach to the listeners.

    The identifiers other constructs need are available from
    output_parameters in the same app, and from
    Network.output_parameters_from_parameter_store() in any app deployed
    after this one.
    """

    def __init__(
        self,
        scope: Construct,
        id_: str,
        environment_name: str,
        input_parameters: NetworkInputParameters = None,
        parameter_store: ParameterStore = None,
    ):
        super().__init__(scope, id_)

        input_parameters = input_parameters or NetworkInputParameters()
        self.environment_name = environment_name
        self.parameter_store = parameter_store or CloudFormationParameterStore()

        # no NAT gateway, so the isolated subnets have no internet access
        self.vpc = ec2.Vpc(
            self,
            "vpc",
            nat_gateways=0,
            max_azs=config.MAX_AZS,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    subnet_type=ec2.SubnetType.PUBLIC,
                    name=self._prefix("publicSubnet"),
                ),
                ec2.SubnetConfiguration(
                    subnet_type=ec2.SubnetType.PRIVATE_ISOLATED,
                    name=self._prefix("isolatedSubnet"),
                ),
            ],
        )

        # The cluster lives here rather than next to the service. Otherwise
        # the service stack could not be deleted while the cluster is in use.
        self.ecs_cluster = ecs.Cluster(
            self,
            "cluster",
            vpc=self.vpc,
            cluster_name=self._prefix("ecsCluster"),
        )

        self._create_load_balancer(input_parameters.ssl_certificate_arn)
        self._create_output_parameters()

        Tags.of(self).add("environment", environment_name)

    @staticmethod
    def output_parameters_from_parameter_store(
        scope: Construct,
        environment_name: str,
        parameter_store: ParameterStore = None,
    ) -> NetworkOutputParameters:
        """
        Loads the output parameters of a Network that was deployed into
        environment_name earlier. Use output_parameters instead when the
        Network is part of the same app.
        """
        parameter_store = parameter_store or CloudFormationParameterStore()

        def get(field_name: str) -> str:
            return parameter_store.get(
                scope, _parameter_name(environment_name, field_name)
            )

        def get_list(field_name: str):
            return parameter_store.get_list(
                scope, _parameter_name(environment_name, field_name), config.MAX_AZS
            )

        return NetworkOutputParameters(
            vpc_id=get(config.PARAMETER_VPC_ID),
            http_listener_arn=get(config.PARAMETER_HTTP_LISTENER),
            https_listener_arn=parameter_store.get_optional(
                scope, _parameter_name(environment_name, config.PARAMETER_HTTPS_LISTENER)
            ),
            load_balancer_security_group_id=get(
                config.PARAMETER_LOADBALANCER_SECURITY_GROUP_ID
            ),
            ecs_cluster_name=get(config.PARAMETER_ECS_CLUSTER_NAME),
            isolated_subnets=get_list(config.PARAMETER_ISOLATED_SUBNET),
            public_subnets=get_list(config.PARAMETER_PUBLIC_SUBNET),
            availability_zones=get_list(config.PARAMETER_AVAILABILITY_ZONE),
            load_balancer_arn=get(config.PARAMETER_LOAD_BALANCER_ARN),
            load_balancer_dns_name=get(config.PARAMETER_LOAD_BALANCER_DNS_NAME),
            load_balancer_canonical_hosted_zone_id=get(
                config.PARAMETER_LOAD_BALANCER_HOSTED_ZONE_ID
            ),
        )

    @property
    def output_parameters(self) -> NetworkOutputParameters:
        return NetworkOutputParameters(
            vpc_id=self.vpc.vpc_id,
            http_listener_arn=self.http_listener.listener_arn,
            https_listener_arn=(
                self.https_listener.listener_arn if self.https_listener else None
            ),
            load_balancer_security_group_id=self.load_balancer_security_group.security_group_id,
            ecs_cluster_name=self.ecs_cluster.cluster_name,
            isolated_subnets=[subnet.subnet_id for subnet in self.vpc.isolated_subnets],
            public_subnets=[subnet.subnet_id for subnet in self.vpc.public_subnets],
            availability_zones=list(self.vpc.availability_zones),
            load_balancer_arn=self.load_balancer.load_balancer_arn,
            load_balancer_dns_name=self.load_balancer.load_balancer_dns_name,
            load_balancer_canonical_hosted_zone_id=self.load_balancer.load_balancer_canonical_hosted_zone_id,
        )

    def _prefix(self, name: str) -> str:
        return f"{self.environment_name}-{name}"

    def _create_load_balancer(self, ssl_certificate_arn: str = None) -> None:
        self.load_balancer_security_group = ec2.SecurityGroup(
            self,
            "loadbalancerSecurityGroup",
            security_group_name=self._prefix("loadbalancerSecurityGroup"),
            description="Public access to the load balancer.",
            vpc=self.vpc,
        )

        ec2.CfnSecurityGroupIngress(
            self,
            "ingressToLoadbalancer",
            group_id=self.load_balancer_security_group.security_group_id,
            cidr_ip=config.ANYWHERE_IPV4,
            ip_protocol="-1",
        )

        self.load_balancer = elbv2.ApplicationLoadBalancer(
            self,
            "loadbalancer",
            load_balancer_name=self._prefix("loadbalancer"),
            vpc=self.vpc,
            internet_facing=True,
            security_group=self.load_balancer_security_group,
        )

        # Listeners need a default target. Services register their own target
        # groups through listener rules.
        dummy_target_group = elbv2.ApplicationTargetGroup(
            self,
            "defaultTargetGroup",
            vpc=self.vpc,
            port=config.NO_OP_TARGET_GROUP_PORT,
            protocol=elbv2.ApplicationProtocol.HTTP,
            target_group_name=self._prefix("no-op-targetGroup"),
            target_type=elbv2.TargetType.IP,
        )

        self.http_listener = self.load_balancer.add_listener(
            "httpListener",
            port=config.HTTP_PORT,
            protocol=elbv2.ApplicationProtocol.HTTP,
            open=True,
        )
        self.http_listener.add_target_groups(
            "http-defaultTargetGroup", target_groups=[dummy_target_group]
        )

        self.https_listener = None
        if ssl_certificate_arn is None:
            log.info(
                "No SSL certificate for environment %s, the load balancer listens to HTTP only",
                self.environment_name,
            )
            return

        self.https_listener = self.load_balancer.add_listener(
            "httpsListener",
            port=config.HTTPS_PORT,
            protocol=elbv2.ApplicationProtocol.HTTPS,
            certificates=[elbv2.ListenerCertificate.from_arn(ssl_certificate_arn)],
            open=True,
        )
        self.https_listener.add_target_groups(
            "https-defaultTargetGroup", target_groups=[dummy_target_group]
        )

        elbv2.ApplicationListenerRule(
            self,
            "HttpListenerRule",
            listener=self.http_listener,
            priority=1,
            conditions=[elbv2.ListenerCondition.path_patterns(["*"])],
            action=elbv2.ListenerAction.redirect(
                protocol="HTTPS", port=str(config.HTTPS_PORT)
            ),
        )

    def _create_output_parameters(self) -> None:
        """
        Stores the identifiers of this network in the parameter store so that
        stacks deployed later can find them.
        """
        outputs = self.output_parameters
        store = self.parameter_store

        def name(field_name: str) -> str:
            return _parameter_name(self.environment_name, field_name)

        store.put(self, name(config.PARAMETER_VPC_ID), outputs.vpc_id)
        store.put(self, name(config.PARAMETER_HTTP_LISTENER), outputs.http_listener_arn)
        store.put_optional(
            self, name(config.PARAMETER_HTTPS_LISTENER), outputs.https_listener_arn
        )
        store.put(
            self,
            name(config.PARAMETER_LOADBALANCER_SECURITY_GROUP_ID),
            outputs.load_balancer_security_group_id,
        )
        store.put(self, name(config.PARAMETER_ECS_CLUSTER_NAME), outputs.ecs_cluster_name)
        store.put_list(
            self, name(config.PARAMETER_AVAILABILITY_ZONE), outputs.availability_zones
        )
        store.put_list(self, name(config.PARAMETER_ISOLATED_SUBNET), outputs.isolated_subnets)
        store.put_list(self, name(config.PARAMETER_PUBLIC_SUBNET), outputs.public_subnets)
        store.put(self, name(config.PARAMETER_LOAD_BALANCER_ARN), outputs.load_balancer_arn)
        store.put(
            self, name(config.PARAMETER_LOAD_BALANCER_DNS_NAME), outputs.load_balancer_dns_name
        )
        store.put(
            self,
            name(config.PARAMETER_LOAD_BALANCER_HOSTED_ZONE_ID),
            outputs.load_balancer_canonical_hosted_zone_id,
        )
