import logging
from typing import List, Mapping, Sequence

from aws_cdk import CfnCondition, CfnParameter, Fn, RemovalPolicy, Stack
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_ecr as ecr
from aws_cdk import aws_ecs as ecs
from aws_cdk import aws_elasticloadbalancingv2 as elbv2
from aws_cdk import aws_iam as iam
from aws_cdk import aws_logs as logs
from constructs import Construct

from cdk_constructs.config import config
from cdk_constructs.environment import ApplicationEnvironment
from cdk_constructs.network.models import NetworkOutputParameters
from cdk_constructs.service.models import ServiceInputParameters, ServiceOutputParameters

log = logging.getLogger(__name__)


class Service(Construct):
    """
    Creates an ECS Fargate service on top of a Network. The Docker image
    comes from the DockerImageSource of the input parameters. The service
    gets its own log group and a target group that is attached to the
    listeners of the Network's load balancer.
    """

    def __init__(
        self,
        scope: Construct,
        id_: str,
        application_environment: ApplicationEnvironment,
        input_parameters: ServiceInputParameters,
        network_output_parameters: NetworkOutputParameters,
    ):
        super().__init__(scope, id_)

        self.application_environment = application_environment
        self.input_parameters = input_parameters
        self.container_name = application_environment.prefix("container")

        self.target_group = elbv2.CfnTargetGroup(
            self,
            "targetGroup",
            health_check_interval_seconds=input_parameters.health_check_interval_seconds,
            health_check_path=input_parameters.health_check_path,
            health_check_port=str(input_parameters.container_port),
            health_check_protocol=input_parameters.container_protocol,
            health_check_timeout_seconds=input_parameters.health_check_timeout_seconds,
            healthy_threshold_count=input_parameters.healthy_threshold_count,
            unhealthy_threshold_count=input_parameters.unhealthy_threshold_count,
            target_group_attributes=(
                self._sticky_session_configuration()
                if input_parameters.sticky_sessions_enabled
                else []
            ),
            target_type="ip",
            port=input_parameters.container_port,
            protocol=input_parameters.container_protocol,
            vpc_id=network_output_parameters.vpc_id,
        )

        self._create_listener_rules(network_output_parameters)

        self.log_group = logs.LogGroup(
            self,
            "ecsLogGroup",
            log_group_name=application_environment.prefix("logs"),
            retention=input_parameters.log_retention,
            removal_policy=RemovalPolicy.DESTROY,
        )

        self.task_execution_role = iam.Role(
            self,
            "ecsTaskExecutionRole",
            assumed_by=iam.ServicePrincipal(config.ECS_TASKS_PRINCIPAL),
            path="/",
            inline_policies={
                application_environment.prefix("ecsTaskExecutionRolePolicy"): iam.PolicyDocument(
                    statements=[
                        iam.PolicyStatement(
                            effect=iam.Effect.ALLOW,
                            resources=["*"],
                            actions=config.ECS_TASK_EXECUTION_ACTIONS,
                        )
                    ]
                )
            },
        )

        task_role_policies = None
        if input_parameters.task_role_policy_statements:
            task_role_policies = {
                application_environment.prefix("ecsTaskRolePolicy"): iam.PolicyDocument(
                    statements=list(input_parameters.task_role_policy_statements)
                )
            }
        self.task_role = iam.Role(
            self,
            "ecsTaskRole",
            assumed_by=iam.ServicePrincipal(config.ECS_TASKS_PRINCIPAL),
            path="/",
            inline_policies=task_role_policies,
        )

        self.task_definition = ecs.CfnTaskDefinition(
            self,
            "taskDefinition",
            cpu=str(input_parameters.cpu),
            memory=str(input_parameters.memory),
            network_mode="awsvpc",
            requires_compatibilities=["FARGATE"],
            execution_role_arn=self.task_execution_role.role_arn,
            task_role_arn=self.task_role.role_arn,
            container_definitions=[self._container_definition()],
        )

        self.ecs_security_group = ec2.CfnSecurityGroup(
            self,
            "ecsSecurityGroup",
            vpc_id=network_output_parameters.vpc_id,
            group_description="SecurityGroup for the ECS containers",
        )

        # containers may talk to each other
        ec2.CfnSecurityGroupIngress(
            self,
            "ecsIngressFromSelf",
            ip_protocol="-1",
            source_security_group_id=self.ecs_security_group.attr_group_id,
            group_id=self.ecs_security_group.attr_group_id,
        )

        ec2.CfnSecurityGroupIngress(
            self,
            "ecsIngressFromLoadbalancer",
            ip_protocol="-1",
            source_security_group_id=network_output_parameters.load_balancer_security_group_id,
            group_id=self.ecs_security_group.attr_group_id,
        )

        self._allow_ingress_from_ecs(
            input_parameters.security_group_ids_to_grant_ingress_from_ecs
        )

        self.service = ecs.CfnService(
            self,
            "ecsService",
            cluster=network_output_parameters.ecs_cluster_name,
            launch_type="FARGATE",
            deployment_configuration=ecs.CfnService.DeploymentConfigurationProperty(
                maximum_percent=input_parameters.maximum_instances_percent,
                minimum_healthy_percent=input_parameters.minimum_healthy_instances_percent,
            ),
            desired_count=input_parameters.desired_instances_count,
            task_definition=self.task_definition.ref,
            load_balancers=[
                ecs.CfnService.LoadBalancerProperty(
                    container_name=self.container_name,
                    container_port=input_parameters.container_port,
                    target_group_arn=self.target_group.ref,
                )
            ],
            network_configuration=ecs.CfnService.NetworkConfigurationProperty(
                awsvpc_configuration=ecs.CfnService.AwsVpcConfigurationProperty(
                    assign_public_ip="ENABLED",
                    security_groups=[self.ecs_security_group.attr_group_id],
                    subnets=list(network_output_parameters.public_subnets),
                )
            ),
        )

        # Without this, ECS may reject the service because its target group
        # is not attached to a load balancer yet.
        self.service.add_dependency(self.http_listener_rule)

        application_environment.tag(self)

    @property
    def output_parameters(self) -> ServiceOutputParameters:
        return ServiceOutputParameters(
            ecs_security_group_id=self.ecs_security_group.attr_group_id,
            service_name=self.service.attr_name,
            log_group_name=self.log_group.log_group_name,
        )

    @staticmethod
    def _sticky_session_configuration() -> List[elbv2.CfnTargetGroup.TargetGroupAttributeProperty]:
        return [
            elbv2.CfnTargetGroup.TargetGroupAttributeProperty(
                key="stickiness.enabled", value="true"
            ),
            elbv2.CfnTargetGroup.TargetGroupAttributeProperty(
                key="stickiness.type", value="lb_cookie"
            ),
            elbv2.CfnTargetGroup.TargetGroupAttributeProperty(
                key="stickiness.lb_cookie.duration_seconds",
                value=str(config.STICKY_SESSION_DURATION_SECONDS),
            ),
        ]

    def _create_listener_rules(self, network_output_parameters: NetworkOutputParameters) -> None:
        action = elbv2.CfnListenerRule.ActionProperty(
            target_group_arn=self.target_group.ref, type="forward"
        )
        condition = elbv2.CfnListenerRule.RuleConditionProperty(
            field="path-pattern", values=["*"]
        )

        self.https_listener_rule = None
        https_listener_arn = network_output_parameters.https_listener_arn
        if https_listener_arn is not None:
            self.https_listener_rule = elbv2.CfnListenerRule(
                self,
                "httpsListenerRule",
                actions=[action],
                conditions=[condition],
                listener_arn=https_listener_arn,
                priority=1,
            )
            if self._is_deploy_time_parameter(https_listener_arn):
                # Resolved from the parameter store at deploy time. Only create
                # the rule if the network published an HTTPS listener.
                self.https_listener_rule.cfn_options.condition = CfnCondition(
                    self,
                    "httpsListenerRuleCondition",
                    expression=Fn.condition_not(
                        Fn.condition_equals(https_listener_arn, config.ABSENT_MARKER)
                    ),
                )
        else:
            log.info(
                "Network has no HTTPS listener, %s is reachable via HTTP only",
                self.application_environment,
            )

        self.http_listener_rule = elbv2.CfnListenerRule(
            self,
            "httpListenerRule",
            actions=[action],
            conditions=[condition],
            listener_arn=network_output_parameters.http_listener_arn,
            priority=2,
        )

    def _is_deploy_time_parameter(self, value: str) -> bool:
        """
        True if value is a reference to a CloudFormation parameter of this
        stack, which is how CloudFormationParameterStore reads values.
        CloudFormation conditions may reference parameters but not resources.
        """
        stack = Stack.of(self)
        resolved = stack.resolve(value)
        if not isinstance(resolved, dict) or "Ref" not in resolved:
            return False
        return any(
            isinstance(child, CfnParameter)
            and stack.resolve(child.logical_id) == resolved["Ref"]
            for child in stack.node.find_all()
        )

    def _image_url(self) -> str:
        image_source = self.input_parameters.docker_image_source
        if not image_source.is_ecr_source:
            return image_source.docker_image_url
        repository = ecr.Repository.from_repository_name(
            self, "ecrRepository", image_source.docker_repository_name
        )
        repository.grant_pull(self.task_execution_role)
        return repository.repository_uri_for_tag(image_source.docker_image_tag)

    def _container_definition(self) -> ecs.CfnTaskDefinition.ContainerDefinitionProperty:
        input_parameters = self.input_parameters
        return ecs.CfnTaskDefinition.ContainerDefinitionProperty(
            name=self.container_name,
            cpu=input_parameters.cpu,
            memory=input_parameters.memory,
            image=self._image_url(),
            log_configuration=ecs.CfnTaskDefinition.LogConfigurationProperty(
                log_driver="awslogs",
                options={
                    "awslogs-group": self.log_group.log_group_name,
                    "awslogs-region": Stack.of(self).region,
                    "awslogs-stream-prefix": self.application_environment.prefix("stream"),
                    "awslogs-datetime-format": input_parameters.awslogs_date_time_format,
                },
            ),
            port_mappings=[
                ecs.CfnTaskDefinition.PortMappingProperty(
                    container_port=input_parameters.container_port
                )
            ],
            environment=self._to_key_value_pairs(input_parameters.environment_variables),
        )

    def _allow_ingress_from_ecs(self, security_group_ids: Sequence[str]) -> None:
        for index, security_group_id in enumerate(security_group_ids, start=1):
            ec2.CfnSecurityGroupIngress(
                self,
                f"securityGroupIngress{index}",
                source_security_group_id=self.ecs_security_group.attr_group_id,
                group_id=security_group_id,
                ip_protocol="-1",
            )

    @staticmethod
    def _to_key_value_pairs(
        environment_variables: Mapping[str, str]
    ) -> List[ecs.CfnTaskDefinition.KeyValuePairProperty]:
        return [
            ecs.CfnTaskDefinition.KeyValuePairProperty(name=name, value=value)
            for name, value in environment_variables.items()
        ]
