from typing import Optional

from aws_cdk import CfnOutput, Stack
from constructs import Construct

from cdk_constructs.config import config
from cdk_constructs.environment import ApplicationEnvironment
from cdk_constructs.network.infrastructure import Network
from cdk_constructs.network.models import NetworkInputParameters
from cdk_constructs.service.infrastructure import Service
from cdk_constructs.service.models import DockerImageSource, ServiceInputParameters


class SpringBootApplicationStack(Stack):
    """
    Network and Service in a single stack, running the given Docker image
    with the Service defaults (port 8080, health check on "/").

    Meant as a demonstration. Real deployments put the Network and each
    Service into their own stacks and wire them through the parameter store.
    """

    def __init__(
        self,
        scope: Construct,
        id_: str,
        docker_image_url: str,
        ssl_certificate_arn: Optional[str] = None,
        application_name: str = config.SPRING_BOOT_APPLICATION_NAME,
        environment_name: str = config.SPRING_BOOT_ENVIRONMENT_NAME,
        **kwargs,
    ) -> None:
        super().__init__(
            scope, id_, stack_name=config.SPRING_BOOT_APPLICATION_NAME, **kwargs
        )

        network_input_parameters = NetworkInputParameters()
        if ssl_certificate_arn:
            network_input_parameters = network_input_parameters.with_ssl_certificate_arn(
                ssl_certificate_arn
            )

        self.network = Network(
            self,
            "network",
            environment_name=environment_name,
            input_parameters=network_input_parameters,
        )

        application_environment = ApplicationEnvironment(application_name, environment_name)
        self.service = Service(
            self,
            "Service",
            application_environment=application_environment,
            input_parameters=ServiceInputParameters(
                docker_image_source=DockerImageSource.from_url(docker_image_url),
                environment_variables={
                    "SPRING_PROFILES_ACTIVE": environment_name,
                },
            ),
            network_output_parameters=self.network.output_parameters,
        )

        CfnOutput(
            self,
            "loadbalancerDnsName",
            export_name="loadbalancerDnsName",
            value=self.network.load_balancer.load_balancer_dns_name,
        )
