from aws_cdk import RemovalPolicy
from aws_cdk import aws_ecr as ecr
from aws_cdk import aws_iam as iam
from constructs import Construct

from cdk_constructs.docker_repository.models import DockerRepositoryInputParameters


class DockerRepository(Construct):
    """
    ECR repository for Docker images. Every user of the given account may
    push and pull images.
    """

    def __init__(
        self,
        scope: Construct,
        id_: str,
        input_parameters: DockerRepositoryInputParameters,
    ):
        super().__init__(scope, id_)

        self.ecr_repository = ecr.Repository(
            self,
            "ecrRepository",
            repository_name=input_parameters.docker_repository_name,
            removal_policy=(
                RemovalPolicy.RETAIN
                if input_parameters.retain_registry_on_delete
                else RemovalPolicy.DESTROY
            ),
            lifecycle_rules=[
                ecr.LifecycleRule(
                    rule_priority=1,
                    description=f"limit to {input_parameters.max_image_count} images",
                    max_image_count=input_parameters.max_image_count,
                )
            ],
        )

        self.ecr_repository.grant_pull_push(iam.AccountPrincipal(input_parameters.account_id))
