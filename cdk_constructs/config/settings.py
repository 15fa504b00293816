from typing import Optional

import aws_cdk as cdk
from pydantic_settings import BaseSettings

from cdk_constructs.config import config


class AppSettings(BaseSettings):
    """
    Settings for the example app entry points, read from the environment
    the CDK CLI runs the app in.
    """

    CDK_DEFAULT_ACCOUNT: Optional[str] = None
    CDK_DEFAULT_REGION: Optional[str] = None
    CDK_DEPLOY_ENVIRONMENT: str = config.SPRING_BOOT_ENVIRONMENT_NAME

    APPLICATION_NAME: str = config.SPRING_BOOT_APPLICATION_NAME
    DOCKER_IMAGE_URL: str = "docker.io/library/nginx:latest"
    SSL_CERTIFICATE_ARN: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    def cdk_environment(self) -> cdk.Environment:
        return cdk.Environment(
            account=self.CDK_DEFAULT_ACCOUNT, region=self.CDK_DEFAULT_REGION
        )
