#!/usr/bin/env python3
import logging

import aws_cdk as cdk

from cdk_constructs.application.components import SpringBootApplicationStack
from cdk_constructs.config.settings import AppSettings

settings = AppSettings()
logging.basicConfig(level=settings.LOG_LEVEL)

app = cdk.App()
SpringBootApplicationStack(
    app,
    "SpringBootApplication",
    docker_image_url=settings.DOCKER_IMAGE_URL,
    ssl_certificate_arn=settings.SSL_CERTIFICATE_ARN,
    application_name=settings.APPLICATION_NAME,
    environment_name=settings.CDK_DEPLOY_ENVIRONMENT,
    env=settings.cdk_environment(),
)
app.synth()
