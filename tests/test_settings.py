from cdk_constructs.config.settings import AppSettings


class TestAppSettings:
    def test_defaults(self, monkeypatch) -> None:
        for name in ("CDK_DEPLOY_ENVIRONMENT", "APPLICATION_NAME", "SSL_CERTIFICATE_ARN"):
            monkeypatch.delenv(name, raising=False)

        settings = AppSettings()

        assert settings.CDK_DEPLOY_ENVIRONMENT == "prod"
        assert settings.APPLICATION_NAME == "SpringBootApplication"
        assert settings.SSL_CERTIFICATE_ARN is None

    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("CDK_DEFAULT_ACCOUNT", "123456789012")
        monkeypatch.setenv("CDK_DEFAULT_REGION", "eu-central-1")
        monkeypatch.setenv("CDK_DEPLOY_ENVIRONMENT", "staging")

        settings = AppSettings()
        environment = settings.cdk_environment()

        assert settings.CDK_DEPLOY_ENVIRONMENT == "staging"
        assert environment.account == "123456789012"
        assert environment.region == "eu-central-1"
