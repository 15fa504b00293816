from cdk_constructs.application.components import SpringBootApplicationStack
