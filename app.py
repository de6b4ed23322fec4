import aws_cdk as cdk
from config import get_config
from stacks.construct_hub_stack import ConstructHubStack

app = cdk.App()
config = get_config(app)

# =================================================================
# CONSTRUCT HUB STACK
# =================================================================
# Account/region come from .env or fall back to the cdk cli defaults.
# The parent hosted zone lookup needs a concrete environment.
hub_env = cdk.Environment(account=config.account, region=config.region)
hub_stack = ConstructHubStack(
    app, config.stack_name,
    config=config,
    env=hub_env
)

print(f"🚀 Synthesizing {config.stack_name} for https://{config.fqdn}")

# The CodeArtifact repository already exists: a plain first deploy would try to create it.
print(
    f"📦 First deploy only: run `cdk import {config.stack_name}` to adopt "
    f"{config.repository.arn} before `cdk deploy`"
)

app.synth()
