import construct_hub
from construct_hub import sources
from aws_cdk import (
    Annotations,
    CfnOutput,
    Fn,
    Stack
)
from constructs import Construct

from config import HubConfig
from stacks.code_artifact import existing_code_artifact_repository
from stacks.subdomain import DelegatedSubdomain


class ConstructHubStack(Stack):
    """
    Deploys a private Construct Hub:
    1. References the existing CodeArtifact repository used as package source.
    2. Delegates "<service_label>.<parent_domain>" to a new hosted zone with a certificate.
    3. Wires both into the Construct Hub construct.
    """
    def __init__(self, scope: Construct, construct_id: str, config: HubConfig, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # =================================================================
        # 1. PACKAGE SOURCE (Existing CodeArtifact repository)
        # =================================================================
        self.repository = existing_code_artifact_repository(
            self, config.repository, config.repository_description
        )

        # =================================================================
        # 2. DOMAIN (Delegated subdomain + certificate)
        # =================================================================
        self.subdomain = DelegatedSubdomain(self, "Subdomain",
            parent_domain=config.parent_domain,
            service_label=config.service_label,
            overwrite_existing_delegation=config.overwrite_delegation
        )

        # =================================================================
        # 3. CONSTRUCT HUB
        # =================================================================
        if config.isolation_name == "UNLIMITED_INTERNET_ACCESS":
            Annotations.of(self).add_warning_v2(
                "construct-hub:unlimitedInternetAccess",
                "Sensitive tasks run with unrestricted outbound internet access. "
                "Review this posture before deploying to a shared account."
            )

        self.construct_hub = construct_hub.ConstructHub(self, "construct-hub",
            package_sources=[
                sources.CodeArtifact(repository=self.repository)
            ],
            domain=self.subdomain.domain,
            sensitive_task_isolation=config.isolation,
            feature_flags=config.feature_flags
        )

        # =================================================================
        # 4. OUTPUTS
        # =================================================================
        CfnOutput(self, "HubUrl", value=f"https://{self.subdomain.fqdn}")
        CfnOutput(self, "HostedZoneId", value=self.subdomain.hosted_zone.hosted_zone_id)
        CfnOutput(self, "NameServers",
            value=Fn.join(", ", self.subdomain.hosted_zone.hosted_zone_name_servers),
            description="Name servers delegated to from the parent zone"
        )
        CfnOutput(self, "CertificateArn", value=self.subdomain.certificate.certificate_arn)
        CfnOutput(self, "RepositoryArn", value=config.repository.arn)
