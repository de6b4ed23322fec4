import construct_hub
from aws_cdk import (
    Annotations,
    aws_certificatemanager as acm,
    aws_route53 as route53
)
from constructs import Construct

from config import DNS_LABEL


class DelegatedSubdomain(Construct):
    """
    Creates a hosted zone for "<service_label>.<parent_domain>" and delegates to it:
    1. Looks up the existing parent hosted zone.
    2. Creates the child hosted zone.
    3. Adds an NS record in the parent zone pointing at the child's name servers.
    4. Requests a DNS-validated certificate for the subdomain.

    The subdomain name is derived once and shared by the zone, the record and the
    certificate; DNS validation breaks if any of them disagree.
    """
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        parent_domain: str,
        service_label: str = "construct-hub",
        overwrite_existing_delegation: bool = False
    ) -> None:
        super().__init__(scope, construct_id)

        if not parent_domain or parent_domain.startswith(".") or parent_domain.endswith("."):
            raise ValueError(f"Invalid parent domain: '{parent_domain}'")
        if not DNS_LABEL.match(service_label or ""):
            raise ValueError(f"Invalid service label: '{service_label}'")

        self.fqdn = f"{service_label}.{parent_domain}"

        # =================================================================
        # 1. PARENT ZONE (Existing)
        # =================================================================
        # Resolved from the account at synth time; a miss fails the lookup, not this code
        self.parent_zone = route53.HostedZone.from_lookup(self, "ParentZone",
            domain_name=parent_domain
        )

        # =================================================================
        # 2. CHILD ZONE
        # =================================================================
        self.hosted_zone = route53.PublicHostedZone(self, "HostedZone",
            zone_name=self.fqdn,
            comment=f"Hosted Zone containing all records for the {service_label}. subdomain"
        )

        # =================================================================
        # 3. DELEGATION (NS record in the parent zone)
        # =================================================================
        self.delegation_record = route53.ZoneDelegationRecord(self, "DelegationRecord",
            zone=self.parent_zone,
            record_name=self.fqdn,
            name_servers=self.hosted_zone.hosted_zone_name_servers,
            comment=f"Delegate {self.fqdn} to the subdomain's hosted zone.",
            delete_existing=overwrite_existing_delegation
        )

        if overwrite_existing_delegation:
            Annotations.of(self).add_warning_v2(
                "construct-hub:overwriteDelegation",
                f"An existing record named {self.fqdn} in {parent_domain} will be deleted "
                "and replaced by the delegation record."
            )

        # =================================================================
        # 4. CERTIFICATE (DNS validation against the child zone)
        # =================================================================
        self.certificate = acm.Certificate(self, "Certificate",
            domain_name=self.fqdn,
            validation=acm.CertificateValidation.from_dns(self.hosted_zone)
        )

    @property
    def domain(self) -> construct_hub.Domain:
        """
        Domain configuration handed to the Construct Hub.
        """
        return construct_hub.Domain(
            cert=self.certificate,
            zone=self.hosted_zone,
            monitor_certificate_expiration=True
        )
