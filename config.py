import os
import re
from typing import Optional
import tldextract
import construct_hub
from dotenv import load_dotenv

# Load environment variables from a .env file
load_dotenv()

DEFAULT_SERVICE_LABEL = "construct-hub"
DEFAULT_ISOLATION = "UNLIMITED_INTERNET_ACCESS"

ISOLATION_MODES = {
    "NO_INTERNET_ACCESS": construct_hub.Isolation.NO_INTERNET_ACCESS,
    "LIMITED_INTERNET_ACCESS": construct_hub.Isolation.LIMITED_INTERNET_ACCESS,
    "UNLIMITED_INTERNET_ACCESS": construct_hub.Isolation.UNLIMITED_INTERNET_ACCESS,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

_ACCOUNT_RE = re.compile(r"^\d{12}$")
_REGION_RE = re.compile(r"^[a-z]{2}(-gov|-iso[a-z]*)?-[a-z]+-\d$")
DNS_LABEL = re.compile(r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?$")
_REPOSITORY_ARN_RE = re.compile(
    r"^arn:(?P<partition>aws[a-z-]*):codeartifact:(?P<region>[a-z0-9-]+):(?P<owner>\d{12}):"
    r"repository/(?P<domain>[a-z][a-z0-9-]{1,49})/(?P<name>[A-Za-z0-9][A-Za-z0-9._-]{1,99})$"
)

# Offline extractor: the bundled public suffix snapshot keeps synthesis deterministic
_extract = tldextract.TLDExtract(suffix_list_urls=())


class RepositoryRef:
    """
    Identifies an existing CodeArtifact repository by its ARN.
    """
    def __init__(self, arn: str):
        match = _REPOSITORY_ARN_RE.match(arn or "")
        if not match:
            raise RuntimeError(
                f"❌ INVALID CONFIG: '{arn}' is not a CodeArtifact repository ARN "
                "(arn:aws:codeartifact:<region>:<owner>:repository/<domain>/<name>)"
            )
        self.arn = arn
        self.region = match.group("region")
        self.domain_owner = match.group("owner")
        self.domain_name = match.group("domain")
        self.repository_name = match.group("name")


class HubConfig:
    """
    Stores environment-specific configuration for the Construct Hub stack.
    Every value is validated on construction.
    """
    def __init__(
        self,
        env_name: str,
        account: str,
        region: str,
        parent_domain: str,
        repository_arn: str,
        service_label: str = DEFAULT_SERVICE_LABEL,
        isolation: str = DEFAULT_ISOLATION,
        overwrite_delegation: bool = False,
        home_redesign: bool = True,
        search_redesign: bool = True,
        repository_description: Optional[str] = None
    ):
        self.name = env_name
        self.account = _validate(account, _ACCOUNT_RE, "account ID")
        self.region = _validate(region, _REGION_RE, "region")
        self.parent_domain = validate_parent_domain(parent_domain)
        self.service_label = _validate(service_label, DNS_LABEL, "service label")
        self.repository = RepositoryRef(repository_arn)
        if self.repository.region != self.region:
            raise RuntimeError(
                f"❌ INVALID CONFIG: Repository {repository_arn} lives in {self.repository.region}, "
                f"but the stack deploys to {self.region}"
            )
        # Only pushed to the adopted repository when set explicitly
        self.repository_description = repository_description

        if isolation not in ISOLATION_MODES:
            raise RuntimeError(
                f"❌ INVALID CONFIG: Unknown isolation '{isolation}', "
                f"expected one of {', '.join(sorted(ISOLATION_MODES))}"
            )
        self.isolation_name = isolation
        self.isolation = ISOLATION_MODES[isolation]

        # Replacing an existing NS record is destructive, so it is opt-in only
        self.overwrite_delegation = overwrite_delegation

        # UI feature flags passed straight through to the hub
        self.home_redesign = home_redesign
        self.search_redesign = search_redesign

    @property
    def fqdn(self) -> str:
        return f"{self.service_label}.{self.parent_domain}"

    @property
    def feature_flags(self) -> construct_hub.FeatureFlags:
        return construct_hub.FeatureFlags(
            home_redesign=self.home_redesign,
            search_redesign=self.search_redesign
        )

    @property
    def stack_name(self) -> str:
        return f"private-construct-hub-{self.name}"


def _validate(value: str, pattern: re.Pattern, label: str) -> str:
    if not pattern.match(value or ""):
        raise RuntimeError(f"❌ INVALID CONFIG: '{value}' is not a valid {label}")
    return value


def validate_parent_domain(domain: str) -> str:
    """
    Checks that the parent domain sits under a public suffix with a registrable name,
    e.g. 'sbox.ai.muyben.tech' or 'example.org'.
    """
    domain = (domain or "").strip().lower()
    if not domain or domain.startswith(".") or domain.endswith("."):
        raise RuntimeError(f"❌ INVALID CONFIG: '{domain}' is not a valid parent domain")

    extracted = _extract(domain)
    if not extracted.domain or not extracted.suffix:
        raise RuntimeError(
            f"❌ INVALID CONFIG: '{domain}' has no registrable domain under a public suffix"
        )
    return domain


def parse_bool(key: str, value: Optional[str], default: bool) -> bool:
    """
    Interprets an optional boolean environment variable.
    """
    if value is None or value.strip() == "":
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise RuntimeError(f"❌ INVALID CONFIG: '{key}' must be a boolean, got '{value}'")


def get_required_env(key: str, fallback: Optional[str] = None) -> str:
    """
    Retrieves a required environment variable or raises a RuntimeError if missing.
    The optional fallback names a second variable to try, e.g. CDK_DEFAULT_ACCOUNT.
    """
    value = os.getenv(key)
    if not value and fallback:
        value = os.getenv(fallback)
    if not value:
        raise RuntimeError(f"❌ MISSING CONFIG: Required environment variable '{key}' not found in .env")
    return value


def get_config(scope) -> HubConfig:
    """
    Factory function to generate the HubConfig object based on CDK context.
    Usage: cdk deploy -c env=prod
    """
    # Default to 'dev' environment if no context is provided
    env_name = scope.node.try_get_context("env") or "dev"
    prefix = env_name.upper()

    print(f"🔍 Initializing Construct Hub infrastructure for environment: {prefix}")

    # Load Mandatory Variables (account/region fall back to the cdk cli defaults)
    account = get_required_env(f"{prefix}_ACCOUNT", fallback="CDK_DEFAULT_ACCOUNT")
    region = get_required_env(f"{prefix}_REGION", fallback="CDK_DEFAULT_REGION")
    parent_domain = get_required_env(f"{prefix}_PARENT_DOMAIN")
    repository_arn = get_required_env(f"{prefix}_CODEARTIFACT_REPOSITORY_ARN")

    # Load Optional Variables
    service_label = os.getenv(f"{prefix}_SERVICE_LABEL") or DEFAULT_SERVICE_LABEL
    isolation = (os.getenv(f"{prefix}_ISOLATION") or DEFAULT_ISOLATION).upper()
    description = os.getenv(f"{prefix}_CODEARTIFACT_REPOSITORY_DESCRIPTION")

    flags = {}
    for key, default in (
        ("OVERWRITE_DELEGATION", False),
        ("HOME_REDESIGN", True),
        ("SEARCH_REDESIGN", True),
    ):
        env_key = f"{prefix}_{key}"
        flags[key.lower()] = parse_bool(env_key, os.getenv(env_key), default)

    return HubConfig(
        env_name=env_name,
        account=account,
        region=region,
        parent_domain=parent_domain,
        repository_arn=repository_arn,
        service_label=service_label,
        isolation=isolation,
        overwrite_delegation=flags["overwrite_delegation"],
        home_redesign=flags["home_redesign"],
        search_redesign=flags["search_redesign"],
        repository_description=description
    )
