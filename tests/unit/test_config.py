import pytest
import aws_cdk as core
import construct_hub

import config as hub_config
from config import HubConfig, RepositoryRef, get_config, get_required_env, parse_bool

REPOSITORY_ARN = "arn:aws:codeartifact:us-east-1:785465075102:repository/ai-package-index/ai-package-index"


@pytest.fixture
def env(monkeypatch):
    for key in ("CDK_DEFAULT_ACCOUNT", "CDK_DEFAULT_REGION"):
        monkeypatch.delenv(key, raising=False)
    values = {
        "TEST_ACCOUNT": "785465075102",
        "TEST_REGION": "us-east-1",
        "TEST_PARENT_DOMAIN": "sbox.ai.muyben.tech",
        "TEST_CODEARTIFACT_REPOSITORY_ARN": REPOSITORY_ARN,
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    for key in ("SERVICE_LABEL", "ISOLATION", "OVERWRITE_DELEGATION", "HOME_REDESIGN",
                "SEARCH_REDESIGN", "CODEARTIFACT_REPOSITORY_DESCRIPTION"):
        monkeypatch.delenv(f"TEST_{key}", raising=False)
    return monkeypatch


def test_env_context(env):
    app = core.App(context={"env": "test"})
    config = get_config(app)

    assert config.name == "test"
    assert config.stack_name == "private-construct-hub-test"
    assert config.account == "785465075102"
    assert config.parent_domain == "sbox.ai.muyben.tech"
    assert config.fqdn == "construct-hub.sbox.ai.muyben.tech"


def test_defaults(env):
    config = get_config(core.App(context={"env": "test"}))

    assert config.service_label == "construct-hub"
    assert config.isolation == construct_hub.Isolation.UNLIMITED_INTERNET_ACCESS
    assert config.overwrite_delegation is False
    assert config.home_redesign is True
    assert config.search_redesign is True
    assert config.repository_description is None


def test_optional_overrides(env):
    env.setenv("TEST_SERVICE_LABEL", "packages")
    env.setenv("TEST_ISOLATION", "no_internet_access")
    env.setenv("TEST_OVERWRITE_DELEGATION", "yes")
    env.setenv("TEST_SEARCH_REDESIGN", "false")
    config = get_config(core.App(context={"env": "test"}))

    assert config.fqdn == "packages.sbox.ai.muyben.tech"
    assert config.isolation == construct_hub.Isolation.NO_INTERNET_ACCESS
    assert config.overwrite_delegation is True
    assert config.home_redesign is True
    assert config.search_redesign is False


def test_account_falls_back_to_cdk_defaults(env):
    env.delenv("TEST_ACCOUNT")
    env.delenv("TEST_REGION")
    env.setenv("CDK_DEFAULT_ACCOUNT", "111122223333")
    env.setenv("CDK_DEFAULT_REGION", "eu-west-1")
    env.setenv("TEST_CODEARTIFACT_REPOSITORY_ARN", REPOSITORY_ARN.replace("us-east-1", "eu-west-1"))
    config = get_config(core.App(context={"env": "test"}))

    assert config.account == "111122223333"
    assert config.region == "eu-west-1"


@pytest.mark.parametrize("key", ["TEST_PARENT_DOMAIN", "TEST_CODEARTIFACT_REPOSITORY_ARN", "TEST_ACCOUNT"])
def test_missing_required_variable(env, key):
    env.delenv(key)
    with pytest.raises(RuntimeError, match=f"MISSING CONFIG.*{key}"):
        get_config(core.App(context={"env": "test"}))


def test_get_required_env_prefers_primary_key(monkeypatch):
    monkeypatch.setenv("PRIMARY_KEY", "primary")
    monkeypatch.setenv("FALLBACK_KEY", "fallback")
    assert get_required_env("PRIMARY_KEY", fallback="FALLBACK_KEY") == "primary"


def test_repository_ref_parses_arn():
    repository = RepositoryRef(REPOSITORY_ARN)

    assert repository.arn == REPOSITORY_ARN
    assert repository.region == "us-east-1"
    assert repository.domain_owner == "785465075102"
    assert repository.domain_name == "ai-package-index"
    assert repository.repository_name == "ai-package-index"


@pytest.mark.parametrize("arn", [
    "",
    "ai-package-index",
    "arn:aws:codeartifact:us-east-1:785465075102:domain/ai-package-index",
    "arn:aws:s3:::ai-package-index",
    "arn:aws:codeartifact:us-east-1:1234:repository/ai-package-index/ai-package-index",
])
def test_repository_ref_rejects_other_arns(arn):
    with pytest.raises(RuntimeError, match="INVALID CONFIG"):
        RepositoryRef(arn)


@pytest.mark.parametrize("overrides", [
    {"account": "12345"},
    {"region": "useast1"},
    {"parent_domain": "localhost"},
    {"parent_domain": "example.org."},
    {"service_label": "construct_hub"},
    {"isolation": "SOME_INTERNET_ACCESS"},
    {"region": "eu-west-1"},
])
def test_invalid_values_fail_before_synthesis(overrides):
    values = dict(
        env_name="test",
        account="785465075102",
        region="us-east-1",
        parent_domain="example.org",
        repository_arn=REPOSITORY_ARN,
    )
    values.update(overrides)
    with pytest.raises(RuntimeError, match="INVALID CONFIG"):
        HubConfig(**values)


def test_parent_domain_is_normalised():
    assert hub_config.validate_parent_domain(" Example.ORG ") == "example.org"


@pytest.mark.parametrize("value, expected", [
    (None, True),
    ("", True),
    ("TRUE", True),
    ("on", True),
    ("0", False),
    ("No", False),
])
def test_parse_bool(value, expected):
    assert parse_bool("KEY", value, default=True) is expected


def test_parse_bool_rejects_garbage():
    with pytest.raises(RuntimeError, match="'KEY' must be a boolean"):
        parse_bool("KEY", "maybe", default=False)


def test_repository_must_share_stack_region():
    with pytest.raises(RuntimeError, match="lives in us-east-1, but the stack deploys to eu-west-1"):
        HubConfig(
            env_name="test",
            account="785465075102",
            region="eu-west-1",
            parent_domain="example.org",
            repository_arn=REPOSITORY_ARN,
        )


def test_feature_flags_struct():
    config = HubConfig(
        env_name="test",
        account="785465075102",
        region="us-east-1",
        parent_domain="example.org",
        repository_arn=REPOSITORY_ARN,
        home_redesign=False,
    )

    assert config.feature_flags.home_redesign is False
    assert config.feature_flags.search_redesign is True


def test_service_label_shares_subdomain_validation():
    from stacks import subdomain

    assert subdomain.DNS_LABEL is hub_config.DNS_LABEL
