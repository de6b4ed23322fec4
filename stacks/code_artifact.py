from typing import Optional
from aws_cdk import (
    Annotations,
    RemovalPolicy,
    aws_codeartifact as codeartifact
)
from constructs import Construct

EXISTING_REPOSITORY_ID = "ExistingCodeRepository"


def existing_code_artifact_repository(
    scope: Construct,
    repository,
    description: Optional[str] = None
) -> codeartifact.CfnRepository:
    """
    Describes a CodeArtifact repository that already exists outside this stack.

    The resource is declared with the live repository's identifiers, a stable logical ID
    and a RETAIN removal policy, so the first deploy adopts it with `cdk import` and no
    later update or `cdk destroy` can replace or delete it.
    A plain first `cdk deploy` would try to create it and fail.
    """
    cfn_repository = codeartifact.CfnRepository(scope, EXISTING_REPOSITORY_ID,
        domain_name=repository.domain_name,
        domain_owner=repository.domain_owner,
        repository_name=repository.repository_name,
        description=description
    )

    # Sets both DeletionPolicy and UpdateReplacePolicy to Retain
    cfn_repository.apply_removal_policy(RemovalPolicy.RETAIN)
    cfn_repository.override_logical_id(EXISTING_REPOSITORY_ID)

    Annotations.of(cfn_repository).add_info(
        f"{repository.arn} already exists: adopt it with `cdk import` before the first `cdk deploy`."
    )
    return cfn_repository
