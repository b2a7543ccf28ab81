"""Canned ``codefresh`` output shared by the tests."""

import textwrap

BUILDS_OUTPUT = textwrap.dedent(
    """\
    ID                       STATUS      STARTED                PIPELINE NAME
    64f1a2b3c4d5e6f708091a2b running     2023-09-01, 10:15:42   web/build-and-test
    64f1a2b3c4d5e6f708091a2c success     2023-09-01, 09:02:11   web/deploy
    64f1a2b3c4d5e6f708091a2d error       2023-08-31, 18:44:03   api/unit
    not a build row at all

    """
)

PIPELINES_OUTPUT = textwrap.dedent(
    """\
    NAME
    web/build-and-test
    web/deploy
    platform/infra/terraform
    orphan-without-project
    """
)

BUILDS_COMMAND = (
    "codefresh get builds --select-columns id,status,started,pipeline-name --branch main"
)
PIPELINES_COMMAND = "codefresh get pipelines --all --select-columns name"
