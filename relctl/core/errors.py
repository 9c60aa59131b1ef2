"""Process exit codes.

CI workflows branch on these values, so they are part of the command line
contract. VERIFICATION_FAILED is kept apart from the error codes: it means the
audit ran and found tags without a release, not that relctl could not run.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1  # malformed tag or stream, conflicting release tag, unknown candidate
    VERIFICATION_FAILED = 2
    ENV_ERROR = 3  # repository has no stream or tags, or the configuration is unusable
    NETWORK_ERROR = 4  # git remote or GitHub failed to answer
