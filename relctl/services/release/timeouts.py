from __future__ import annotations

# GH / API operations
GH_TIMEOUT_SECONDS = 60.0

# Local git operations (tag, rev-parse, for-each-ref)
GIT_TIMEOUT_SECONDS = 30.0

# Network-bound git operations (fetch, push, ls-remote)
GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
