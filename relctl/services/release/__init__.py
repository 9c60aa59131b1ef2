"""Release tag lifecycle: version parsing, decisions, collaborators, workflows."""
