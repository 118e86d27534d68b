"""ProposalGen Agents - external services used to enrich the proposal form"""
