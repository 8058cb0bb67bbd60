"""Infrastructure layer — referral graph, analyzer, network file loading.

This layer depends on stdlib, NetworkX, and the domain layer (errors and
value types). It must never import from services, commands, or output.
"""
