"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations of the record ports (GraphQL over HTTP
    and an offline mock) used by record list controllers and mutation
    workflows.

Dependencies:
    ``records_graphql`` and ``http_client`` depend on ``requests``; the mock
    depends only on domain types.
"""
