"""
LCPlatform DataStore - In-memory relational data mock engine

A provider-agnostic DataStore backend for local development and testing.
Interprets a narrow SQL subset over in-memory tables with predicate
evaluation, ordering, projection, snapshot transactions and idempotent
migration replay.
"""

__version__ = "0.1.0"
__author__ = "LCPlatform Contributors"
