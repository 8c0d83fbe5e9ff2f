"""
Formflow: flow-graph validation and field ordering for visual form builders.

A form is composed as a directed graph of structural markers and input
fields; formflow decides which connections are legal and linearizes the
graph into one deterministic list of fields to render and submit.
"""

__version__ = "0.1.0"
