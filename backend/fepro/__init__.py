# FEPRO contractor registry API
"""
GraphQL API for the FEPRO contractor (counterparty) registry.

Operations:
- Query contractors by id, status, name, INN, email or location
- Create, update and delete contractor records
"""
