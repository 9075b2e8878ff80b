"""
Jobly backend package.

Modules:
- sql: partial-update SET fragments and list-filter WHERE clauses
- db: PostgreSQL connection pooling + query helpers
- auth_utils: password hashing and JWT auth helpers
- schemas: Pydantic models for the REST API
- models: data access for companies, jobs and users
- main: the FastAPI application
"""
