"""Infrastructure layer package.

Implements Port interfaces with concrete adapters (DynamoDB via boto3).
The actor_storage core MUST NOT import from this package directly.
"""
