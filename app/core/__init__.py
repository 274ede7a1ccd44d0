"""Core Business Logic Module

This module provides the core business logic for project provisioning,
independent of HTTP frameworks.

Architecture:
    - Pure Python (no Flask dependencies in core logic)
    - Testable without HTTP mocking
    - Reusable across different interfaces (HTTP API, CLI)

Module Structure:
    - nobl9/                  : Low-level Nobl9 API client (users, apply)
    - provisioning_service.py : Request -> Project + RoleBindings pipeline
    - validators.py           : Request and user identifier validation
    - naming.py               : RFC-1123 role binding names
    - roles.py                : Assignable project roles
    - models.py               : Request/result dataclasses
    - exceptions.py           : Reportable provisioning failures

Usage Pattern:
    Import explicitly when needed:
        from app.core.provisioning_service import create_project, ProjectProvisioner
        from app.core.validators import validate_create_project_request
        from app.core.naming import build_role_binding_name
"""
