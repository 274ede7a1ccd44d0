"""Nobl9 Project Provisioner Flask Application Package.

To use the Flask app:
    from app.flask_app import create_app

To use the provisioning pipeline without HTTP:
    from app.core.provisioning_service import create_project

To use the Nobl9 client:
    from app.core.nobl9 import Nobl9Client, UserService, ObjectService
"""
# Note: We don't import flask_app by default to avoid Flask dependency
# for CLI scripts that only use app.core
