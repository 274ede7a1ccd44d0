"""Gunicorn configuration file for the project provisioner.

Run with:
    gunicorn -c gunicorn.conf.py app.flask_app:app

Secret Loading Priority (post_fork hook):
1. NOBL9_SDK_CLIENT_SECRET already in the environment, or /run/secrets
   (Docker secrets) → read by app.config.settings, nothing to do here
2. Azure Key Vault direct access, only when AZURE_USE_KEYVAULT=true
   → Requires the ``keyvault`` extra and live Azure authentication
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '4000')}"
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
# Outbound Nobl9 calls share a 60s deadline; leave room for the response
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "75"))
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()


def post_fork(server, worker):
    """
    Called just after a worker has been forked.

    Loads the Nobl9 client secret from Azure Key Vault when it is not already
    provided by the environment or /run/secrets.
    """
    if os.environ.get("NOBL9_SDK_CLIENT_SECRET"):
        return

    from pathlib import Path
    secret_file = Path("/run/secrets") / "nobl9_sdk_client_secret"
    if secret_file.is_file():
        worker.log.info("Using Nobl9 client secret from /run/secrets")
        return

    use_kv = os.environ.get("AZURE_USE_KEYVAULT", "false").lower() == "true"
    if not use_kv:
        worker.log.info("Skipping Azure Key Vault direct access (AZURE_USE_KEYVAULT=false)")
        return

    try:
        from azure.identity import DefaultAzureCredential
        from azure.keyvault.secrets import SecretClient
    except ImportError:
        worker.log.error("Azure Key Vault requested but the 'keyvault' extra is not installed")
        return

    vault_name = os.environ.get("AZURE_KEY_VAULT_NAME")
    if not vault_name:
        worker.log.error("AZURE_KEY_VAULT_NAME required when AZURE_USE_KEYVAULT=true")
        return

    secret_name = os.environ.get("AZURE_SECRET_NOBL9_SDK_CLIENT_SECRET", "nobl9-sdk-client-secret").strip()
    secret_client = SecretClient(
        vault_url=f"https://{vault_name}.vault.azure.net",
        credential=DefaultAzureCredential(),
    )
    try:
        secret = secret_client.get_secret(secret_name)
    except Exception as exc:
        worker.log.error(f"Failed to load secret '{secret_name}': {exc}")
        return

    os.environ["NOBL9_SDK_CLIENT_SECRET"] = secret.value
    worker.log.info(f"Loaded secret '{secret_name}' into NOBL9_SDK_CLIENT_SECRET")
