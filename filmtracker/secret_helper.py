# Helper for loading SESSION_SECRET and DATABASE_PASSWORD from Secret Manager at runtime.
# Usage:
#   - Call "secret_helper.inject_secrets()" before Settings.from_env()
#
# This helper:
#  - leaves a variable alone when it is already set in the environment (local/dev)
#  - otherwise reads the secret named by <VAR>_SECRET_NAME in the project GCP_PROJECT
#  - sets os.environ[<VAR>] so Settings.from_env() picks it up
#  - logs errors rather than crashing; Settings validation reports what is still missing

from google.cloud import secretmanager
import os

from filmtracker.logging_config import get_logger

_logger = get_logger(__name__)

# Environment variable -> default secret name
MANAGED_SECRETS = {
    "SESSION_SECRET": "filmtracker-session-secret",
    "DATABASE_PASSWORD": "filmtracker-database-password",
}


def get_secret_from_manager(project_id: str, secret_name: str) -> str:
    client = secretmanager.SecretManagerServiceClient()
    name = f"projects/{project_id}/secrets/{secret_name}/versions/latest"
    response = client.access_secret_version(request={"name": name})
    return response.payload.data.decode("utf-8")


def load_secret(env_var: str, project_id: str = None, secret_name: str = None) -> str | None:
    """
    Return the value for env_var. Priority:
      1) env_var in the environment (local/dev)
      2) Secret Manager secret identified by (project_id, secret_name)
    If it fails to retrieve from Secret Manager, returns None and logs the error.
    """
    env_val = os.environ.get(env_var)
    if env_val:
        return env_val

    project_id = project_id or os.environ.get("GCP_PROJECT")
    secret_name = secret_name or os.environ.get(f"{env_var}_SECRET_NAME", MANAGED_SECRETS.get(env_var))

    if not project_id or not secret_name:
        _logger.warning("secret_lookup_skipped", env_var=env_var, reason="GCP_PROJECT or secret name not set")
        return None

    # Avoid hanging on local machines without GCP credentials.
    is_gcp = os.environ.get("GAE_ENV") or os.environ.get("CLOUD_RUN_SERVICE") or os.environ.get("GOOGLE_CLOUD_PROJECT")
    if not is_gcp and not os.environ.get("ENABLE_GCP_SECRETS"):
        _logger.info("secret_lookup_skipped", env_var=env_var, reason="not running on GCP")
        return None

    try:
        value = get_secret_from_manager(project_id, secret_name)
        _logger.info("secret_loaded", env_var=env_var, secret_name=secret_name)
        return value
    except Exception as e:
        _logger.error("secret_load_failed", env_var=env_var, secret_name=secret_name, error=str(e))
        return None


def inject_secrets(project_id: str = None) -> dict:
    """
    Ensure each managed variable is set in os.environ.

    Returns:
        Mapping of variable name to whether it is now set
    """
    results = {}
    for env_var in MANAGED_SECRETS:
        value = load_secret(env_var, project_id=project_id)
        if value:
            os.environ[env_var] = value
        results[env_var] = bool(value)
    return results
