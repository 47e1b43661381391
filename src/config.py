import os
from sqlalchemy.engine import URL

FILENAME_STRATEGIES = ("timestamp", "random")


def _flag(value):
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def database_url_from_env(environ=None):
    """
    DATABASE_URL wins when set; otherwise a MySQL URL is assembled from
    the DB_* variables so credentials never live in the code.
    """
    env = os.environ if environ is None else environ
    if env.get("DATABASE_URL"):
        return env["DATABASE_URL"]

    port = env.get("DB_PORT")
    return URL.create(
        "mysql+pymysql",
        username=env.get("DB_USER"),
        password=env.get("DB_PASSWORD"),
        host=env.get("DB_HOST", "localhost"),
        port=int(port) if port else None,
        database=env.get("DB_NAME"),
    )


def load_config(environ=None) -> dict:
    env = os.environ if environ is None else environ

    strategy = env.get("FILENAME_STRATEGY", "timestamp").lower()
    if strategy not in FILENAME_STRATEGIES:
        raise ValueError(f"Unknown FILENAME_STRATEGY: {strategy}")

    return {
        "UPLOAD_ROOT": env.get("UPLOAD_ROOT", os.getcwd()),
        "DATABASE_URL": database_url_from_env(env),
        "DEBUG_LOG_PATH": env.get("DEBUG_LOG_PATH", os.path.join("storage", "error_debug.log")),
        "FILENAME_STRATEGY": strategy,
        "REMOVE_ORPHANS": _flag(env.get("REMOVE_ORPHANS", "false")),
        "PORT": int(env.get("PORT", 8080)),
    }
