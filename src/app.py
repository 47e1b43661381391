from flask import Flask
import click
from config import load_config
from observability import debug_log
from observability.request_context import start_request, end_request
from routes.chat_image_upload import chat_image_bp
from routes.metrics import metrics_bp
from services.storage.chat_image_records import create_schema
from services.upload_handler import UploadHandler

def create_app(config=None):
    app = Flask(__name__)
    app.config.update(load_config())
    if config:
        app.config.update(config)

    debug_log.configure(app.config["DEBUG_LOG_PATH"])

    # handler gets its settings once, here; routes only call handle()
    app.extensions["chat_image_handler"] = UploadHandler.from_config(app.config)

    app.register_blueprint(chat_image_bp, url_prefix="/api")
    app.register_blueprint(metrics_bp, url_prefix="/api")

    @app.before_request
    def _before():
        start_request()

    @app.after_request
    def _after(response):
        return end_request(response)

    @app.cli.command("init-db")
    def init_db():
        """Create the chat_images table if it does not exist."""
        create_schema(app.config["DATABASE_URL"])
        click.echo("chat_images table ready")

    return app

if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=app.config["PORT"])
