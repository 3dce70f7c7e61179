import os

from library_api import create_app

os.environ.setdefault("FLASK_ENV", "dev")
app = create_app()
# `flask --app api seed-db` populates the database

if __name__ == "__main__":
    app.run(debug=app.debug, port=int(os.getenv("PORT", "3000")))
