"""
Brewline platform entry point.

gunicorn serves ``run:app``; ``python run.py`` starts the development server.
"""
import os

from app import create_app

# Default to production for container deployment
app = create_app(os.getenv('FLASK_ENV', 'production'))

if __name__ == '__main__':
    app.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=app.config.get('DEBUG', False),
    )
